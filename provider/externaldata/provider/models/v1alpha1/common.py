import datetime
import typing as t

from pydantic import Field

from kube_custom_resource import schema


class Reference(schema.BaseModel):
    """
    Model for a reference to another object by name.
    """
    name: schema.constr(min_length = 1) = Field(
        ...,
        description = "The name of the referenced object."
    )


class ConditionType(str, schema.Enum):
    """
    Enum of the possible condition types.
    """
    READY = "Ready"
    SYNCED = "Synced"


class ConditionStatus(str, schema.Enum):
    """
    Enum of the possible condition statuses.
    """
    TRUE = "True"
    FALSE = "False"
    UNKNOWN = "Unknown"


class ConditionReason(str, schema.Enum):
    """
    Enum of the possible condition reasons.
    """
    AVAILABLE = "Available"
    UNAVAILABLE = "Unavailable"
    DELETING = "Deleting"
    RECONCILE_SUCCESS = "ReconcileSuccess"
    RECONCILE_ERROR = "ReconcileError"


class Condition(schema.BaseModel):
    """
    Model for a condition of a managed resource.
    """
    type: ConditionType = Field(..., description = "The type of the condition.")
    status: ConditionStatus = Field(..., description = "The status of the condition.")
    reason: ConditionReason = Field(..., description = "The reason for the condition.")
    message: str = Field(
        "",
        description = "A human-readable message with details about the condition."
    )
    last_transition_time: datetime.datetime = Field(
        ...,
        description = "The time at which the status of the condition last changed."
    )


class ConditionedStatus(schema.BaseModel, extra = "allow"):
    """
    Base model for a status that carries conditions.
    """
    conditions: t.List[Condition] = Field(
        default_factory = list,
        description = "The current conditions of the resource."
    )

    def get_condition(self, type: ConditionType) -> t.Optional[Condition]:
        """
        Returns the condition with the given type, or None if it is not set.
        """
        return next((c for c in self.conditions if c.type == type), None)

    def set_condition(
        self,
        type: ConditionType,
        status: ConditionStatus,
        reason: ConditionReason,
        message: str = ""
    ):
        """
        Sets the condition with the given type.

        The transition time is only updated when the status of the condition changes.
        """
        existing = self.get_condition(type)
        if existing and existing.status == status:
            transition_time = existing.last_transition_time
        else:
            transition_time = datetime.datetime.now(tz = datetime.timezone.utc)
        condition = Condition(
            type = type,
            status = status,
            reason = reason,
            message = message,
            last_transition_time = transition_time
        )
        # Assign a new list so that the assignment is validated
        self.conditions = [
            *(c for c in self.conditions if c.type != type),
            condition,
        ]
