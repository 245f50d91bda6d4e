import dataclasses
import enum
import logging
import typing as t

from . import errors
from .connector import Connector
from .external import ExternalObservation
from .models import v1alpha1 as api


logger = logging.getLogger(__name__)


@enum.unique
class ReconcileAction(enum.Enum):
    """
    The action taken by a reconciliation.
    """
    #: The recorded value was already up to date
    NONE = "NONE"
    #: A value was recorded for the first time
    CREATED = "CREATED"
    #: The recorded value was replaced
    UPDATED = "UPDATED"
    #: The recorded value was cleared
    DELETED = "DELETED"


@dataclasses.dataclass(frozen = True)
class ReconcileOutcome:
    """
    The outcome of a successful reconciliation.
    """
    #: The action that was taken
    action: ReconcileAction
    #: The observation that the action was based on
    observation: t.Optional[ExternalObservation] = None


def record_failure(instance: api.DataSource, message: str):
    """
    Records a failed reconciliation in the conditions of the data source.

    A value recorded with the current parameters is kept, so the data source stays ready
    if it has one. A value recorded with different parameters is discarded.
    """
    instance.status.discard_stale(instance.spec.for_provider)
    instance.status.set_condition(
        api.ConditionType.SYNCED,
        api.ConditionStatus.FALSE,
        api.ConditionReason.RECONCILE_ERROR,
        message
    )
    if instance.status.at_provider is None:
        instance.status.set_condition(
            api.ConditionType.READY,
            api.ConditionStatus.FALSE,
            api.ConditionReason.UNAVAILABLE,
            "no value has been read from the source"
        )


async def reconcile(connector: Connector, instance: api.DataSource) -> ReconcileOutcome:
    """
    Runs a single reconciliation of the given data source, updating its status in place.

    Errors are recorded in the conditions of the data source and re-raised.
    """
    try:
        async with await connector.connect(instance) as external:
            observation = await external.observe(instance)
            if instance.deletion_requested:
                await external.delete(instance)
                action = ReconcileAction.DELETED
            elif not observation.resource_exists:
                await external.create(instance)
                action = ReconcileAction.CREATED
            elif not observation.resource_up_to_date:
                await external.update(instance)
                action = ReconcileAction.UPDATED
            else:
                action = ReconcileAction.NONE
    except errors.NotThisResourceKind:
        # There is no status to record the failure in
        raise
    except errors.Error as exc:
        logger.warning("Reconciliation of data source '%s' failed: %s", instance.metadata.name, exc)
        record_failure(instance, str(exc))
        raise
    if action == ReconcileAction.DELETED:
        instance.status.set_condition(
            api.ConditionType.READY,
            api.ConditionStatus.FALSE,
            api.ConditionReason.DELETING
        )
    else:
        instance.status.set_condition(
            api.ConditionType.READY,
            api.ConditionStatus.TRUE,
            api.ConditionReason.AVAILABLE
        )
    instance.status.set_condition(
        api.ConditionType.SYNCED,
        api.ConditionStatus.TRUE,
        api.ConditionReason.RECONCILE_SUCCESS
    )
    logger.info(
        "Reconciled data source '%s' (action: %s)",
        instance.metadata.name,
        action.value
    )
    return ReconcileOutcome(action, observation)
