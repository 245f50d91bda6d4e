import typing as t

from pydantic import Field

from kube_custom_resource import CustomResource, Scope, schema

from ...config import settings
from .common import ConditionedStatus, Reference


class SourceType(str, schema.Enum):
    """
    Enum of the supported kinds of data source.
    """
    CONFIGMAP = "configmap"
    URL = "url"


class DataSourceParameters(schema.BaseModel):
    """
    Model for the configurable fields of a data source.

    Which of the optional fields is required depends on the type. This is checked when
    the data source is looked up rather than here, so that an invalid combination is
    reported in the status of the data source.
    """
    type: SourceType = Field(..., description = "The type of the data source.")
    config_map_name: t.Optional[str] = Field(
        None,
        description = (
            "The name of the config map to read the data from. "
            "The config map is read from the namespace of the provider config. "
            "Required when the type is configmap."
        )
    )
    url: t.Optional[str] = Field(
        None,
        description = (
            "The URL to read JSON data from. "
            "Relative URLs are resolved against the base URL of the provider config. "
            "Required when the type is url."
        )
    )


class DataSourceSpec(schema.BaseModel):
    """
    Model for the spec of a data source.
    """
    for_provider: DataSourceParameters = Field(
        ...,
        description = "The parameters for the data source."
    )
    provider_config_ref: Reference = Field(
        default_factory = lambda: Reference(name = settings.default_provider_config_name),
        description = "Reference to the provider config to use for the data source."
    )


class DataSourceStatus(ConditionedStatus):
    """
    Model for the status of a data source.
    """
    at_provider: t.Optional[schema.Any] = Field(
        None,
        description = (
            "The data that was last read from the source. "
            "Not present until the source has been read successfully."
        )
    )
    observed_parameters: t.Optional[DataSourceParameters] = Field(
        None,
        description = "The parameters that the data in atProvider was read with."
    )

    def record(self, parameters: DataSourceParameters, value: t.Any):
        """
        Records a value that was read from the source using the given parameters.
        """
        self.at_provider = value
        self.observed_parameters = parameters.model_copy()

    def recorded_value(self, parameters: DataSourceParameters) -> t.Any:
        """
        Returns the recorded value if it was read using the given parameters, None otherwise.
        """
        if self.observed_parameters == parameters:
            return self.at_provider
        else:
            return None

    def clear(self):
        """
        Clears the recorded value.
        """
        self.at_provider = None
        self.observed_parameters = None

    def discard_stale(self, parameters: DataSourceParameters) -> bool:
        """
        Clears the recorded value if it was not read using the given parameters.

        Returns True if a value was discarded.
        """
        if self.at_provider is not None and self.observed_parameters != parameters:
            self.clear()
            return True
        else:
            return False


class DataSource(
    CustomResource,
    scope = Scope.CLUSTER,
    subresources = {"status": {}},
    printer_columns = [
        {
            "name": "Type",
            "type": "string",
            "jsonPath": ".spec.forProvider.type",
        },
        {
            "name": "Ready",
            "type": "string",
            "jsonPath": ".status.conditions[?(@.type=='Ready')].status",
        },
        {
            "name": "Synced",
            "type": "string",
            "jsonPath": ".status.conditions[?(@.type=='Synced')].status",
        },
    ]
):
    """
    Model for a data source.
    """
    spec: DataSourceSpec = Field(
        ...,
        description = "The specification for the data source."
    )
    status: DataSourceStatus = Field(
        default_factory = DataSourceStatus,
        description = "The status of the data source."
    )

    @property
    def deletion_requested(self) -> bool:
        """
        Indicates whether the data source is being deleted.
        """
        return self.metadata.deletion_timestamp is not None
