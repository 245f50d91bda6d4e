import typing as t

from pydantic import Field, conint, constr

from configomatic import Configuration as BaseConfiguration, LoggingConfiguration


class Configuration(
    BaseConfiguration,
    default_path = "/etc/externaldata/provider.yaml",
    path_env_var = "EXTERNALDATA_PROVIDER_CONFIG",
    env_prefix = "EXTERNALDATA_PROVIDER"
):
    """
    Top-level configuration model.
    """
    #: The logging configuration
    logging: LoggingConfiguration = Field(default_factory = LoggingConfiguration)

    #: The API group of the provider CRDs
    api_group: constr(min_length = 1) = "externaldata.crossplane.io"
    #: The categories for the provider CRDs
    crd_categories: t.List[str] = Field(
        default_factory = lambda: ["crossplane", "managed", "externaldata"]
    )

    #: The field manager name to use for server-side apply
    easykube_field_manager: constr(min_length = 1) = "externaldata-provider"

    #: The provider config to use for data sources that do not specify one
    default_provider_config_name: constr(min_length = 1) = "default"

    #: The interval (seconds) at which data sources are re-observed
    #: There is no change notification from the sources, so drift is only
    #: noticed when the data source is polled
    poll_interval: conint(gt = 0) = 60
    #: The maximum time (seconds) that a single reconciliation may take
    reconcile_timeout: conint(gt = 0) = 30


settings = Configuration()
