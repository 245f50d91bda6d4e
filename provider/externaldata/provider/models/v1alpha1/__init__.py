from .common import (  # noqa: F401
    Condition,
    ConditionReason,
    ConditionStatus,
    ConditionType,
    ConditionedStatus,
    Reference,
)
from .datasource import (  # noqa: F401
    DataSource,
    DataSourceParameters,
    DataSourceSpec,
    DataSourceStatus,
    SourceType,
)
from .providerconfig import (  # noqa: F401
    ProviderConfig,
    ProviderConfigSpec,
    ProviderConfigUsage,
    ProviderConfigUsageSpec,
    ResourceReference,
)
