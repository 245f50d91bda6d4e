import dataclasses
import typing as t

from .. import errors
from ..models.v1alpha1 import DataSourceParameters, SourceType
from .configmap import ConfigMapFetcher
from .http import HttpJsonFetcher


@dataclasses.dataclass(frozen = True)
class Session:
    """
    The context that data sources are looked up in, resolved from a provider config.
    """
    #: The namespace that config maps are read from
    namespace: str
    #: The fetcher for config map sources
    configmaps: ConfigMapFetcher
    #: The fetcher for HTTP sources
    http: HttpJsonFetcher

    async def aclose(self):
        """
        Release any resources held by the session.
        """
        await self.http.aclose()


async def lookup(
    source_type: t.Union[SourceType, str],
    params: DataSourceParameters,
    session: Session
) -> t.Any:
    """
    Validates the parameters for the given source type and returns the JSON value
    from the corresponding source.
    """
    if source_type == SourceType.CONFIGMAP:
        if not params.config_map_name:
            raise errors.InvalidParameters(
                "configMapName",
                "configMapName must be specified when type is configmap"
            )
        return await session.configmaps.fetch(session.namespace, params.config_map_name)
    elif source_type == SourceType.URL:
        if not params.url:
            raise errors.InvalidParameters("url", "uri must be specified when type is uri")
        return await session.http.fetch(params.url)
    else:
        raise errors.InvalidParameters("type", f"unknown datasource type {source_type}")
