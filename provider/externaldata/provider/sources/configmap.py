import logging
import typing as t

import httpx

from easykube import ApiError

from .. import errors


logger = logging.getLogger(__name__)


class ConfigMapFetcher:
    """
    Reads the data from config maps using an easykube client.
    """
    def __init__(self, ekclient):
        self.ekclient = ekclient

    async def fetch(self, namespace: str, name: str) -> t.Dict[str, str]:
        """
        Returns the data of the named config map in the given namespace as a dict.
        """
        source = f"configmap/{namespace}/{name}"
        try:
            configmaps = await self.ekclient.api("v1").resource("configmaps")
            configmap = await configmaps.fetch(name, namespace = namespace)
        except ApiError as exc:
            if exc.status_code == 404:
                raise errors.SourceUnreachable(source, "config map does not exist") from exc
            else:
                raise errors.SourceUnreachable(source, str(exc)) from exc
        except httpx.TransportError as exc:
            raise errors.SourceUnreachable(source, str(exc) or type(exc).__name__) from exc
        data = dict(configmap.get("data") or {})
        logger.debug("Read %d keys from %s", len(data), source)
        return data
