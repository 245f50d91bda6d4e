import logging
import typing as t

import httpx

from easykube import ApiError

from . import errors, sources
from .config import settings
from .external import External, check_kind
from .models import v1alpha1 as api
from .sources import configmap, http


logger = logging.getLogger(__name__)


class UsageTracker:
    """
    Records which data sources are using which provider configs.
    """
    def __init__(self, ekclient):
        self.ekclient = ekclient

    def usage_name(self, instance: api.DataSource) -> str:
        """
        Returns the name of the usage object for the given data source.
        """
        return f"datasource-{instance.metadata.name}"

    async def track(self, instance: api.DataSource):
        """
        Records that the data source is using the provider config that it references.
        """
        config_name = instance.spec.provider_config_ref.name
        usage = {
            "apiVersion": f"{settings.api_group}/{api.ProviderConfigUsage._meta.version}",
            "kind": "ProviderConfigUsage",
            "metadata": {
                "name": self.usage_name(instance),
                "labels": {
                    f"{settings.api_group}/provider-config": config_name,
                },
            },
            "spec": {
                "providerConfigRef": { "name": config_name },
                "resourceRef": {
                    "apiVersion": f"{settings.api_group}/{api.DataSource._meta.version}",
                    "kind": "DataSource",
                    "name": instance.metadata.name,
                },
            },
        }
        try:
            await self.ekclient.apply_object(usage, force = True)
        except (ApiError, httpx.TransportError) as exc:
            raise errors.UsageTrackingFailed(config_name, str(exc)) from exc

    async def untrack(self, instance: api.DataSource):
        """
        Removes the record that the data source is using its provider config.
        """
        ekapi = self.ekclient.api(f"{settings.api_group}/{api.ProviderConfigUsage._meta.version}")
        usages = await ekapi.resource(api.ProviderConfigUsage._meta.plural_name)
        await usages.delete(self.usage_name(instance))


class Connector:
    """
    Produces clients for data sources that are bound to their provider config.
    """
    def __init__(
        self,
        ekclient,
        transport: t.Optional[httpx.AsyncBaseTransport] = None
    ):
        self.ekclient = ekclient
        self.usage = UsageTracker(ekclient)
        # Allows the transport for HTTP sources to be replaced, e.g. for testing
        self.transport = transport

    async def _provider_config(self, name: str) -> api.ProviderConfig:
        ekapi = self.ekclient.api(f"{settings.api_group}/{api.ProviderConfig._meta.version}")
        ekresource = await ekapi.resource(api.ProviderConfig._meta.plural_name)
        try:
            data = await ekresource.fetch(name)
        except ApiError as exc:
            if exc.status_code == 404:
                raise errors.ConfigNotFound(name) from exc
            else:
                raise
        return api.ProviderConfig.model_validate(data)

    async def connect(self, obj) -> External:
        """
        Returns a client bound to the provider config of the given data source.
        """
        instance = check_kind(obj)
        await self.usage.track(instance)
        config = await self._provider_config(instance.spec.provider_config_ref.name)
        logger.debug(
            "Connecting data source '%s' using provider config '%s'",
            instance.metadata.name,
            config.metadata.name
        )
        session = sources.Session(
            namespace = config.spec.namespace,
            configmaps = configmap.ConfigMapFetcher(self.ekclient),
            http = http.HttpJsonFetcher(
                http.client(
                    base_url = config.spec.base_url,
                    headers = config.spec.headers,
                    transport = self.transport
                )
            )
        )
        return External(session)
