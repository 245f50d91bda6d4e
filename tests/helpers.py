"""Fakes and builders shared by the tests."""

import httpx

from easykube import ApiError

from externaldata.provider.config import settings
from externaldata.provider.models import v1alpha1 as api
from externaldata.provider.sources import Session, configmap, http


API_VERSION = f"{settings.api_group}/v1alpha1"


class FakeApiError(ApiError):
    """ApiError with a fixed status code that does not need a real response."""

    def __init__(self, status_code):
        Exception.__init__(self, f"fake API error ({status_code})")
        self._status_code = status_code

    @property
    def status_code(self):
        return self._status_code


class FakeResource:
    """In-memory stand-in for an easykube resource."""

    def __init__(self, objects):
        self.objects = objects
        self.error = None
        self.replaced = []

    async def fetch(self, name, namespace=None):
        if self.error is not None:
            raise self.error
        try:
            return self.objects[(namespace, name)]
        except KeyError:
            raise FakeApiError(404)

    async def delete(self, name, namespace=None):
        self.objects.pop((namespace, name), None)

    async def replace(self, name, data, namespace=None):
        if self.error is not None:
            raise self.error
        self.replaced.append((name, data))
        version = int(data["metadata"]["resourceVersion"]) + 1
        return {**data, "metadata": {**data["metadata"], "resourceVersion": str(version)}}


class FakeApi:
    def __init__(self, client, api_version):
        self.client = client
        self.api_version = api_version

    async def resource(self, name):
        return self.client.resource(self.api_version, name)


class FakeEasykubeClient:
    """In-memory stand-in for an easykube async client."""

    def __init__(self):
        self.resources = {}
        self.applied = []
        self.apply_error = None

    def resource(self, api_version, name):
        key = (api_version, name)
        if key not in self.resources:
            self.resources[key] = FakeResource({})
        return self.resources[key]

    def api(self, api_version):
        return FakeApi(self, api_version)

    async def apply_object(self, obj, force=False):
        if self.apply_error is not None:
            raise self.apply_error
        self.applied.append(obj)
        return obj

    def add_configmap(self, namespace, name, data):
        self.resource("v1", "configmaps").objects[(namespace, name)] = {
            "apiVersion": "v1",
            "kind": "ConfigMap",
            "metadata": {"name": name, "namespace": namespace},
            "data": data,
        }

    def add_provider_config(self, name, namespace, base_url=None, headers=None):
        spec = {"namespace": namespace}
        if base_url:
            spec["baseUrl"] = base_url
        if headers:
            spec["headers"] = headers
        self.resource(API_VERSION, "providerconfigs").objects[(None, name)] = {
            "apiVersion": API_VERSION,
            "kind": "ProviderConfig",
            "metadata": {"name": name},
            "spec": spec,
        }


class FakeEndpoint:
    """
    HTTP handler for httpx.MockTransport that records requests.

    Each request consumes the next response; the last one is repeated.
    A response may be an exception, which is raised instead.
    """

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = []

    def __call__(self, request):
        self.requests.append(request)
        if len(self.responses) > 1:
            response = self.responses.pop(0)
        else:
            response = self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response


def make_datasource(
    for_provider,
    at_provider=None,
    deleting=False,
    provider_config="default",
    name="test",
    observed_parameters=None,
):
    metadata = {"name": name, "resourceVersion": "1"}
    if deleting:
        metadata["deletionTimestamp"] = "2024-01-01T00:00:00Z"
        metadata["finalizers"] = [f"{settings.api_group}/finalizer"]
    data = {
        "apiVersion": API_VERSION,
        "kind": "DataSource",
        "metadata": metadata,
        "spec": {
            "forProvider": for_provider,
            "providerConfigRef": {"name": provider_config},
        },
    }
    if at_provider is not None:
        data["status"] = {
            "atProvider": at_provider,
            "observedParameters": observed_parameters or for_provider,
        }
    return api.DataSource.model_validate(data)


def make_session(ekclient, endpoint, namespace="default"):
    return Session(
        namespace=namespace,
        configmaps=configmap.ConfigMapFetcher(ekclient),
        http=http.HttpJsonFetcher(
            http.client(transport=httpx.MockTransport(endpoint))
        ),
    )
