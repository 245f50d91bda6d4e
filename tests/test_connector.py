"""Unit tests for connecting data sources to their provider config."""

import httpx
import pytest

from externaldata.provider import errors
from externaldata.provider.config import settings
from externaldata.provider.connector import Connector, UsageTracker
from externaldata.provider.external import External

from tests.helpers import API_VERSION, FakeApiError, FakeEndpoint, make_datasource


URL = {"type": "url", "url": "data"}


class TestUsageTracker:
    """Tests for recording provider config usage."""

    async def test_track(self, ekclient):
        datasource = make_datasource(URL, provider_config="example")

        await UsageTracker(ekclient).track(datasource)

        (usage,) = ekclient.applied
        assert usage["apiVersion"] == API_VERSION
        assert usage["kind"] == "ProviderConfigUsage"
        assert usage["metadata"]["name"] == "datasource-test"
        assert usage["metadata"]["labels"] == {
            f"{settings.api_group}/provider-config": "example"
        }
        assert usage["spec"] == {
            "providerConfigRef": {"name": "example"},
            "resourceRef": {
                "apiVersion": API_VERSION,
                "kind": "DataSource",
                "name": "test",
            },
        }

    @pytest.mark.parametrize(
        "error", [FakeApiError(403), httpx.ConnectError("refused")]
    )
    async def test_track_failure(self, ekclient, error):
        ekclient.apply_error = error

        with pytest.raises(errors.UsageTrackingFailed) as excinfo:
            await UsageTracker(ekclient).track(make_datasource(URL))

        assert excinfo.value.name == "default"

    async def test_untrack(self, ekclient):
        usages = ekclient.resource(API_VERSION, "providerconfigusages")
        usages.objects[(None, "datasource-test")] = {"metadata": {"name": "datasource-test"}}

        await UsageTracker(ekclient).untrack(make_datasource(URL))

        assert usages.objects == {}


class TestConnector:
    """Tests for producing clients bound to a provider config."""

    async def test_connect(self, ekclient):
        ekclient.add_provider_config("default", "data-ns")

        external = await Connector(ekclient).connect(make_datasource(URL))

        async with external:
            assert isinstance(external, External)
            assert external.session.namespace == "data-ns"
        assert len(ekclient.applied) == 1

    async def test_connect_uses_referenced_config(self, ekclient):
        ekclient.add_provider_config("default", "default-ns")
        ekclient.add_provider_config("other", "other-ns")
        datasource = make_datasource(URL, provider_config="other")

        async with await Connector(ekclient).connect(datasource) as external:
            assert external.session.namespace == "other-ns"

    async def test_connect_http_settings(self, ekclient):
        ekclient.add_provider_config(
            "default",
            "data-ns",
            base_url="https://example/api/",
            headers={"Authorization": "Bearer token"},
        )
        endpoint = FakeEndpoint(httpx.Response(200, json={"a": 1}))
        connector = Connector(ekclient, transport=httpx.MockTransport(endpoint))
        datasource = make_datasource(URL)

        async with await connector.connect(datasource) as external:
            await external.create(datasource)

        assert datasource.status.at_provider == {"a": 1}
        (request,) = endpoint.requests
        assert request.url == "https://example/api/data"
        assert request.headers["Authorization"] == "Bearer token"

    async def test_config_not_found(self, ekclient):
        with pytest.raises(errors.ConfigNotFound) as excinfo:
            await Connector(ekclient).connect(make_datasource(URL, provider_config="missing"))

        assert excinfo.value.name == "missing"
        assert str(excinfo.value) == "cannot get ProviderConfig 'missing'"

    async def test_config_api_error_propagates(self, ekclient):
        ekclient.resource(API_VERSION, "providerconfigs").error = FakeApiError(500)

        with pytest.raises(FakeApiError):
            await Connector(ekclient).connect(make_datasource(URL))

    async def test_usage_tracked_before_config_resolved(self, ekclient):
        ekclient.apply_error = FakeApiError(403)

        # The provider config does not exist either, but tracking fails first
        with pytest.raises(errors.UsageTrackingFailed):
            await Connector(ekclient).connect(make_datasource(URL))

    async def test_not_a_datasource(self, ekclient):
        with pytest.raises(errors.NotThisResourceKind):
            await Connector(ekclient).connect(object())

        assert ekclient.applied == []
