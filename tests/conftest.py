"""Pytest configuration and fixtures."""

import httpx
import pytest

from tests.helpers import FakeEasykubeClient, FakeEndpoint, make_session


@pytest.fixture
def ekclient():
    """Fake easykube client with no objects."""
    return FakeEasykubeClient()


@pytest.fixture
def endpoint():
    """HTTP endpoint that returns an empty JSON object."""
    return FakeEndpoint(httpx.Response(200, json={}))


@pytest.fixture
async def session(ekclient, endpoint):
    """Session bound to the fake easykube client and HTTP endpoint."""
    session = make_session(ekclient, endpoint)
    yield session
    await session.aclose()
