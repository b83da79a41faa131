"""Pytest fixtures and shared test configuration.

Fixtures:
    - fake_upstream: Scripted upstream stream injected into the relay
    - async_client: HTTPX client for relay API testing over ASGI
    - client_config: Stream client configuration pointing at the ASGI relay
"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from streamchat.api import app
from streamchat.api.chat import get_upstream
from streamchat.client.config import ClientConfig
from tests.fakes import FakeUpstream


@pytest.fixture
def fake_upstream() -> FakeUpstream:
    """Upstream producing a short greeting in four increments."""
    return FakeUpstream(["Hello", ", ", "wörld", "!"])


@pytest.fixture
async def async_client(fake_upstream: FakeUpstream) -> AsyncGenerator[AsyncClient]:
    """Create async HTTP client for relay testing.

    Args:
        fake_upstream: Upstream injected in place of the provider.

    Yields:
        Configured AsyncClient for making test requests.
    """
    app.dependency_overrides[get_upstream] = lambda: fake_upstream
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def client_config() -> ClientConfig:
    return ClientConfig(api_base_url="http://test")
