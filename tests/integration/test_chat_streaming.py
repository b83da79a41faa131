"""Integration tests for the streaming relay endpoint.

Uses the actual FastAPI app over httpx ASGITransport with a scripted
upstream injected through dependency overrides.
"""

import asyncio
from collections.abc import AsyncGenerator
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
import pytest_check as check
from httpx import ASGITransport, AsyncClient

import streamchat.relay.upstream as upstream_module
from streamchat.api import app
from streamchat.api.chat import get_upstream, relay_increments
from streamchat.models.schemas import DEFAULT_MODEL
from streamchat.relay.config import RelayConfig
from streamchat.relay.upstream import UpstreamService
from tests.fakes import FakeUpstream


class TestStreamingEndpoint:
    """Integration tests for POST /api/chat."""

    async def test_stream_returns_plain_text(self, async_client: AsyncClient) -> None:
        async with async_client.stream(
            "POST", "/api/chat", json={"user_message": "Say hello"}
        ) as response:
            assert response.status_code == 200
            assert response.headers["content-type"].startswith("text/plain")
            assert response.headers["x-accel-buffering"] == "no"

    async def test_body_is_increments_then_terminator(
        self, async_client: AsyncClient
    ) -> None:
        response = await async_client.post("/api/chat", json={"user_message": "Hi"})

        assert response.status_code == 200
        assert response.text == "Hello, wörld!\x00complete"

    async def test_request_forwarded_to_upstream(
        self, async_client: AsyncClient, fake_upstream: FakeUpstream
    ) -> None:
        await async_client.post(
            "/api/chat",
            json={
                "developer_message": "Be terse.",
                "user_message": "Hello",
                "model": "gpt-4o-mini",
            },
        )

        request = fake_upstream.requests[0]
        check.equal(request.developer_message, "Be terse.")
        check.equal(request.user_message, "Hello")
        check.equal(request.model, "gpt-4o-mini")
        check.is_true(fake_upstream.closed)

    async def test_client_api_key_is_not_forwarded(
        self, async_client: AsyncClient, fake_upstream: FakeUpstream
    ) -> None:
        response = await async_client.post(
            "/api/chat",
            json={"user_message": "Hello", "api_key": "sk-from-browser"},
        )

        assert response.status_code == 200
        assert "api_key" not in fake_upstream.requests[0].model_dump()

    async def test_empty_upstream_still_terminates(
        self, async_client: AsyncClient, fake_upstream: FakeUpstream
    ) -> None:
        fake_upstream.increments = []

        response = await async_client.post("/api/chat", json={"user_message": "Hi"})

        assert response.status_code == 200
        assert response.text == "\x00complete"

    @pytest.mark.parametrize(
        "body",
        [{"user_message": ""}, {"user_message": "   "}, {}, {"developer_message": "x"}],
        ids=["empty", "whitespace", "missing", "only-developer"],
    )
    async def test_invalid_message_returns_422(
        self, async_client: AsyncClient, fake_upstream: FakeUpstream, body: dict
    ) -> None:
        response = await async_client.post("/api/chat", json=body)

        assert response.status_code == 422
        assert "detail" in response.json()
        assert fake_upstream.requests == []

    async def test_invalid_json_returns_422(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/chat",
            content="not valid json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 422

    async def test_wrong_http_method_returns_405(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/chat")

        assert response.status_code == 405

    async def test_cors_headers_present(self, async_client: AsyncClient) -> None:
        response = await async_client.post(
            "/api/chat",
            json={"user_message": "test"},
            headers={"Origin": "http://localhost:3000"},
        )

        assert "access-control-allow-origin" in response.headers


class TestUpstreamFailures:
    """Pre-stream and mid-stream upstream failures."""

    async def test_failure_before_first_increment_returns_502(
        self, async_client: AsyncClient, fake_upstream: FakeUpstream
    ) -> None:
        fake_upstream.fail_before = "invalid model credentials"

        response = await async_client.post("/api/chat", json={"user_message": "Hi"})

        check.equal(response.status_code, 502)
        check.is_in("invalid model credentials", response.json()["detail"])
        check.is_true(fake_upstream.closed)

    async def test_failure_mid_stream_sends_error_terminator(
        self, async_client: AsyncClient, fake_upstream: FakeUpstream
    ) -> None:
        fake_upstream.fail_after = 2

        response = await async_client.post("/api/chat", json={"user_message": "Hi"})

        assert response.status_code == 200
        assert response.text == "Hello, \x00error:provider connection reset"

    async def test_unconfigured_relay_returns_500(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv("LLM_API_KEY", raising=False)
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.setattr(upstream_module, "_upstream_service", None)
        app.dependency_overrides.clear()

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.post("/api/chat", json={"user_message": "Hi"})

        assert response.status_code == 500
        assert "not configured" in response.json()["detail"]


class TestModelSubstitution:
    """Relay behaviour for unknown model identifiers, with Agno patched."""

    @patch("streamchat.relay.upstream.OpenAIChat")
    @patch("streamchat.relay.upstream.Agent")
    async def test_unknown_model_uses_default(
        self,
        mock_agent_class: MagicMock,
        mock_openai_chat: MagicMock,
        async_client: AsyncClient,
    ) -> None:
        async def events() -> AsyncGenerator[SimpleNamespace]:
            yield SimpleNamespace(event="RunContent", content="Hi there")

        mock_agent_class.return_value.arun.return_value = events()
        service = UpstreamService(
            config=RelayConfig(api_key="sk-test", model_name=DEFAULT_MODEL)
        )
        app.dependency_overrides[get_upstream] = lambda: service

        response = await async_client.post(
            "/api/chat",
            json={"developer_message": "", "user_message": "Hello", "model": "unknown-id"},
        )

        check.equal(response.status_code, 200)
        check.equal(response.text, "Hi there\x00complete")
        check.equal(mock_openai_chat.call_args.kwargs["id"], DEFAULT_MODEL)

    @patch("streamchat.relay.upstream.OpenAIChat")
    async def test_model_construction_failure_returns_502(
        self, mock_openai_chat: MagicMock, async_client: AsyncClient
    ) -> None:
        mock_openai_chat.side_effect = ValueError("bad base url")
        service = UpstreamService(
            config=RelayConfig(api_key="sk-test", model_name=DEFAULT_MODEL)
        )
        app.dependency_overrides[get_upstream] = lambda: service

        response = await async_client.post("/api/chat", json={"user_message": "Hello"})

        check.equal(response.status_code, 502)
        check.is_in("bad base url", response.json()["detail"])


class TestRelayIncrements:
    """The forwarding loop used by the endpoint."""

    async def test_forwards_before_next_increment_exists(self) -> None:
        """Each increment is handed on before upstream produces the next."""
        produced: list[str] = []
        gate = asyncio.Event()

        async def upstream() -> AsyncGenerator[str]:
            produced.append("one")
            yield "one"
            await gate.wait()
            produced.append("two")
            yield "two"

        stream = upstream()
        relay = relay_increments(await anext(stream), stream)

        assert await anext(relay) == "one"
        assert produced == ["one"]

        gate.set()
        assert [chunk async for chunk in relay] == ["two", "\x00complete"]

    async def test_client_disconnect_closes_upstream(self) -> None:
        fake = FakeUpstream(["a", "b", "c"])
        stream = fake.stream_completion(MagicMock())
        relay = relay_increments(await anext(stream), stream)

        assert await anext(relay) == "a"
        await relay.aclose()

        assert fake.closed is True

    async def test_cancellation_closes_upstream(self) -> None:
        gate = asyncio.Event()
        closed = asyncio.Event()

        async def upstream() -> AsyncGenerator[str]:
            try:
                yield "first"
                await gate.wait()
                yield "never"
            finally:
                closed.set()

        stream = upstream()
        relay = relay_increments(await anext(stream), stream)
        received: list[str] = []

        async def consume() -> None:
            async for chunk in relay:
                received.append(chunk)

        task = asyncio.create_task(consume())
        while not received:
            await asyncio.sleep(0)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert closed.is_set()
        assert received == ["first"]


class TestHealth:
    """GET /api/health."""

    async def test_health_reports_ok(self, async_client: AsyncClient) -> None:
        response = await async_client.get("/api/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
