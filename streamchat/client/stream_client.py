"""Stream client: submits chat messages and applies streamed text live.

Architecture Decisions:

1. **Explicit state** - The client owns one ConversationState, created with
   the client and reset through clear(). Nothing lives in module globals.

2. **Active stream handle** - Each submission runs its stream in a task held
   as the active handle. A new submission cancels and awaits the previous
   handle first, so at most one assistant turn ever grows.

3. **Stateful decoding** - Body bytes go through an incremental UTF-8
   decoder, so a character split across network chunks is applied whole.

4. **Errors recorded at the boundary** - Failures become the conversation's
   last_error instead of propagating to the UI. Nothing is retried; the
   user resubmits.
"""

import asyncio
import logging
from collections.abc import Callable

import httpx

from streamchat.client.config import ClientConfig, get_client_config
from streamchat.client.conversation import ConversationState
from streamchat.client.decoder import StreamDecoder
from streamchat.client.errors import (
    ApiError,
    ChatClientError,
    InputValidationError,
    RelayStreamError,
    RelayUnavailableError,
    StreamReadError,
    StreamTruncatedError,
)
from streamchat.models.schemas import (
    DEFAULT_DEVELOPER_MESSAGE,
    DEFAULT_MODEL,
    ChatRequest,
    ConversationTurn,
    StreamStatus,
    parse_trailer,
)

logger = logging.getLogger(__name__)


def _error_detail(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict) and "detail" in body:
        return str(body["detail"])
    return str(body)


class StreamClient:
    """Conversation controller talking to the stream relay.

    Args:
        config: Client configuration. Loads from environment if not provided.
        state: Conversation to drive. A fresh one is created if not provided.
        http_client: Shared httpx client; the stream client closes it only
            if it created it.
        on_update: Called with the state after every mutation.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        state: ConversationState | None = None,
        http_client: httpx.AsyncClient | None = None,
        on_update: Callable[[ConversationState], None] | None = None,
    ) -> None:
        self._config = config or get_client_config()
        self.state = state or ConversationState()
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self._config.timeout)
        self._on_update = on_update
        self._active: asyncio.Task[None] | None = None

    async def __aenter__(self) -> "StreamClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    @property
    def is_streaming(self) -> bool:
        return self._active is not None and not self._active.done()

    async def submit(
        self,
        user_message: str,
        *,
        developer_message: str = "",
        model: str = DEFAULT_MODEL,
    ) -> None:
        """Send a message and stream the answer into the conversation.

        Completes when the stream ends, fails, or is cancelled. Failures are
        recorded in ``state.last_error``.

        Args:
            user_message: Text to send; rejected if blank.
            developer_message: System prompt; empty selects the default.
            model: Model identifier to request.
        """
        if not user_message.strip():
            self._record(InputValidationError())
            return

        # another submit may have started a stream while we waited
        while self.is_streaming:
            await self.cancel()

        request = ChatRequest(
            developer_message=developer_message or DEFAULT_DEVELOPER_MESSAGE,
            user_message=user_message,
            model=model,
        )

        self.state.last_error = None
        self.state.add_user_turn(user_message)
        self._notify()

        task = asyncio.create_task(self._run_stream(request))
        self._active = task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            task.cancel()
            raise
        finally:
            if self._active is task and task.done():
                self._active = None

        if task.cancelled():
            logger.info("Stream cancelled before completion")
            return

        error = task.exception()
        if error is None:
            return
        if isinstance(error, ChatClientError):
            self._record(error)
            return
        raise error

    async def cancel(self) -> None:
        """Cancel the active stream, if any, and wait for it to stop."""
        task = self._active
        if task is None:
            return
        if not task.done():
            task.cancel()
            await asyncio.wait({task})
        if self._active is task:
            self._active = None

    def clear(self) -> None:
        """Empty the conversation and abandon any active stream."""
        if self._active is not None and not self._active.done():
            self._active.cancel()
        self.state.reset()
        self._notify()

    async def aclose(self) -> None:
        await self.cancel()
        if self._owns_http:
            await self._http.aclose()

    def _notify(self) -> None:
        if self._on_update is not None:
            self._on_update(self.state)

    def _record(self, error: ChatClientError) -> None:
        logger.warning(f"Chat request failed: {error}")
        self.state.last_error = str(error)
        self._notify()

    async def _run_stream(self, request: ChatRequest) -> None:
        http_request = self._http.build_request(
            "POST",
            self._config.chat_url,
            json=request.model_dump(),
        )
        try:
            response = await self._http.send(http_request, stream=True)
        except httpx.HTTPError as e:
            raise RelayUnavailableError(f"Connection failed: {e}") from e

        try:
            if response.is_error:
                await response.aread()
                raise ApiError(response.status_code, _error_detail(response))

            turn = self.state.open_assistant_turn()
            self._notify()
            try:
                await self._read_into(turn, response)
            except (ChatClientError, asyncio.CancelledError):
                self.state.close_after_failure(turn)
                self._notify()
                raise
        finally:
            await response.aclose()

    async def _read_into(self, turn: ConversationTurn, response: httpx.Response) -> None:
        decoder = StreamDecoder()
        try:
            async for chunk in response.aiter_bytes():
                if not self.state.is_active(turn):
                    logger.info("Conversation was cleared, dropping orphaned stream")
                    return
                self._apply(turn, decoder.feed(chunk))
            self._apply(turn, decoder.finish())
        except UnicodeDecodeError as e:
            raise StreamReadError(f"Could not decode response: {e.reason}") from e
        except httpx.HTTPError as e:
            raise StreamReadError(f"Stream read failed: {e}") from e

        if not self.state.is_active(turn):
            return

        if decoder.trailer is None:
            raise StreamTruncatedError()
        try:
            status, detail = parse_trailer(decoder.trailer)
        except ValueError as e:
            raise StreamReadError(str(e)) from e
        if status is StreamStatus.ERROR:
            raise RelayStreamError(detail or "upstream failure")

        self.state.finalize(turn)
        self.state.last_error = None
        self._notify()

    def _apply(self, turn: ConversationTurn, text: str) -> None:
        if text and self.state.append(turn, text):
            self._notify()
