"""Streaming chat endpoint for the relay.

Forwards upstream increments to the client as plain text, then closes the
body with an explicit terminator so the client can tell a finished answer
from a relay-side failure.
"""

import asyncio
import logging
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from streamchat.models.schemas import ChatRequest, StreamStatus, format_trailer
from streamchat.relay.upstream import UpstreamError, UpstreamService, get_upstream_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["chat"])

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"
STREAM_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
}


def get_upstream() -> UpstreamService:
    """Resolve the upstream service for a request.

    Raises:
        HTTPException: 500 if the relay has no provider credential.
    """
    try:
        return get_upstream_service()
    except ValueError as e:
        logger.error(f"Relay is not configured: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Relay is not configured with a provider API key",
        ) from e


async def relay_increments(
    first: str | None,
    stream: AsyncGenerator[str],
) -> AsyncGenerator[str]:
    """Forward increments one by one, then write the terminator.

    Args:
        first: Increment already pulled before the response started,
            or None if the upstream produced nothing.
        stream: The remaining upstream increments.

    Yields:
        Each increment unchanged, followed by the stream trailer.
    """
    try:
        if first is not None:
            yield first
        async for increment in stream:
            yield increment
    except UpstreamError as e:
        logger.error(f"Upstream failed mid-stream: {e}")
        yield format_trailer(StreamStatus.ERROR, str(e))
        return
    except asyncio.CancelledError:
        logger.info("Client disconnected, cancelling upstream call")
        raise
    finally:
        await stream.aclose()

    yield format_trailer(StreamStatus.COMPLETE)


@router.post("/chat")
async def chat(
    request: ChatRequest,
    upstream: Annotated[UpstreamService, Depends(get_upstream)],
) -> StreamingResponse:
    """Relay a streamed completion to the client.

    The first increment is awaited before the response is committed, so a
    failure to open the upstream call still yields a clean HTTP error.

    Args:
        request: Validated chat request.
        upstream: Service holding the provider credential.

    Returns:
        StreamingResponse of raw text increments plus terminator.

    Raises:
        422: Missing or blank user_message.
        500: Relay not configured.
        502: Upstream failed before producing any text.
    """
    stream = upstream.stream_completion(request)

    try:
        first = await anext(stream)
    except StopAsyncIteration:
        first = None
    except UpstreamError as e:
        logger.warning(f"Upstream failed before streaming: {e}")
        await stream.aclose()
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Upstream error: {e}",
        ) from e

    return StreamingResponse(
        relay_increments(first, stream),
        media_type=STREAM_MEDIA_TYPE,
        headers=STREAM_HEADERS,
    )
