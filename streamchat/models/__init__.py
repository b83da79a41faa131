"""Pydantic models shared by the relay and the stream client.

Models:
    - ChatRequest: Incoming chat request payload
    - ConversationTurn: One entry in the client-side conversation
    - Role: Speaker of a turn
    - StreamStatus: Outcome carried by the stream terminator
"""

from streamchat.models.schemas import (
    DEFAULT_DEVELOPER_MESSAGE,
    DEFAULT_MODEL,
    STREAM_TERMINATOR,
    SUPPORTED_MODELS,
    ChatRequest,
    ConversationTurn,
    HealthResponse,
    Role,
    StreamStatus,
    format_trailer,
    parse_trailer,
)

__all__ = [
    "DEFAULT_DEVELOPER_MESSAGE",
    "DEFAULT_MODEL",
    "STREAM_TERMINATOR",
    "SUPPORTED_MODELS",
    "ChatRequest",
    "ConversationTurn",
    "HealthResponse",
    "Role",
    "StreamStatus",
    "format_trailer",
    "parse_trailer",
]
