"""Client side of the streaming pipeline.

Issues chat requests to the relay, reads the streamed body incrementally,
and applies each increment to an explicitly owned conversation.

Responsibilities:
    - Input validation before any network call
    - Active stream handle with cancel-before-resubmit
    - Stateful UTF-8 decoding across chunk boundaries
    - Terminator checks to tell finished answers from truncated ones
"""

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
from streamchat.client.stream_client import StreamClient

__all__ = [
    "ApiError",
    "ChatClientError",
    "ClientConfig",
    "ConversationState",
    "InputValidationError",
    "RelayStreamError",
    "RelayUnavailableError",
    "StreamClient",
    "StreamDecoder",
    "StreamReadError",
    "StreamTruncatedError",
    "get_client_config",
]
