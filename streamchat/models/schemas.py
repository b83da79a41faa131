from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_DEVELOPER_MESSAGE = "You are a helpful assistant."

SUPPORTED_MODELS: tuple[str, ...] = ("gpt-4.1-nano", "gpt-4.1-mini", "gpt-4o-mini")
DEFAULT_MODEL = "gpt-4.1-mini"

# Separates relayed text from the trailer. Never present in relayed text.
STREAM_TERMINATOR = "\x00"
_ERROR_PREFIX = "error:"


class Role(str, Enum):
    """Speaker of a conversation turn."""

    USER = "user"
    ASSISTANT = "assistant"


class StreamStatus(str, Enum):
    """Outcome written by the relay after the last increment."""

    COMPLETE = "complete"
    ERROR = "error"


class ChatRequest(BaseModel):
    """Request payload for the streaming chat endpoint.

    Unknown fields (including a client-supplied ``api_key``) are ignored:
    the relay only ever uses its own credential.

    Attributes:
        developer_message: System prompt; empty means the default prompt.
        user_message: The user's message. Must not be blank.
        model: Requested model identifier; the relay substitutes its
            default for unknown or missing values.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    developer_message: str = ""
    user_message: str = Field(..., min_length=1)
    model: str | None = None

    @field_validator("user_message")
    @classmethod
    def reject_blank_message(cls, v: str) -> str:
        """Reject whitespace-only messages without altering the text."""
        if not v.strip():
            raise ValueError("user_message must not be blank")
        return v

    @property
    def system_prompt(self) -> str:
        return self.developer_message or DEFAULT_DEVELOPER_MESSAGE


class ConversationTurn(BaseModel):
    """A single entry in the client-side conversation.

    Attributes:
        role: Who produced the turn.
        content: Turn text; grows in place while an assistant turn streams.
    """

    role: Role
    content: str = ""


class HealthResponse(BaseModel):
    status: str = "ok"


def format_trailer(status: StreamStatus, error: str | None = None) -> str:
    """Build the terminator the relay writes after the last increment."""
    if status is StreamStatus.COMPLETE:
        return STREAM_TERMINATOR + StreamStatus.COMPLETE.value
    message = (error or "upstream failure").replace(STREAM_TERMINATOR, "")
    return f"{STREAM_TERMINATOR}{_ERROR_PREFIX}{message}"


def parse_trailer(trailer: str) -> tuple[StreamStatus, str | None]:
    """Parse the text following the terminator character.

    Args:
        trailer: Everything after ``STREAM_TERMINATOR``.

    Returns:
        The stream status and, for failures, the relay's error message.

    Raises:
        ValueError: If the trailer is not one the relay produces.
    """
    if trailer == StreamStatus.COMPLETE.value:
        return StreamStatus.COMPLETE, None
    if trailer.startswith(_ERROR_PREFIX):
        return StreamStatus.ERROR, trailer[len(_ERROR_PREFIX):] or "upstream failure"
    raise ValueError(f"Malformed stream terminator: {trailer[:40]!r}")
