"""Errors raised while submitting a chat message and reading its stream."""


class ChatClientError(Exception):
    """Base class for failures recorded as the conversation's last error."""

    pass


class InputValidationError(ChatClientError):
    """Raised for a blank message; no request is sent."""

    def __init__(self, message: str = "Please enter a message") -> None:
        super().__init__(message)


class ApiError(ChatClientError):
    """Raised when the relay answers with a non-2xx status."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"API error: {status_code}")


class RelayUnavailableError(ChatClientError):
    """Raised when the relay cannot be reached before any response."""

    pass


class StreamReadError(ChatClientError):
    """Raised when the body stream fails or cannot be decoded mid-read."""

    pass


class StreamTruncatedError(StreamReadError):
    """Raised when the body ends without the relay's terminator."""

    def __init__(self, message: str = "Response ended unexpectedly; it may be incomplete") -> None:
        super().__init__(message)


class RelayStreamError(StreamReadError):
    """Raised when the relay reports an upstream failure after streaming began."""

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"Response interrupted: {detail}")
