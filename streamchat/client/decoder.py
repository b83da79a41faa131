"""Stateful decoding of the relay's byte stream."""

import codecs

from streamchat.models.schemas import STREAM_TERMINATOR


class StreamDecoder:
    """Turns raw body chunks into text increments.

    Bytes of a multi-byte character split across chunks are held back until
    the character is complete. Text after the terminator character is kept
    aside as the trailer and never returned as content.

    Raises UnicodeDecodeError on invalid UTF-8.
    """

    def __init__(self) -> None:
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
        self._trailer: list[str] | None = None

    @property
    def trailer(self) -> str | None:
        """Text after the terminator, or None if none has been seen."""
        if self._trailer is None:
            return None
        return "".join(self._trailer)

    def feed(self, data: bytes) -> str:
        return self._split(self._decoder.decode(data))

    def finish(self) -> str:
        """Flush the decoder at end of body.

        Raises UnicodeDecodeError if the body ended inside a character.
        """
        return self._split(self._decoder.decode(b"", final=True))

    def _split(self, text: str) -> str:
        if self._trailer is not None:
            self._trailer.append(text)
            return ""
        content, sep, rest = text.partition(STREAM_TERMINATOR)
        if sep:
            self._trailer = [rest]
        return content
