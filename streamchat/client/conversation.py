"""In-memory conversation owned by one stream client."""

from streamchat.models.schemas import ConversationTurn, Role


class ConversationState:
    """Ordered turns plus the streaming and error indicators.

    At most one turn, the latest assistant turn, is active (still growing).
    Mutations aimed at a turn that is no longer active are ignored, so a
    stream orphaned by reset() cannot write into the new conversation.
    """

    def __init__(self) -> None:
        self.turns: list[ConversationTurn] = []
        self.last_error: str | None = None
        self._active: ConversationTurn | None = None

    @property
    def is_streaming(self) -> bool:
        return self._active is not None

    def is_active(self, turn: ConversationTurn) -> bool:
        return turn is self._active

    def add_user_turn(self, content: str) -> ConversationTurn:
        turn = ConversationTurn(role=Role.USER, content=content)
        self.turns.append(turn)
        return turn

    def open_assistant_turn(self) -> ConversationTurn:
        """Append the empty placeholder that streamed text is written into.

        Raises:
            RuntimeError: If another assistant turn is still streaming.
        """
        if self._active is not None:
            raise RuntimeError("An assistant turn is already streaming")
        turn = ConversationTurn(role=Role.ASSISTANT)
        self.turns.append(turn)
        self._active = turn
        return turn

    def append(self, turn: ConversationTurn, text: str) -> bool:
        """Grow ``turn`` by ``text``.

        Returns:
            False if ``turn`` is no longer active and nothing was written.
        """
        if not self.is_active(turn):
            return False
        turn.content += text
        return True

    def finalize(self, turn: ConversationTurn) -> None:
        if self.is_active(turn):
            self._active = None

    def discard(self, turn: ConversationTurn) -> None:
        if not self.is_active(turn):
            return
        # identity, not equality: other empty assistant turns compare equal
        self.turns = [t for t in self.turns if t is not turn]
        self._active = None

    def close_after_failure(self, turn: ConversationTurn) -> None:
        """Drop an empty placeholder; keep partial content as it stands."""
        if turn.content:
            self.finalize(turn)
        else:
            self.discard(turn)

    def reset(self) -> None:
        self.turns = []
        self.last_error = None
        self._active = None
