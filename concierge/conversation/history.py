"""Append-only conversation history."""

from collections.abc import Iterator

from concierge.conversation.models import Turn, TurnRole


class History:
    """Ordered record of the turns of one session.

    Only the conversation controller appends; everyone else gets a
    tuple snapshot via :attr:`turns`.
    """

    def __init__(self) -> None:
        self._turns: list[Turn] = []

    def append(self, role: TurnRole, text: str) -> Turn:
        turn = Turn(role=role, text=text)
        self._turns.append(turn)
        return turn

    def clear(self) -> None:
        self._turns.clear()

    @property
    def turns(self) -> tuple[Turn, ...]:
        return tuple(self._turns)

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.turns)
