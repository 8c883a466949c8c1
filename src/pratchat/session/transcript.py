"""
In-memory conversation transcript.

A Transcript is append-only and lives exactly as long as the connection that
owns it. Turns are committed one exchange at a time (user turn + model turn),
so the history handed to the generator always alternates user, model, user...
"""

from dataclasses import dataclass
from typing import Iterator, Literal

Role = Literal["user", "model"]


@dataclass(frozen=True)
class Turn:
    """One message attributed to the user or the model."""

    role: Role
    content: str

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


class Transcript:
    """Ordered, append-only history of turns for one session."""

    def __init__(self):
        self._turns: list[Turn] = []

    def __len__(self) -> int:
        return len(self._turns)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self._turns)

    @property
    def turns(self) -> list[Turn]:
        """A copy of the committed turns."""
        return list(self._turns)

    def expected_role(self) -> Role:
        """Role the next committed turn must have."""
        if not self._turns or self._turns[-1].role == "model":
            return "user"
        return "model"

    def append(self, turn: Turn) -> None:
        """
        Append a single turn.

        Raises:
            ValueError: If the turn would break user/model alternation.
        """
        expected = self.expected_role()
        if turn.role != expected:
            raise ValueError(
                f"Transcript expects a '{expected}' turn next, got '{turn.role}'"
            )
        self._turns.append(turn)

    def with_pending(self, turn: Turn) -> list[Turn]:
        """History plus one not-yet-committed turn, as sent to the generator."""
        return [*self._turns, turn]

    def commit_exchange(self, user_turn: Turn, model_turn: Turn) -> None:
        """Append a completed user/model round trip."""
        self.append(user_turn)
        self.append(model_turn)

    def to_list(self) -> list[dict[str, str]]:
        return [turn.to_dict() for turn in self._turns]
