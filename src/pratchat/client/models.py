"""
Client-side display records.

A DisplayedMessage is what the user sees: one per transcript turn, plus
notices (still working, connection lost) and error bubbles. Timestamps are
assigned locally when the message is created, never echoed from the server.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Iterator, Literal, Optional

Direction = Literal["outgoing", "incoming"]
Kind = Literal["message", "notice", "error"]


@dataclass(frozen=True)
class DisplayedMessage:
    text: str
    direction: Direction
    kind: Kind = "message"
    timestamp: datetime = field(default_factory=datetime.now)

    def format_time(self) -> str:
        """Hour and minute, e.g. '09:41'."""
        return self.timestamp.strftime("%H:%M")


class ChatLog:
    """Append-only list of displayed messages with an optional change listener."""

    def __init__(self, on_append: Optional[Callable[[DisplayedMessage], None]] = None):
        self._messages: list[DisplayedMessage] = []
        self._on_append = on_append

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[DisplayedMessage]:
        return iter(self._messages)

    def __getitem__(self, index: int) -> DisplayedMessage:
        return self._messages[index]

    @property
    def messages(self) -> list[DisplayedMessage]:
        return list(self._messages)

    def append(
        self, text: str, direction: Direction, kind: Kind = "message"
    ) -> DisplayedMessage:
        message = DisplayedMessage(text=text, direction=direction, kind=kind)
        self._messages.append(message)
        if self._on_append:
            self._on_append(message)
        return message

    def count(self, kind: Kind, text: Optional[str] = None) -> int:
        """Number of messages of a kind, optionally with exact text."""
        return sum(
            1
            for m in self._messages
            if m.kind == kind and (text is None or m.text == text)
        )
