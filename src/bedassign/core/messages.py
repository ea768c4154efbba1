"""
User-facing reassignment messages.

Every successful reassignment posts one message naming the pawns
involved so the host UI can highlight them. Posting is a no-op when
``output_reassignment_messages`` is off.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Iterable, Iterator

if TYPE_CHECKING:
    from bedassign.core.config import AssignmentConfig
    from bedassign.core.pawn import Pawn


@dataclass
class ReassignmentMessage:
    """A positive-event notification for the host UI."""
    text: str
    pawn_ids: list[str] = field(default_factory=list)
    tick: int | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "pawn_ids": list(self.pawn_ids), "tick": self.tick}


class MessageLog:
    """Bounded in-memory message history with optional listeners."""

    def __init__(self, config: AssignmentConfig, max_messages: int = 200) -> None:
        self.config = config
        self._messages: deque[ReassignmentMessage] = deque(maxlen=max_messages)
        self._listeners: list[Callable[[ReassignmentMessage], None]] = []
        self.current_tick: int | None = None

    def subscribe(self, listener: Callable[[ReassignmentMessage], None]) -> None:
        self._listeners.append(listener)

    def post(self, text: str, pawns: Iterable[Pawn]) -> ReassignmentMessage | None:
        if not self.config.output_reassignment_messages:
            return None
        message = ReassignmentMessage(
            text=text,
            pawn_ids=[p.id for p in pawns if p is not None],
            tick=self.current_tick,
        )
        self._messages.append(message)
        for listener in self._listeners:
            listener(message)
        return message

    def recent(self, n: int | None = None) -> list[ReassignmentMessage]:
        messages = list(self._messages)
        return messages if n is None else messages[-n:]

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ReassignmentMessage]:
        return iter(self._messages)
