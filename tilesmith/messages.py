"""A queue of short-lived status messages with change notifications."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable


class NotifyEvent(Enum):
    ADD = auto()
    EXPIRE = auto()
    CLEAR = auto()


class MessageManagerError(RuntimeError):
    """Raised on misuse of a MessageManager."""


@dataclass
class _Message:
    text: str
    age: float = 0.0


class MessageManager:
    """Holds messages until they grow older than max_time."""

    def __init__(self, max_time: float) -> None:
        self.max_time = max_time
        self._messages: deque[_Message] = deque()
        self._subscribers: dict[str, Callable[[NotifyEvent], None]] = {}

    def add(self, message: str) -> None:
        self._messages.append(_Message(message))
        self._notify(NotifyEvent.ADD)

    def tick(self, delta: float) -> None:
        """Age all messages and drop those past max_time."""
        count = len(self._messages)
        for message in self._messages:
            message.age += delta
        self._messages = deque(m for m in self._messages if m.age <= self.max_time)
        if count != len(self._messages):
            self._notify(NotifyEvent.EXPIRE)

    def __len__(self) -> int:
        return len(self._messages)

    def clear(self) -> None:
        self._messages.clear()
        self._notify(NotifyEvent.CLEAR)

    def get(self, count: int | None = None) -> list[str]:
        """Return messages newest first, at most count of them if given."""
        result = [m.text for m in reversed(self._messages)]
        return result if count is None else result[:count]

    def last(self) -> str:
        """Return the newest message."""
        if not self._messages:
            raise MessageManagerError("there are no messages")
        return self._messages[-1].text

    def subscribe(self, key: str, callback: Callable[[NotifyEvent], None]) -> None:
        if key in self._subscribers:
            raise MessageManagerError(f"subscriber key {key} already exists")
        self._subscribers[key] = callback

    def unsubscribe(self, key: str) -> None:
        if key not in self._subscribers:
            raise MessageManagerError(f"subscriber key {key} does not exist")
        del self._subscribers[key]

    def _notify(self, event: NotifyEvent) -> None:
        for key in sorted(self._subscribers):
            self._subscribers[key](event)