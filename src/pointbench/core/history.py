"""Undo/redo event log for the point store.

Every mutation of the points is described by one event that carries enough
information to reverse it. The undo side is a bounded deque that evicts its
oldest entry when the bound is exceeded; the redo side is an unbounded stack
that is emptied whenever a new mutation is pushed.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Union

from pointbench.core.types import DataPoint, DataTimestamp

DEFAULT_MAX_HISTORY = 200
MAX_HISTORY_LIMIT = 65535


@dataclass
class AddEvent:
    point: DataPoint
    timestamp: DataTimestamp = field(default_factory=DataTimestamp.now)

    def __str__(self) -> str:
        return f"Add Point: {self.point}"


@dataclass
class EditEvent:
    index: int
    old_point: DataPoint
    new_point: DataPoint
    timestamp: DataTimestamp = field(default_factory=DataTimestamp.now)

    def __str__(self) -> str:
        return f"Edit Point: Index: {self.index} From: {self.old_point} To: {self.new_point}"


@dataclass
class DeleteEvent:
    index: int
    point: DataPoint
    timestamp: DataTimestamp = field(default_factory=DataTimestamp.now)

    def __str__(self) -> str:
        return f"Delete Point: {self.point} at index: {self.index}"


@dataclass
class ClearEvent:
    points: list[DataPoint]
    timestamp: DataTimestamp = field(default_factory=DataTimestamp.now)

    def __str__(self) -> str:
        return "Clear of Points"


@dataclass
class LoadEvent:
    points: list[DataPoint]
    timestamp: DataTimestamp = field(default_factory=DataTimestamp.now)

    def __str__(self) -> str:
        return "Load of Points"


Event = Union[AddEvent, EditEvent, DeleteEvent, ClearEvent, LoadEvent]


def validate_history_size(value: int | None) -> int | None:
    """Check a history bound: None (unbounded) or an int in 0..65535."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"History size must be an integer or None, got {value!r}")
    if not 0 <= value <= MAX_HISTORY_LIMIT:
        raise ValueError(f"History size must be between 0 and {MAX_HISTORY_LIMIT}, got {value}")
    return value


class UndoManager:
    """Two-stack undo/redo log. No knowledge of the points themselves."""

    def __init__(self, max_history_size: int | None = DEFAULT_MAX_HISTORY) -> None:
        self._max_history_size = validate_history_size(max_history_size)
        self._undo_events: deque[Event] = deque()
        self._redo_events: list[Event] = []

    def max_history_size(self) -> int | None:
        return self._max_history_size

    def set_max_history_size(self, value: int | None) -> None:
        """Change the bound and evict the oldest undo entries that no longer fit."""
        self._max_history_size = validate_history_size(value)
        if self._max_history_size is not None:
            while len(self._undo_events) > self._max_history_size:
                self._undo_events.popleft()

    def clear_all(self) -> None:
        self._undo_events.clear()
        self._redo_events.clear()

    def is_undo_empty(self) -> bool:
        return not self._undo_events

    def is_redo_empty(self) -> bool:
        return not self._redo_events

    def is_empty(self) -> bool:
        return self.is_undo_empty() and self.is_redo_empty()

    def undo_len(self) -> int:
        return len(self._undo_events)

    def redo_len(self) -> int:
        return len(self._redo_events)

    def undo_events(self) -> list[Event]:
        """Undo entries from oldest to newest."""
        return list(self._undo_events)

    def push(self, event: Event) -> None:
        """Record a new mutation. Clears the redo side and enforces the bound."""
        self._redo_events.clear()
        self._undo_events.append(event)
        if self._max_history_size is not None and len(self._undo_events) > self._max_history_size:
            self._undo_events.popleft()

    def undo(self) -> Event:
        """Move the newest undo entry onto the redo stack and return it.

        Raises IndexError when there is nothing to undo; callers check
        ``is_undo_empty()`` first.
        """
        if not self._undo_events:
            raise IndexError("undo called with an empty undo stack")
        event = self._undo_events.pop()
        self._redo_events.append(event)
        return event

    def redo(self) -> Event:
        """Move the newest redo entry back onto the undo side and return it.

        Raises IndexError when there is nothing to redo.
        """
        if not self._redo_events:
            raise IndexError("redo called with an empty redo stack")
        event = self._redo_events.pop()
        self._undo_events.append(event)
        # Bound may have been lowered while entries sat on the redo side
        if self._max_history_size is not None and len(self._undo_events) > self._max_history_size:
            self._undo_events.popleft()
        return event

    def timestamp(self) -> DataTimestamp:
        """Version of the data: timestamp of the newest undo entry.

        With an empty undo side this is the epoch, which is earlier than any
        real event, so undoing the only change never looks like older data.
        """
        if self._undo_events:
            return self._undo_events[-1].timestamp
        return DataTimestamp.epoch()
