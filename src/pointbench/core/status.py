"""Append-only status log shown to the user (the status bar)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger(__name__)

STARTER_MSG = "Status Messages"
SEPARATOR = "\n------\n"


@dataclass
class StatusEntry:
    """One message in the status log."""
    level: str  # "INFO" or "ERROR"
    message: str
    timestamp: datetime = field(default_factory=datetime.now)

    def __str__(self) -> str:
        return f"[{self.timestamp:%H:%M:%S} {self.level:<5}] {self.message}"


def format_error_chain(error: BaseException) -> str:
    """Render an exception and its causes, outermost first.

    ``raise X from Y`` links are followed, as are implicit ``__context__``
    links unless suppressed.
    """
    lines = [f"{type(error).__name__}: {error}"]
    seen = {id(error)}
    current: BaseException | None = error
    while current is not None:
        cause = current.__cause__
        if cause is None and not current.__suppress_context__:
            cause = current.__context__
        if cause is None or id(cause) in seen:
            break
        seen.add(id(cause))
        lines.append(f"Caused by: {type(cause).__name__}: {cause}")
        current = cause
    return "\n".join(lines)


class StatusLog:
    """Messages for the user, owned by the controller.

    Operations that need to report something receive the log as an argument.
    Background tasks never touch it; their messages travel back in the
    operation outcome and are appended on the foreground thread.
    """

    def __init__(self) -> None:
        self._entries: list[StatusEntry] = []

    def info(self, msg: str) -> None:
        entry = StatusEntry("INFO", str(msg))
        logger.debug("%s", entry)
        self._entries.append(entry)

    def error(self, msg: str) -> None:
        entry = StatusEntry("ERROR", str(msg))
        logger.error("%s", entry)
        self._entries.append(entry)

    def error_chain(self, error: BaseException, context: str = "") -> None:
        """Record an error together with its full cause chain."""
        chain = format_error_chain(error)
        self.error(f"{context}\n{chain}" if context else chain)

    def entries(self) -> list[StatusEntry]:
        return list(self._entries)

    def messages(self) -> list[str]:
        """Message texts without the time/level prefix."""
        return [e.message for e in self._entries]

    def last(self) -> StatusEntry | None:
        return self._entries[-1] if self._entries else None

    def text(self) -> str:
        return SEPARATOR.join([STARTER_MSG] + [str(e) for e in self._entries])

    def clear(self) -> None:
        self._entries = []

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)
