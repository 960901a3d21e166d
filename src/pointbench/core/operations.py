"""Long-running operations: state machine, outcomes and the background slot.

At most one operation runs at a time. The background thread gets owned copies
of what it needs and reports back through a single-capacity queue, which the
foreground polls once per tick.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Union

from pointbench.core.types import DataPoint
from pointbench.model.base import TrainResults

logger = logging.getLogger(__name__)


class OperationalState(Enum):
    NORMAL = "normal"
    SAVING = "saving"
    LOADING = "loading"
    TRAINING_EXPERIMENT = "training_experiment"
    RUNNING_EXTERNAL_EXPERIMENT = "running_external_experiment"

    @property
    def is_normal(self) -> bool:
        return self is OperationalState.NORMAL


@dataclass
class LoadPayload:
    points: list[DataPoint]
    path: Path
    message: str | None = None


@dataclass
class SavePayload:
    path: Path


@dataclass
class TrainPayload:
    results: TrainResults


@dataclass
class ExternalRunPayload:
    pass


Payload = Union[LoadPayload, SavePayload, TrainPayload, ExternalRunPayload]


@dataclass
class Cancelled:
    """The user backed out (e.g. closed the file picker)."""


@dataclass
class Success:
    payload: Payload


@dataclass
class Failed:
    error: BaseException
    context: str = ""


OperationOutcome = Union[Cancelled, Success, Failed]


@dataclass
class PendingOperation:
    """One background operation and the slot its outcome lands in."""
    state: OperationalState
    _slot: queue.Queue = field(default_factory=lambda: queue.Queue(maxsize=1), repr=False)
    _thread: threading.Thread | None = field(default=None, repr=False)

    @classmethod
    def spawn(
        cls,
        state: OperationalState,
        func: Callable[[], OperationOutcome],
        context: str = "",
    ) -> PendingOperation:
        """Run ``func`` on a daemon thread. Any exception, ``SystemExit`` included,
        becomes a ``Failed`` outcome so the slot is always filled.
        """
        op = cls(state=state)

        def _run() -> None:
            try:
                outcome = func()
            except BaseException as exc:
                logger.debug("Background %s failed", state.value, exc_info=True)
                outcome = Failed(exc, context)
            op._slot.put(outcome)

        op._thread = threading.Thread(target=_run, name=f"pointbench-{state.value}", daemon=True)
        op._thread.start()
        return op

    def poll(self) -> OperationOutcome | None:
        """Outcome if finished, else None. Never blocks."""
        try:
            return self._slot.get_nowait()
        except queue.Empty:
            return None

    def wait(self, timeout: float | None = None) -> OperationOutcome:
        """Block until the outcome is available. Raises TimeoutError."""
        try:
            return self._slot.get(timeout=timeout)
        except queue.Empty:
            raise TimeoutError(f"{self.state.value} did not finish within {timeout}s") from None
