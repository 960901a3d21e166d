"""Point and label types shared by the store, the models and the file codecs."""

from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from enum import IntEnum

PointArray = tuple[float, float]


class Label(IntEnum):
    """Ground-truth or predicted label of a point. Anomaly is the positive class."""
    NORMAL = 0
    ANOMALY = 1

    def __str__(self) -> str:
        return "N" if self is Label.NORMAL else "A"

    @property
    def is_normal(self) -> bool:
        return self is Label.NORMAL

    @property
    def is_anomaly(self) -> bool:
        return self is Label.ANOMALY

    @classmethod
    def from_value(cls, value: object) -> Label:
        """Convert a stored 0/1 discriminant back into a label.

        Floats are accepted only when they are exactly 0.0 or 1.0.
        """
        if isinstance(value, bool):
            value = int(value)
        if isinstance(value, float):
            if not value.is_integer():
                raise ValueError(f"unexpected value for label of {value}")
            value = int(value)
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"unexpected value for label of {value}") from None


@dataclass(frozen=True)
class DataPoint:
    """A labelled 2-D sample."""
    x0: float
    x1: float
    label: Label

    def __str__(self) -> str:
        return f"[{self.x0:.2f}, {self.x1:.2f}, {self.label}]"

    def to_array(self) -> PointArray:
        return (self.x0, self.x1)

    def distance_to(self, other: DataPoint | PointArray) -> float:
        if isinstance(other, DataPoint):
            other = other.to_array()
        return math.hypot(self.x0 - other[0], self.x1 - other[1])


@dataclass(frozen=True)
class MinMaxPair:
    """Per-axis bounds of the points, used to frame the plot."""
    min: PointArray
    max: PointArray


_clock_lock = threading.Lock()
_last_issued = 0


@dataclass(frozen=True, order=True)
class DataTimestamp:
    """Version of the dataset, in nanoseconds since the Unix epoch.

    ``now()`` never hands out the same value twice within a process, so two
    events created back to back on a coarse clock still order correctly.
    """
    nanos: int

    @classmethod
    def now(cls) -> DataTimestamp:
        global _last_issued
        with _clock_lock:
            _last_issued = max(time.time_ns(), _last_issued + 1)
            return cls(_last_issued)

    @classmethod
    def epoch(cls) -> DataTimestamp:
        return cls(0)

    def __str__(self) -> str:
        return str(self.nanos)
