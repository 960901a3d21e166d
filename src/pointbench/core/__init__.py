"""PointBench core: point types, geometry, undo history and the point store."""

from pointbench.core.history import UndoManager
from pointbench.core.status import StatusLog
from pointbench.core.store import PointStore
from pointbench.core.types import DataPoint, DataTimestamp, Label, MinMaxPair

__all__ = [
    "DataPoint",
    "DataTimestamp",
    "Label",
    "MinMaxPair",
    "PointStore",
    "StatusLog",
    "UndoManager",
]
