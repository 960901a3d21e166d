"""Point store: the labelled points plus their undo/redo history.

Every public mutator pushes an event that can reverse it and invalidates the
cached bounds. Nothing else is allowed to change the points.
"""

from __future__ import annotations

import logging
import math
import sys

import pandas as pd

from pointbench.core.geometry import closest_point_index
from pointbench.core.history import (
    DEFAULT_MAX_HISTORY,
    AddEvent,
    ClearEvent,
    DeleteEvent,
    EditEvent,
    Event,
    LoadEvent,
    UndoManager,
)
from pointbench.core.status import StatusLog
from pointbench.core.types import DataPoint, DataTimestamp, Label, MinMaxPair, PointArray

logger = logging.getLogger(__name__)

BOUNDARY_MARGIN = 1.1  # 10% wider than the data on each axis
DEFAULT_DECIMAL_PLACES_FOR_ROUNDING = 0
MAX_DECIMAL_PLACES = 10


class HistoryDesyncError(RuntimeError):
    """The event log no longer describes the points it is supposed to undo."""


def round_half_away(value: float, decimal_places: int) -> float:
    """Round to ``decimal_places``, halves away from zero."""
    ten_pow = 10.0 ** decimal_places
    return math.copysign(math.floor(abs(value) * ten_pow + 0.5), value) / ten_pow


def _validate_decimal_places(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"Decimal places must be an integer, got {value!r}")
    if not 0 <= value <= MAX_DECIMAL_PLACES:
        raise ValueError(f"Decimal places must be between 0 and {MAX_DECIMAL_PLACES}, got {value}")
    return value


class PointStore:
    """Owns the point collection. No UI logic."""

    def __init__(
        self,
        rounding_decimal_places: int | None = None,
        max_history_size: int | None = DEFAULT_MAX_HISTORY,
    ) -> None:
        self._points: list[DataPoint] = []
        self._rounding_decimal_places: int | None = None
        if rounding_decimal_places is not None:
            self.rounding_decimal_places = rounding_decimal_places
        self._undo_manager = UndoManager(max_history_size)
        self._cached_min_max: MinMaxPair | None = None

    # --- queries ---

    def points(self) -> tuple[DataPoint, ...]:
        return tuple(self._points)

    def clone_points(self) -> list[DataPoint]:
        """Owned snapshot of the points, safe to hand to a background task."""
        return list(self._points)

    def is_empty(self) -> bool:
        return not self._points

    def __len__(self) -> int:
        return len(self._points)

    def __getitem__(self, index: int) -> DataPoint:
        return self._points[index]

    def timestamp(self) -> DataTimestamp:
        return self._undo_manager.timestamp()

    def to_frame(self) -> pd.DataFrame:
        """Points as a table with columns x0, x1, label."""
        return pd.DataFrame({
            "x0": [p.x0 for p in self._points],
            "x1": [p.x1 for p in self._points],
            "label": [str(p.label) for p in self._points],
        })

    # --- rounding ---

    def is_rounding_enabled(self) -> bool:
        return self._rounding_decimal_places is not None

    def set_rounding_enabled(self, value: bool) -> None:
        if value and self._rounding_decimal_places is None:
            self._rounding_decimal_places = DEFAULT_DECIMAL_PLACES_FOR_ROUNDING
        elif not value:
            self._rounding_decimal_places = None

    @property
    def rounding_decimal_places(self) -> int | None:
        return self._rounding_decimal_places

    @rounding_decimal_places.setter
    def rounding_decimal_places(self, value: int | None) -> None:
        self._rounding_decimal_places = None if value is None else _validate_decimal_places(value)

    # --- history ---

    def has_undo(self) -> bool:
        return not self._undo_manager.is_undo_empty()

    def has_redo(self) -> bool:
        return not self._undo_manager.is_redo_empty()

    def has_history(self) -> bool:
        return not self._undo_manager.is_empty()

    def max_history_size(self) -> int | None:
        return self._undo_manager.max_history_size()

    def set_history_size(self, value: int | None) -> None:
        self._undo_manager.set_max_history_size(value)

    def history(self) -> list[Event]:
        """Undo entries, oldest first."""
        return self._undo_manager.undo_events()

    def redo_len(self) -> int:
        return self._undo_manager.redo_len()

    def clear_history(self, status: StatusLog) -> None:
        """Forget all undo/redo entries. The points stay as they are."""
        if self._undo_manager.is_empty():
            status.info("No History to clear")
        else:
            self._undo_manager.clear_all()
            status.info("Data History Cleared")

    # --- mutations ---

    def _invalidate_cache(self) -> None:
        self._cached_min_max = None

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < len(self._points):
            raise IndexError(f"point index {index!r} out of range for {len(self._points)} points")

    def add(self, coordinate: PointArray | None, label: Label, status: StatusLog) -> None:
        """Append a point at ``coordinate``; reports and does nothing if it is None."""
        if coordinate is None:
            status.error("Unable to add point. Cursor not detected over the plot")
            return
        x, y = float(coordinate[0]), float(coordinate[1])
        if self._rounding_decimal_places is not None:
            x = round_half_away(x, self._rounding_decimal_places)
            y = round_half_away(y, self._rounding_decimal_places)
        new_point = DataPoint(x, y, Label(label))
        self._invalidate_cache()
        self._undo_manager.push(AddEvent(new_point))
        self._points.append(new_point)

    def edit(self, index: int, new_point: DataPoint) -> None:
        """Replace the point at ``index``. An invalid index is a caller bug."""
        self._check_index(index)
        self._invalidate_cache()
        old_point = self._points[index]
        self._undo_manager.push(EditEvent(index, old_point, new_point))
        self._points[index] = new_point

    def delete(self, coordinate: PointArray | None, label: Label, status: StatusLog) -> None:
        """Delete the point with ``label`` nearest to ``coordinate``."""
        if coordinate is None:
            status.error("Unable to delete point. Cursor not detected over the plot")
            return
        index = closest_point_index(self._points, coordinate, label)
        if index is None:
            status.info("No suitable point available for deleting")
            return
        self.delete_by_index(index)

    def delete_by_index(self, index: int) -> None:
        self._check_index(index)
        self._invalidate_cache()
        removed_point = self._points.pop(index)
        self._undo_manager.push(DeleteEvent(index, removed_point))

    def clear_points(self) -> None:
        self._invalidate_cache()
        displaced, self._points = self._points, []
        self._undo_manager.push(ClearEvent(displaced))

    def replace_with_loaded_data(self, points: list[DataPoint]) -> None:
        """Swap in freshly loaded points; the old set is kept for undo."""
        self._invalidate_cache()
        displaced, self._points = self._points, list(points)
        self._undo_manager.push(LoadEvent(displaced))

    def undo(self, status: StatusLog) -> None:
        """Reverse the most recent change, if any."""
        if self._undo_manager.is_undo_empty():
            status.info("No history available to undo")
            return
        self._invalidate_cache()
        event = self._undo_manager.undo()
        if isinstance(event, AddEvent):
            if not self._points or self._points[-1] != event.point:
                raise HistoryDesyncError(f"undo of '{event}' but the last point is not the one added")
            self._points.pop()
        elif isinstance(event, EditEvent):
            self._expect_at(event.index, event.new_point, event)
            self._points[event.index] = event.old_point
        elif isinstance(event, DeleteEvent):
            if event.index > len(self._points):
                raise HistoryDesyncError(f"undo of '{event}' but only {len(self._points)} points remain")
            self._points.insert(event.index, event.point)
        elif isinstance(event, ClearEvent):
            if self._points:
                raise HistoryDesyncError("undo of a clear but points are present")
            self._points, event.points = event.points, self._points
        elif isinstance(event, LoadEvent):
            self._points, event.points = event.points, self._points
        else:
            raise TypeError(f"Unknown event type: {type(event).__name__}")

    def redo(self, status: StatusLog) -> None:
        """Re-apply the most recently undone change, if any."""
        if self._undo_manager.is_redo_empty():
            status.info("No history available to redo")
            return
        self._invalidate_cache()
        event = self._undo_manager.redo()
        if isinstance(event, AddEvent):
            self._points.append(event.point)
        elif isinstance(event, EditEvent):
            self._expect_at(event.index, event.old_point, event)
            self._points[event.index] = event.new_point
        elif isinstance(event, DeleteEvent):
            self._expect_at(event.index, event.point, event)
            del self._points[event.index]
        elif isinstance(event, ClearEvent):
            if event.points:
                raise HistoryDesyncError("redo of a clear but the event still holds points")
            self._points, event.points = event.points, self._points
        elif isinstance(event, LoadEvent):
            self._points, event.points = event.points, self._points
        else:
            raise TypeError(f"Unknown event type: {type(event).__name__}")

    def _expect_at(self, index: int, expected: DataPoint, event: Event) -> None:
        if not 0 <= index < len(self._points) or self._points[index] != expected:
            raise HistoryDesyncError(f"replaying '{event}' but index {index} does not hold {expected}")

    # --- derived values ---

    def get_points_min_max_with_margin(self) -> MinMaxPair:
        """Bounds of all points widened by the margin. Cached until the next change."""
        if self._cached_min_max is not None:
            return self._cached_min_max

        if self._points:
            first = self._points[0]
            min_x0 = max_x0 = first.x0
            min_x1 = max_x1 = first.x1
        else:
            min_x0, max_x0, min_x1, max_x1 = -1.0, 1.0, -1.0, 1.0
        for point in self._points:
            min_x0 = min(point.x0, min_x0)
            max_x0 = max(point.x0, max_x0)
            min_x1 = min(point.x1, min_x1)
            max_x1 = max(point.x1, max_x1)

        # Zero-width axis
        if abs(min_x0 - max_x0) < sys.float_info.epsilon:
            min_x0 -= 1.0
            max_x0 += 1.0
        if abs(min_x1 - max_x1) < sys.float_info.epsilon:
            min_x1 -= 1.0
            max_x1 += 1.0

        min_x0, max_x0 = _add_margin(min_x0, max_x0)
        min_x1, max_x1 = _add_margin(min_x1, max_x1)

        result = MinMaxPair(min=(min_x0, min_x1), max=(max_x0, max_x1))
        self._cached_min_max = result
        logger.info("Points MinMax Calculated: %s", result)
        return result


def _add_margin(lo: float, hi: float) -> tuple[float, float]:
    span = hi - lo
    half_diff = (span * BOUNDARY_MARGIN - span) / 2.0
    return lo - half_diff, hi + half_diff
