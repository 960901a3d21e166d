"""Distance helpers used by delete-nearest and by the scoring algorithms."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.spatial.distance import pdist, squareform

from pointbench.core.types import DataPoint, Label, PointArray


def calculate_distance(p1: PointArray, p2: PointArray) -> float:
    """Euclidean distance between two coordinate pairs."""
    return float(np.hypot(p1[0] - p2[0], p1[1] - p2[1]))


def points_to_array(points: Sequence[DataPoint]) -> np.ndarray:
    """Stack point coordinates into an (N, 2) float array."""
    if not points:
        return np.empty((0, 2), dtype=float)
    return np.array([p.to_array() for p in points], dtype=float)


def pairwise_distances(points: Sequence[DataPoint]) -> np.ndarray:
    """Return the (N, N) Euclidean distance matrix of ``points``.

    Row ``i`` holds the distances from point ``i`` to every point, indexed the
    same way as ``points``. The matrix is symmetric with a zero diagonal.
    """
    n = len(points)
    if n < 2:
        return np.zeros((n, n), dtype=float)
    return squareform(pdist(points_to_array(points), metric="euclidean"))


def closest_point_index(
    points: Sequence[DataPoint],
    target: PointArray,
    label: Label | None = None,
) -> int | None:
    """Index of the point nearest to ``target``, optionally restricted to ``label``.

    The first point found at the minimum distance wins, so ties go to the lowest
    index. Returns None when no point qualifies.
    """
    result = None
    min_distance = float("inf")
    for i, point in enumerate(points):
        if label is not None and point.label != label:
            continue
        distance = calculate_distance(target, point.to_array())
        if distance < min_distance:
            result = i
            min_distance = distance
    return result
