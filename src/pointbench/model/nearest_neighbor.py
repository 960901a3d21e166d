"""Single most isolated point, by nearest-neighbour distance."""

from __future__ import annotations

from typing import Any, Sequence

import numpy as np

from pointbench.core.geometry import pairwise_distances
from pointbench.core.types import DataPoint, Label
from pointbench.model.base import Algorithm, TrainedModel, TrainResults


class NearestNeighborMax(Algorithm):
    """Score = distance to the closest other point.

    The point with the largest score is the one outlier. A lone point has no
    neighbour and scores infinity.
    """
    name = "nearest_neighbor"
    display_name = "Nearest Neighbour Max"

    @staticmethod
    def compute_scores(points: Sequence[DataPoint], train_config: Any) -> np.ndarray:
        distances = pairwise_distances(points)
        # Ignore the zero distance of each point to itself
        np.fill_diagonal(distances, np.inf)
        return distances.min(axis=1)

    def to_inference(self, results: TrainResults) -> TrainedNearestNeighborMax:
        return TrainedNearestNeighborMax(results)


def calculate_outlier_index(scores: Sequence[float]) -> int:
    """Index of the maximum score; ties go to the lower index."""
    if not len(scores):
        raise ValueError("requires at least one point for training")
    arr = np.asarray(scores, dtype=float)
    if np.isnan(arr).any():
        raise ValueError("distances should not be NaN")
    return int(np.argmax(arr))


class TrainedNearestNeighborMax(TrainedModel, NearestNeighborMax):
    """Exactly one point is predicted anomalous. No threshold to tune."""

    def __init__(self, results: TrainResults) -> None:
        super().__init__(results)
        self._outlier_index = calculate_outlier_index(results.scores)

    @property
    def outlier_index(self) -> int:
        return self._outlier_index

    def predict(self, index: int) -> Label:
        self._check_index(index)
        return Label.ANOMALY if index == self._outlier_index else Label.NORMAL
