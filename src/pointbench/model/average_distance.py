"""Average-distance outlier score with a tunable threshold."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from pointbench.core.geometry import pairwise_distances
from pointbench.core.types import DataPoint, Label
from pointbench.model.base import Algorithm, TrainedModel, TrainResults

DEFAULT_THRESHOLD_RATIO = 0.75


@dataclass
class ThresholdConfig:
    """Decision threshold plus the score range it can be moved within."""
    threshold: float
    min_score: float
    max_score: float

    @classmethod
    def from_scores(cls, scores: Sequence[float], ratio: float = DEFAULT_THRESHOLD_RATIO) -> ThresholdConfig:
        min_score = float(min(scores))
        max_score = float(max(scores))
        return cls(
            threshold=min_score + ratio * (max_score - min_score),
            min_score=min_score,
            max_score=max_score,
        )


class AverageDistance(Algorithm):
    """Score = mean distance from a point to every other point.

    A lone point has no neighbours and scores 0.
    """
    name = "average_distance"
    display_name = "Average Distance"

    @staticmethod
    def compute_scores(points: Sequence[DataPoint], train_config: Any) -> np.ndarray:
        n = len(points)
        if n < 2:
            return np.zeros(n, dtype=float)
        # Self-distance is zero so the full row sum only covers the others
        return pairwise_distances(points).sum(axis=1) / (n - 1)

    def to_inference(self, results: TrainResults) -> TrainedAverageDistance:
        return TrainedAverageDistance(results)


class TrainedAverageDistance(TrainedModel, AverageDistance):
    """Anomaly iff score >= threshold."""

    def __init__(self, results: TrainResults) -> None:
        super().__init__(results)
        self._config = ThresholdConfig.from_scores(results.scores)

    @property
    def predict_config(self) -> ThresholdConfig:
        return self._config

    def set_threshold(self, value: float) -> None:
        self._config.threshold = float(value)

    def predict(self, index: int) -> Label:
        if self.score(index) >= self._config.threshold:
            return Label.ANOMALY
        return Label.NORMAL
