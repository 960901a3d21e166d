"""Model lifecycle shared by the scoring algorithms.

Each algorithm is a pair of classes. The untrained class can only train; the
trained class adds inference. Training is a class method that works on an owned
snapshot of the points, so it can run on a background thread while the store
keeps changing. A trained model is built from a ``TrainResults`` value and is
never turned back into an untrained one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Sequence

import numpy as np

from pointbench.core.types import DataPoint, DataTimestamp, Label


class TrainingError(ValueError):
    """Training could not produce scores for the given snapshot."""


@dataclass(frozen=True)
class TrainResults:
    """Scores from one training run, one per training point in order."""
    scores: tuple[float, ...]
    data_timestamp_at_start: DataTimestamp


class Algorithm(ABC):
    """Training side of the lifecycle. Untrained and trained models both have it."""
    name: ClassVar[str] = ""
    display_name: ClassVar[str] = ""

    @classmethod
    def train(
        cls,
        train_config: Any,
        points: Sequence[DataPoint],
        data_timestamp: DataTimestamp,
    ) -> TrainResults:
        """Score every point of ``points``. Raises TrainingError when there are none."""
        if not points:
            raise TrainingError("no points found")
        scores = cls.compute_scores(points, train_config)
        return TrainResults(
            scores=tuple(float(s) for s in scores),
            data_timestamp_at_start=data_timestamp,
        )

    @staticmethod
    @abstractmethod
    def compute_scores(points: Sequence[DataPoint], train_config: Any) -> np.ndarray:
        """Outlier score per point; higher means more anomalous."""

    def train_config(self) -> Any:
        """Copy of the settings used while training. Neither algorithm has any yet."""
        return None

    @abstractmethod
    def to_inference(self, results: TrainResults) -> TrainedModel:
        """Build a new trained model from ``results``. ``self`` is left untouched."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class TrainedModel(Algorithm):
    """Inference side of the lifecycle. Only built from ``TrainResults``."""

    def __init__(self, results: TrainResults) -> None:
        if not results.scores:
            raise TrainingError("requires at least one point for training")
        self._results = results

    def training_timestamp(self) -> DataTimestamp:
        """Version of the data this model was trained on."""
        return self._results.data_timestamp_at_start

    def results(self) -> TrainResults:
        return self._results

    def scores(self) -> tuple[float, ...]:
        return self._results.scores

    def __len__(self) -> int:
        return len(self._results.scores)

    def _check_index(self, index: int) -> None:
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)) \
                or not 0 <= index < len(self._results.scores):
            raise IndexError(
                f"index {index!r} was not part of the training data "
                f"({len(self._results.scores)} points)"
            )

    def score(self, index: int) -> float:
        self._check_index(index)
        return self._results.scores[index]

    @abstractmethod
    def predict(self, index: int) -> Label:
        """Prediction for a point that was in the training data."""

    def predictions(self) -> list[Label]:
        return [self.predict(i) for i in range(len(self))]

    @property
    def predict_config(self) -> Any:
        """Predict-time settings that can change without retraining, or None."""
        return None

    @property
    def has_predict_config(self) -> bool:
        return self.predict_config is not None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={len(self)}, trained_at={self.training_timestamp()})"
