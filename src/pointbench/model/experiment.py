"""The currently selected local experiment (algorithm + its trained state)."""

from __future__ import annotations

from enum import Enum

from pointbench.core.types import DataTimestamp
from pointbench.model.average_distance import AverageDistance
from pointbench.model.base import Algorithm, TrainedModel, TrainResults
from pointbench.model.nearest_neighbor import NearestNeighborMax

ALGORITHMS: dict[str, type[Algorithm]] = {
    AverageDistance.name: AverageDistance,
    NearestNeighborMax.name: NearestNeighborMax,
}


def available_algorithms() -> list[str]:
    """Return sorted list of algorithm names."""
    return sorted(ALGORITHMS)


class ModelStatus(Enum):
    """How a model relates to the current version of the data."""
    NOT_TRAINED = "not_trained"
    CURRENT = "current"
    TRAINED_ON_OLDER_DATA = "older"
    TRAINED_ON_NEWER_DATA = "newer"

    @property
    def description(self) -> str:
        return _STATUS_DESCRIPTIONS[self]


_STATUS_DESCRIPTIONS = {
    ModelStatus.NOT_TRAINED: "Model not trained",
    ModelStatus.CURRENT: "Trained on the current data",
    ModelStatus.TRAINED_ON_OLDER_DATA: (
        "Trained for older version of data "
        "(It's possible data may no longer be in the history)"
    ),
    ModelStatus.TRAINED_ON_NEWER_DATA: (
        "Trained for newer version of data "
        "(It's possible data may no longer be in the history)"
    ),
}


def compare_timestamps(training: DataTimestamp | None, current: DataTimestamp) -> ModelStatus:
    """Only exact equality counts as current."""
    if training is None:
        return ModelStatus.NOT_TRAINED
    if training == current:
        return ModelStatus.CURRENT
    if training < current:
        return ModelStatus.TRAINED_ON_OLDER_DATA
    return ModelStatus.TRAINED_ON_NEWER_DATA


class Experiment:
    """Holds no algorithm, an untrained model, or a trained model.

    Selecting an algorithm always starts from a fresh untrained model. The
    only way to get a trained model is ``apply_results``.
    """

    def __init__(self, model: Algorithm | None = None) -> None:
        self._model = model

    @classmethod
    def none(cls) -> Experiment:
        return cls(None)

    @classmethod
    def select(cls, name: str) -> Experiment:
        """Fresh untrained experiment for ``name``. Raises KeyError if unknown."""
        if name not in ALGORITHMS:
            raise KeyError(f"Algorithm '{name}' not found. Available: {available_algorithms()}")
        return cls(ALGORITHMS[name]())

    @property
    def model(self) -> Algorithm | None:
        return self._model

    @property
    def name(self) -> str | None:
        return None if self._model is None else self._model.name

    @property
    def is_none(self) -> bool:
        return self._model is None

    @property
    def is_trained(self) -> bool:
        return isinstance(self._model, TrainedModel)

    def model_inference(self) -> TrainedModel | None:
        return self._model if isinstance(self._model, TrainedModel) else None

    def data_timestamp_at_training(self) -> DataTimestamp | None:
        model = self.model_inference()
        return None if model is None else model.training_timestamp()

    def is_at_timestamp(self, timestamp: DataTimestamp) -> bool:
        return self.data_timestamp_at_training() == timestamp

    def status(self, current: DataTimestamp) -> ModelStatus:
        return compare_timestamps(self.data_timestamp_at_training(), current)

    def apply_results(self, results: TrainResults) -> TrainedModel:
        """Replace the model with a trained one built from ``results``."""
        if self._model is None:
            raise ValueError("failed to save training results. No algorithm selected")
        self._model = self._model.to_inference(results)
        return self._model

    def __repr__(self) -> str:
        return f"Experiment({self._model!r})"
