"""PointBench model module."""

from pointbench.model.average_distance import AverageDistance, ThresholdConfig
from pointbench.model.base import Algorithm, TrainedModel, TrainingError, TrainResults
from pointbench.model.evaluate import Classification, EvaluationSummary, classify, evaluate_model
from pointbench.model.experiment import ALGORITHMS, Experiment, ModelStatus, available_algorithms
from pointbench.model.nearest_neighbor import NearestNeighborMax

__all__ = [
    "Algorithm",
    "TrainedModel",
    "TrainResults",
    "TrainingError",
    "AverageDistance",
    "ThresholdConfig",
    "NearestNeighborMax",
    "ALGORITHMS",
    "Experiment",
    "ModelStatus",
    "available_algorithms",
    "Classification",
    "EvaluationSummary",
    "classify",
    "evaluate_model",
]
