"""Prediction classification against ground truth, and a summary of it."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.metrics import (
    accuracy_score, confusion_matrix, f1_score, precision_score, recall_score,
)

from pointbench.core.types import DataPoint, Label
from pointbench.model.base import TrainedModel


class Classification(Enum):
    """Cell of the 2x2 contingency table. Anomaly is the positive class."""
    TRUE_NEGATIVE = "TN"
    FALSE_POSITIVE = "FP"
    FALSE_NEGATIVE = "FN"
    TRUE_POSITIVE = "TP"

    def __str__(self) -> str:
        return self.value


_CLASSIFICATION_TABLE = {
    (Label.NORMAL, Label.NORMAL): Classification.TRUE_NEGATIVE,
    (Label.NORMAL, Label.ANOMALY): Classification.FALSE_POSITIVE,
    (Label.ANOMALY, Label.NORMAL): Classification.FALSE_NEGATIVE,
    (Label.ANOMALY, Label.ANOMALY): Classification.TRUE_POSITIVE,
}


def classify(ground_truth: Label, predicted: Label) -> Classification:
    """Map a (truth, prediction) pair onto the contingency table."""
    return _CLASSIFICATION_TABLE[(Label(ground_truth), Label(predicted))]


def classify_points(points: Sequence[DataPoint], model: TrainedModel) -> list[Classification]:
    """Classification of each training point, in point order."""
    return [classify(p.label, model.predict(i)) for i, p in enumerate(points)]


@dataclass
class EvaluationSummary:
    """How well a model's predictions match the labels."""
    confusion_matrix: pd.DataFrame
    counts: dict[Classification, int]
    accuracy: float
    precision: float
    recall: float
    f1: float

    def __str__(self) -> str:
        counts = ", ".join(f"{c}={self.counts[c]}" for c in Classification)
        return (
            f"{counts}\n"
            f"Accuracy: {self.accuracy:.3f}  Precision: {self.precision:.3f}  "
            f"Recall: {self.recall:.3f}  F1: {self.f1:.3f}"
        )


def evaluate_model(points: Sequence[DataPoint], model: TrainedModel) -> EvaluationSummary:
    """Compare ``model`` predictions with the labels of ``points``."""
    if not points:
        raise ValueError("Cannot evaluate a model on zero points")
    y_true = np.array([int(p.label) for p in points])
    y_pred = np.array([int(model.predict(i)) for i in range(len(points))])

    labels = [int(Label.NORMAL), int(Label.ANOMALY)]
    cm = confusion_matrix(y_true, y_pred, labels=labels)
    cm_df = pd.DataFrame(
        cm,
        index=[f"Actual: {Label(l)}" for l in labels],
        columns=[f"Predicted: {Label(l)}" for l in labels],
    )
    counts = {
        Classification.TRUE_NEGATIVE: int(cm[0, 0]),
        Classification.FALSE_POSITIVE: int(cm[0, 1]),
        Classification.FALSE_NEGATIVE: int(cm[1, 0]),
        Classification.TRUE_POSITIVE: int(cm[1, 1]),
    }

    return EvaluationSummary(
        confusion_matrix=cm_df,
        counts=counts,
        accuracy=round(float(accuracy_score(y_true, y_pred)), 4),
        precision=round(float(precision_score(y_true, y_pred, pos_label=1, zero_division=0)), 4),
        recall=round(float(recall_score(y_true, y_pred, pos_label=1, zero_division=0)), 4),
        f1=round(float(f1_score(y_true, y_pred, pos_label=1, zero_division=0)), 4),
    )
