"""Conversions between points, DataFrames and plot series."""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
import pandas as pd

from pointbench.core.types import DataPoint, Label, PointArray

COLUMNS = ["x0", "x1", "label"]


def points_to_frame(points: Sequence[DataPoint]) -> pd.DataFrame:
    """Persistence record shape: x0, x1 as float and label as its 0/1 discriminant."""
    return pd.DataFrame({
        "x0": np.array([p.x0 for p in points], dtype=np.float64),
        "x1": np.array([p.x1 for p in points], dtype=np.float64),
        "label": np.array([int(p.label) for p in points], dtype=np.uint8),
    }, columns=COLUMNS)


def frame_to_points(df: pd.DataFrame) -> list[DataPoint]:
    """Build points from a DataFrame with columns x0, x1, label."""
    missing = [c for c in COLUMNS if c not in df.columns]
    if missing:
        raise ValueError(f"Data is missing required columns: {missing}. Expected: {COLUMNS}")
    if df[["x0", "x1"]].isna().any().any():
        raise ValueError("Coordinates must not be empty")
    result = []
    for row in df.itertuples(index=False):
        result.append(DataPoint(float(row.x0), float(row.x1), Label.from_value(row.label)))
    return result


def array_of_label(points: Sequence[DataPoint], label: Label) -> list[PointArray]:
    return [p.to_array() for p in points if p.label == label]


def array_of_normal(points: Sequence[DataPoint]) -> list[PointArray]:
    return array_of_label(points, Label.NORMAL)


def array_of_anom(points: Sequence[DataPoint]) -> list[PointArray]:
    return array_of_label(points, Label.ANOMALY)


def to_delimited_string(items: Iterable[object]) -> str:
    return ", ".join(str(x) for x in items)
