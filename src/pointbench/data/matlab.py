"""MAT file codec: ``X`` (N x 2 coordinates) and ``y`` (N labels as 0/1)."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

import numpy as np
import scipy.io

from pointbench.core.types import DataPoint, Label

# dtypes accepted for ``y`` on read; values must still be exactly 0 or 1
_SUPPORTED_Y_DTYPES = ("float64", "int32", "int64", "uint8")


@dataclass
class MatlabData:
    """Flat MAT representation: ``x`` holds all x0 values then all x1 values."""
    x: np.ndarray
    y: np.ndarray

    @classmethod
    def from_points(cls, points: Sequence[DataPoint]) -> MatlabData:
        n = len(points)
        x = np.zeros(n * 2, dtype=np.float64)
        y = np.zeros(n, dtype=np.uint8)
        for i, point in enumerate(points):
            x[i] = point.x0
            x[i + n] = point.x1
            y[i] = int(point.label)
        return cls(x=x, y=y)

    def validate(self) -> None:
        if self.x.size != self.y.size * 2:
            raise ValueError(
                "validation failed. Expected 2 times the number of y values in X. "
                f"But got {self.y.size} values in y and {self.x.size} in X but expected "
                f"{self.y.size * 2} based on number in y. Does X have 2 columns?"
            )

    def to_points(self) -> list[DataPoint]:
        self.validate()
        n = self.y.size
        result = []
        for i in range(n):
            try:
                label = Label.from_value(self.y[i])
            except ValueError as exc:
                raise ValueError("unable to convert number to data label") from exc
            result.append(DataPoint(float(self.x[i]), float(self.x[i + n]), label))
        return result

    def save(self, path: str | Path) -> None:
        self.validate()
        n = self.y.size
        X = self.x.reshape((2, n)).T if n else np.zeros((0, 2), dtype=np.float64)
        scipy.io.savemat(str(path), {"X": X, "y": self.y.reshape((n, 1))})

    @classmethod
    def load(cls, path: str | Path) -> MatlabData:
        contents = scipy.io.loadmat(str(path))
        for name in ("X", "y"):
            if name not in contents:
                raise ValueError(f"variable {name!r} not found in MAT file")
        # Column-major flattening puts the whole x0 column before x1
        x = np.asarray(contents["X"], dtype=np.float64).ravel(order="F")
        y = _convert_y(np.asarray(contents["y"]))
        return cls(x=x, y=y)


def _convert_y(raw: np.ndarray) -> np.ndarray:
    if raw.dtype.name not in _SUPPORTED_Y_DTYPES:
        raise ValueError(f'Currently Unsupported Type for "y": {raw.dtype}')
    flat = raw.ravel(order="F")
    bad = flat[(flat != 0) & (flat != 1)]
    if bad.size:
        raise ValueError(f"Only expected 1 or 0 but found {bad[0]}")
    return flat.astype(np.uint8)


def save_as_matlab(points: Sequence[DataPoint], path: str | Path) -> None:
    MatlabData.from_points(points).save(path)


def load_as_matlab(path: str | Path) -> list[DataPoint]:
    return MatlabData.load(path).to_points()
