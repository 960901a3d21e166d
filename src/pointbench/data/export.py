"""Saving points to CSV and MAT files."""

from __future__ import annotations

import io
from pathlib import Path
from typing import Sequence

from pointbench.core.types import DataPoint
from pointbench.data.convert import points_to_frame
from pointbench.data.matlab import save_as_matlab


def export_csv(points: Sequence[DataPoint], path: str | Path) -> None:
    """Write points as CSV with columns x0, x1, label (label as 0/1)."""
    points_to_frame(points).to_csv(path, index=False)


def to_csv_bytes(points: Sequence[DataPoint]) -> bytes:
    """Export points to CSV bytes."""
    buf = io.BytesIO()
    points_to_frame(points).to_csv(buf, index=False)
    return buf.getvalue()


def save_points(points: Sequence[DataPoint], path: str | Path) -> Path:
    """Save ``points`` to ``path`` as CSV or MAT, chosen by extension.

    The parent directory must already exist.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    try:
        if suffix == ".mat":
            save_as_matlab(points, path)
        elif suffix == ".csv":
            export_csv(points, path)
        else:
            raise ValueError(
                f"extension not recognized. Please use .csv or .mat. Filename: {path.name!r}"
            )
    except (OSError, ValueError) as exc:
        raise ValueError(f"failed to save to {path}") from exc
    return path
