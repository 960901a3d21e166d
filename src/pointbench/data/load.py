"""Loading points from CSV and MAT files."""

from __future__ import annotations

import io
from pathlib import Path

import pandas as pd

from pointbench.core.types import DataPoint
from pointbench.data.convert import frame_to_points
from pointbench.data.matlab import load_as_matlab

UNRECOGNIZED_EXTENSION_MSG = "Extension not recognized. Attempted to load as CSV"


def load_csv(source: str | Path | bytes) -> list[DataPoint]:
    """Read points from CSV with columns x0, x1, label (label as 0/1)."""
    if isinstance(source, bytes):
        source = io.BytesIO(source)
    df = pd.read_csv(source, float_precision="round_trip")
    return frame_to_points(df)


def load_points(path: str | Path) -> tuple[list[DataPoint], str | None]:
    """Load points from ``path``, picking the codec from the extension.

    Returns the points and an optional message for the user. Unknown
    extensions are tried as CSV.
    """
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix == ".mat":
        try:
            return load_as_matlab(path), None
        except (OSError, ValueError) as exc:
            raise ValueError(f"Failed to load from MAT file: {path}") from exc
    if suffix == ".csv":
        try:
            return load_csv(path), None
        except (OSError, ValueError) as exc:
            raise ValueError(f"Failed to load from CSV: {path}") from exc
    try:
        return load_csv(path), UNRECOGNIZED_EXTENSION_MSG
    except (OSError, ValueError) as exc:
        raise ValueError(
            f"failed to load unrecognized file type as CSV. Filename: {path.name!r}"
        ) from exc
