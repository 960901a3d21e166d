"""PointBench data module."""

from pointbench.data.convert import frame_to_points, points_to_frame
from pointbench.data.export import export_csv, save_points, to_csv_bytes
from pointbench.data.load import load_csv, load_points
from pointbench.data.matlab import MatlabData, load_as_matlab, save_as_matlab

__all__ = [
    "load_csv",
    "load_points",
    "export_csv",
    "save_points",
    "to_csv_bytes",
    "frame_to_points",
    "points_to_frame",
    "MatlabData",
    "load_as_matlab",
    "save_as_matlab",
]
