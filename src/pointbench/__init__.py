"""PointBench: an interactive workbench for 2-D outlier detection experiments.

Points are placed by hand (or loaded from CSV/MAT files), labelled normal or
anomaly, and scored by simple distance-based detectors. Every edit to the data
can be undone, and trained models know whether they are still current.

Quick start (library)::

    from pointbench import Workbench

    bench = Workbench()
    bench.add_point((0.0, 0.0))
    bench.add_point((10.0, 0.0))
    bench.select_algorithm("average_distance")
    bench.start_training()
    bench.wait()
    print(bench.predictions())

Quick start (CLI)::

    pointbench evaluate points.csv --algorithm nearest_neighbor
"""

__version__ = "0.1.0"

# Core types and data store
from pointbench.core.geometry import calculate_distance, pairwise_distances
from pointbench.core.history import UndoManager
from pointbench.core.status import StatusLog
from pointbench.core.store import PointStore
from pointbench.core.types import DataPoint, DataTimestamp, Label

# Controller and configuration
from pointbench.core.config import WorkbenchConfig, load_config
from pointbench.core.workbench import Workbench

# Persistence
from pointbench.data.load import load_csv, load_points
from pointbench.data.export import export_csv, save_points

# Models
from pointbench.model.average_distance import AverageDistance
from pointbench.model.nearest_neighbor import NearestNeighborMax
from pointbench.model.experiment import Experiment, ModelStatus, available_algorithms
from pointbench.model.evaluate import Classification, classify, evaluate_model

__all__ = [
    # Core
    "DataPoint", "DataTimestamp", "Label", "calculate_distance", "pairwise_distances",
    "UndoManager", "StatusLog", "PointStore",
    # Controller
    "Workbench", "WorkbenchConfig", "load_config",
    # Data
    "load_csv", "load_points", "export_csv", "save_points",
    # Model
    "AverageDistance", "NearestNeighborMax", "Experiment", "ModelStatus",
    "available_algorithms", "Classification", "classify", "evaluate_model",
]
