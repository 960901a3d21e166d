"""Shared test fixtures for PointBench."""

import pytest

from pointbench.core.status import StatusLog
from pointbench.core.store import PointStore
from pointbench.core.types import DataPoint, Label
from pointbench.core.workbench import Workbench
from pointbench.data.export import export_csv


@pytest.fixture
def status():
    return StatusLog()


@pytest.fixture
def store():
    """Empty store without rounding and the default history bound."""
    return PointStore()


@pytest.fixture
def sample_points():
    """Four clustered normal points and one far-away anomaly."""
    return [
        DataPoint(0.0, 0.0, Label.NORMAL),
        DataPoint(1.0, 0.0, Label.NORMAL),
        DataPoint(0.0, 1.0, Label.NORMAL),
        DataPoint(1.0, 1.0, Label.NORMAL),
        DataPoint(10.0, 10.0, Label.ANOMALY),
    ]


@pytest.fixture
def filled_store(store, sample_points, status):
    for p in sample_points:
        store.add(p.to_array(), p.label, status)
    return store


@pytest.fixture
def workbench():
    return Workbench()


@pytest.fixture
def sample_csv(tmp_path, sample_points):
    path = tmp_path / "points.csv"
    export_csv(sample_points, path)
    return path
