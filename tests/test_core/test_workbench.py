"""Tests for core/workbench.py."""

import sys
import threading

import pytest

from pointbench.core.config import WorkbenchConfig
from pointbench.core.operations import OperationalState
from pointbench.core.types import Label
from pointbench.core.workbench import Workbench
from pointbench.data.export import export_csv
from pointbench.data.load import load_points
from pointbench.model.evaluate import Classification
from pointbench.model.experiment import ModelStatus


def _fill(bench, points):
    for p in points:
        bench.add_point(p.to_array(), p.label)


def test_initial_state(workbench):
    assert workbench.op_state is OperationalState.NORMAL
    assert not workbench.is_busy()
    assert workbench.experiment.is_none
    assert workbench.model_status() is ModelStatus.NOT_TRAINED
    assert workbench.predictions() is None


def test_config_applied():
    config = WorkbenchConfig(
        rounding_enabled=True, decimal_places=1, max_history=3, algorithm="nearest_neighbor",
    )
    bench = Workbench(config)
    assert bench.store.rounding_decimal_places == 1
    assert bench.store.max_history_size() == 3
    assert bench.experiment.name == "nearest_neighbor"


def test_load(workbench, sample_csv, sample_points):
    workbench.start_load(lambda: sample_csv)
    assert workbench.op_state is OperationalState.LOADING
    workbench.wait(5)
    assert workbench.op_state is OperationalState.NORMAL
    assert list(workbench.store.points()) == sample_points
    assert workbench.data_path == sample_csv
    assert workbench.status.last().message == f"Loaded 5 points from {sample_csv}"
    workbench.undo()
    assert workbench.store.is_empty()


def test_load_unknown_extension(workbench, tmp_path, sample_points):
    path = tmp_path / "points.txt"
    export_csv(sample_points, path)
    workbench.start_load(lambda: path)
    workbench.wait(5)
    assert len(workbench.store) == 5
    assert "Extension not recognized. Attempted to load as CSV" in workbench.status.messages()


def test_load_cancelled(workbench):
    workbench.start_load(lambda: None)
    workbench.wait(5)
    assert workbench.op_state is OperationalState.NORMAL
    assert workbench.status.is_empty()
    assert workbench.store.is_empty()


def test_load_failure_reports_chain(workbench, tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("x0,x1,label\n1,2,7\n")
    workbench.start_load(lambda: path)
    workbench.wait(5)
    entry = workbench.status.last()
    assert entry.level == "ERROR"
    assert entry.message.startswith("failed to load\nValueError: Failed to load from CSV")
    assert "Caused by" in entry.message
    assert workbench.store.is_empty()
    assert workbench.data_path is None


def test_save(workbench, tmp_path, sample_points):
    _fill(workbench, sample_points)
    target = tmp_path / "out.mat"
    workbench.start_save(lambda: target)
    workbench.wait(5)
    assert workbench.data_path == target
    assert workbench.status.last().message == f"Save successfully to {target}"
    points, message = load_points(target)
    assert points == sample_points
    assert message is None


def test_save_uses_snapshot(workbench, tmp_path, sample_points):
    _fill(workbench, sample_points)
    release = threading.Event()
    target = tmp_path / "out.csv"

    def pick():
        release.wait(5)
        return target

    workbench.start_save(pick)
    workbench.add_point((50.0, 50.0))
    release.set()
    workbench.wait(5)
    assert len(load_points(target)[0]) == 5
    assert len(workbench.store) == 6


def test_one_operation_at_a_time(workbench):
    release = threading.Event()
    workbench.start_load(lambda: release.wait(5) and None)
    with pytest.raises(RuntimeError, match="in progress"):
        workbench.start_save(lambda: None)
    release.set()
    workbench.wait(5)


def test_poll(workbench, sample_csv):
    assert workbench.poll() is False
    workbench.start_load(lambda: sample_csv)
    workbench._pending._thread.join(5)
    assert workbench.poll() is True
    assert len(workbench.store) == 5


def test_train_and_predict(workbench, sample_points):
    _fill(workbench, sample_points)
    workbench.select_algorithm("average_distance")
    workbench.start_training()
    assert workbench.op_state is OperationalState.TRAINING_EXPERIMENT
    workbench.wait(5)
    assert "Model training completed" in workbench.status.messages()
    assert workbench.model_status() is ModelStatus.CURRENT
    assert workbench.predictions() == [Label.NORMAL] * 4 + [Label.ANOMALY]
    assert workbench.classifications()[-1] is Classification.TRUE_POSITIVE
    summary = workbench.evaluation()
    assert summary.accuracy == 1.0


def test_train_without_algorithm(workbench, sample_points):
    _fill(workbench, sample_points)
    with pytest.raises(RuntimeError, match="No algorithm"):
        workbench.start_training()


def test_train_without_points(workbench):
    workbench.select_algorithm("nearest_neighbor")
    workbench.start_training()
    workbench.wait(5)
    assert workbench.status.last().level == "ERROR"
    assert "no points found" in workbench.status.last().message
    assert workbench.model_status() is ModelStatus.NOT_TRAINED


def test_model_goes_stale_and_back(workbench, sample_points):
    _fill(workbench, sample_points)
    workbench.select_algorithm("nearest_neighbor")
    workbench.start_training()
    workbench.wait(5)
    assert workbench.model_status() is ModelStatus.CURRENT

    workbench.add_point((3.0, 3.0))
    assert workbench.model_status() is ModelStatus.TRAINED_ON_OLDER_DATA
    assert workbench.inference_model() is None
    assert workbench.predictions() is None

    workbench.undo()
    assert workbench.model_status() is ModelStatus.CURRENT
    workbench.undo()
    assert workbench.model_status() is ModelStatus.TRAINED_ON_NEWER_DATA


def test_training_on_snapshot_while_editing(workbench, sample_points):
    _fill(workbench, sample_points)
    workbench.select_algorithm("average_distance")
    workbench.start_training()
    workbench.add_point((3.0, 3.0))
    workbench.wait(5)
    assert workbench.model_status() is ModelStatus.TRAINED_ON_OLDER_DATA
    workbench.undo()
    assert len(workbench.predictions()) == 5


def test_select_while_training_is_refused(workbench, sample_points):
    _fill(workbench, sample_points)
    workbench.select_algorithm("average_distance")
    workbench.start_training()
    workbench.select_algorithm("nearest_neighbor")
    assert workbench.experiment.name == "average_distance"
    assert "Cannot change algorithm while training is in progress" in workbench.status.messages()
    workbench.wait(5)
    assert workbench.experiment.is_trained


def test_select_discards_model(workbench, sample_points):
    _fill(workbench, sample_points)
    workbench.select_algorithm("average_distance")
    workbench.start_training()
    workbench.wait(5)
    workbench.select_algorithm("average_distance")
    assert not workbench.experiment.is_trained
    workbench.select_algorithm(None)
    assert workbench.experiment.is_none


def test_set_threshold(workbench, sample_points):
    _fill(workbench, sample_points)
    workbench.select_algorithm("average_distance")
    workbench.start_training()
    workbench.wait(5)
    workbench.set_threshold(0.0)
    assert workbench.predictions() == [Label.ANOMALY] * 5
    assert workbench.predict_config().threshold == 0.0


def test_set_threshold_unsupported(workbench, sample_points):
    _fill(workbench, sample_points)
    workbench.select_algorithm("nearest_neighbor")
    workbench.start_training()
    workbench.wait(5)
    assert workbench.predict_config() is None
    with pytest.raises(RuntimeError, match="no adjustable threshold"):
        workbench.set_threshold(1.0)


def test_groups(workbench, sample_points):
    _fill(workbench, sample_points)
    labels = workbench.label_groups()
    assert labels[Label.ANOMALY] == [(10.0, 10.0)]
    assert len(labels[Label.NORMAL]) == 4
    assert workbench.classification_groups() is None

    workbench.select_algorithm("nearest_neighbor")
    workbench.start_training()
    workbench.wait(5)
    groups = workbench.classification_groups()
    assert groups[Classification.TRUE_POSITIVE] == [(10.0, 10.0)]
    assert len(groups[Classification.TRUE_NEGATIVE]) == 4
    assert groups[Classification.FALSE_POSITIVE] == []


def test_external_experiment(workbench, sample_points):
    _fill(workbench, sample_points)
    received = []
    workbench.start_external_experiment(received.append)
    assert workbench.op_state is OperationalState.RUNNING_EXTERNAL_EXPERIMENT
    workbench.wait(5)
    assert received == [sample_points]
    assert workbench.status.last().message == "External experiment run succeeded"
    assert len(workbench.store) == 5


def test_add_point_without_cursor(workbench):
    workbench.add_point(None)
    assert workbench.status.last().level == "ERROR"
    assert workbench.store.is_empty()


def test_delete_point(workbench, sample_points):
    _fill(workbench, sample_points)
    workbench.delete_point((9.0, 9.0), Label.ANOMALY)
    assert all(p.label is Label.NORMAL for p in workbench.store.points())
    workbench.redo()
    assert workbench.status.last().message == "No history available to redo"


def test_zero_history_bound_model_goes_stale_on_add():
    bench = Workbench(WorkbenchConfig(max_history=0))
    bench.add_point((0.0, 0.0))
    bench.add_point((10.0, 0.0))
    bench.select_algorithm("average_distance")
    bench.start_training()
    bench.wait(5)
    assert bench.model_status() is ModelStatus.CURRENT
    assert len(bench.predictions()) == 2

    bench.add_point((5.0, 5.0))
    assert bench.model_status() is ModelStatus.TRAINED_ON_OLDER_DATA
    assert bench.inference_model() is None
    assert bench.predictions() is None
    assert bench.classifications() is None
    assert bench.evaluation() is None


def test_cleared_history_model_goes_stale(workbench, sample_points):
    _fill(workbench, sample_points[:3])
    workbench.store.clear_history(workbench.status)
    workbench.select_algorithm("nearest_neighbor")
    workbench.start_training()
    workbench.wait(5)
    assert workbench.model_status() is ModelStatus.CURRENT

    workbench.store.set_history_size(1)
    workbench.add_point((4.0, 4.0))
    workbench.add_point((5.0, 5.0))
    workbench.undo()
    assert len(workbench.store) == 4
    assert workbench.model_status() is ModelStatus.TRAINED_ON_OLDER_DATA
    assert workbench.evaluation() is None
    assert workbench.classification_groups() is None


def test_set_threshold_on_stale_model(workbench, sample_points):
    _fill(workbench, sample_points)
    workbench.select_algorithm("average_distance")
    workbench.start_training()
    workbench.wait(5)
    model = workbench.inference_model()
    workbench.set_threshold(2.5)
    assert model.predict_config.threshold == 2.5

    workbench.add_point((3.0, 3.0))
    with pytest.raises(RuntimeError, match="no adjustable threshold"):
        workbench.set_threshold(1.0)
    assert model.predict_config.threshold == 2.5


def test_external_runner_exit_returns_to_normal(workbench, sample_points):
    _fill(workbench, sample_points)
    workbench.start_external_experiment(lambda points: sys.exit(2))
    workbench.wait(5)
    assert workbench.op_state is OperationalState.NORMAL
    entry = workbench.status.last()
    assert entry.level == "ERROR"
    assert entry.message == "external experiment failed\nSystemExit: 2"
    assert len(workbench.store) == 5
