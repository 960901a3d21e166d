"""Top-level controller: points, status log, experiment and running operation.

All of this state is owned by one thread (the one driving the UI). Background
work only ever sees owned snapshots and hands back a single outcome, which
``poll()`` applies on the owning thread.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from pointbench.core.config import WorkbenchConfig
from pointbench.core.operations import (
    Cancelled,
    ExternalRunPayload,
    Failed,
    LoadPayload,
    OperationalState,
    OperationOutcome,
    PendingOperation,
    SavePayload,
    Success,
    TrainPayload,
)
from pointbench.core.status import StatusLog
from pointbench.core.store import PointStore
from pointbench.core.types import DataPoint, Label, PointArray
from pointbench.data.convert import array_of_anom, array_of_normal
from pointbench.data.export import save_points
from pointbench.data.load import load_points
from pointbench.model.average_distance import ThresholdConfig, TrainedAverageDistance
from pointbench.model.base import TrainedModel
from pointbench.model.evaluate import (
    Classification, EvaluationSummary, classify_points, evaluate_model,
)
from pointbench.model.experiment import Experiment, ModelStatus

logger = logging.getLogger(__name__)

PathPicker = Callable[[], "str | Path | None"]
ExternalRunner = Callable[[list[DataPoint]], None]


class Workbench:
    """Everything the UI talks to."""

    def __init__(self, config: WorkbenchConfig | None = None) -> None:
        self.config = config or WorkbenchConfig()
        self.store = PointStore(
            rounding_decimal_places=self.config.rounding_decimal_places,
            max_history_size=self.config.max_history,
        )
        self.status = StatusLog()
        self.experiment = (
            Experiment.select(self.config.algorithm) if self.config.algorithm else Experiment.none()
        )
        self.data_path: Path | None = None
        self._pending: PendingOperation | None = None

    # --- operational state ---

    @property
    def op_state(self) -> OperationalState:
        return OperationalState.NORMAL if self._pending is None else self._pending.state

    def is_busy(self) -> bool:
        return self._pending is not None

    def _start(self, state: OperationalState, func: Callable[[], OperationOutcome], context: str) -> None:
        if self._pending is not None:
            raise RuntimeError(
                f"Cannot start {state.value} while {self._pending.state.value} is in progress"
            )
        logger.info("Starting %s", state.value)
        self._pending = PendingOperation.spawn(state, func, context)

    def start_load(self, pick_file: PathPicker) -> None:
        """Ask ``pick_file`` for a path and load it in the background."""
        def _load() -> OperationOutcome:
            path = pick_file()
            if path is None:
                return Cancelled()
            points, message = load_points(path)
            return Success(LoadPayload(points=points, path=Path(path), message=message))

        self._start(OperationalState.LOADING, _load, "failed to load")

    def start_save(self, pick_target: PathPicker) -> None:
        """Save a snapshot of the points to the path ``pick_target`` returns."""
        points = self.store.clone_points()

        def _save() -> OperationOutcome:
            path = pick_target()
            if path is None:
                return Cancelled()
            return Success(SavePayload(save_points(points, path)))

        self._start(OperationalState.SAVING, _save, "failed to save file")

    def start_training(self) -> None:
        """Train the selected algorithm on a snapshot of the current points."""
        model = self.experiment.model
        if model is None:
            raise RuntimeError("No algorithm selected to train")
        points = self.store.clone_points()
        data_timestamp = self.store.timestamp()
        train_config = model.train_config()
        algorithm = type(model)

        def _train() -> OperationOutcome:
            return Success(TrainPayload(algorithm.train(train_config, points, data_timestamp)))

        self._start(OperationalState.TRAINING_EXPERIMENT, _train, "failed to train model")

    def start_external_experiment(self, runner: ExternalRunner) -> None:
        """Hand a snapshot to an external runner. Nothing comes back into the store."""
        points = self.store.clone_points()

        def _run() -> OperationOutcome:
            runner(points)
            return Success(ExternalRunPayload())

        self._start(OperationalState.RUNNING_EXTERNAL_EXPERIMENT, _run, "external experiment failed")

    def poll(self) -> bool:
        """Apply the pending outcome if it is ready. Returns True if one was applied."""
        if self._pending is None:
            return False
        outcome = self._pending.poll()
        if outcome is None:
            return False
        self._finish(outcome)
        return True

    def wait(self, timeout: float | None = None) -> None:
        """Block until the pending operation (if any) finishes, then apply it."""
        if self._pending is None:
            return
        self._finish(self._pending.wait(timeout))

    def _finish(self, outcome: OperationOutcome) -> None:
        state = self._pending.state
        self._pending = None
        logger.info("Finished %s: %s", state.value, type(outcome).__name__)

        if isinstance(outcome, Cancelled):
            return
        if isinstance(outcome, Failed):
            self.status.error_chain(outcome.error, outcome.context)
            return

        payload = outcome.payload
        if isinstance(payload, LoadPayload):
            if payload.message:
                self.status.info(payload.message)
            self.store.replace_with_loaded_data(payload.points)
            self.data_path = payload.path
            self.status.info(f"Loaded {len(payload.points)} points from {payload.path}")
        elif isinstance(payload, SavePayload):
            self.data_path = payload.path
            self.status.info(f"Save successfully to {payload.path}")
        elif isinstance(payload, TrainPayload):
            self.status.info("Model training completed")
            try:
                self.experiment.apply_results(payload.results)
            except ValueError as exc:
                self.status.error(str(exc))
        elif isinstance(payload, ExternalRunPayload):
            self.status.info("External experiment run succeeded")
        else:
            raise TypeError(f"Unknown payload type: {type(payload).__name__}")

    # --- experiment ---

    def select_algorithm(self, name: str | None) -> None:
        """Switch algorithm; any existing model is discarded."""
        if self.op_state is OperationalState.TRAINING_EXPERIMENT:
            self.status.info("Cannot change algorithm while training is in progress")
            return
        self.experiment = Experiment.none() if name is None else Experiment.select(name)

    def model_status(self) -> ModelStatus:
        status = self.experiment.status(self.store.timestamp())
        if status is ModelStatus.CURRENT and not self._sizes_match():
            # Empty history reads as the epoch for any point set
            return ModelStatus.TRAINED_ON_OLDER_DATA
        return status

    def _sizes_match(self) -> bool:
        model = self.experiment.model_inference()
        return model is not None and len(model) == len(self.store)

    def inference_model(self) -> TrainedModel | None:
        """The trained model, but only if it was trained on exactly the current data."""
        if not self.experiment.is_at_timestamp(self.store.timestamp()) or not self._sizes_match():
            return None
        return self.experiment.model_inference()

    def predictions(self) -> list[Label] | None:
        model = self.inference_model()
        return None if model is None else model.predictions()

    def classifications(self) -> list[Classification] | None:
        model = self.inference_model()
        return None if model is None else classify_points(self.store.points(), model)

    def classification_groups(self) -> dict[Classification, list[PointArray]] | None:
        """Point coordinates grouped by classification, for plotting."""
        classes = self.classifications()
        if classes is None:
            return None
        groups: dict[Classification, list[PointArray]] = {c: [] for c in Classification}
        for point, cls in zip(self.store.points(), classes):
            groups[cls].append(point.to_array())
        return groups

    def label_groups(self) -> dict[Label, list[PointArray]]:
        points = self.store.points()
        return {Label.NORMAL: array_of_normal(points), Label.ANOMALY: array_of_anom(points)}

    def evaluation(self) -> EvaluationSummary | None:
        model = self.inference_model()
        if model is None or self.store.is_empty():
            return None
        return evaluate_model(self.store.points(), model)

    def predict_config(self) -> ThresholdConfig | None:
        model = self.inference_model()
        return None if model is None else model.predict_config

    def set_threshold(self, value: float) -> None:
        """Move the decision threshold of the current model without retraining."""
        model = self.inference_model()
        if not isinstance(model, TrainedAverageDistance):
            raise RuntimeError("The current model has no adjustable threshold")
        model.set_threshold(value)

    # --- convenience passthroughs ---

    def add_point(self, coordinate: PointArray | None, label: Label = Label.NORMAL) -> None:
        self.store.add(coordinate, label, self.status)

    def delete_point(self, coordinate: PointArray | None, label: Label = Label.NORMAL) -> None:
        self.store.delete(coordinate, label, self.status)

    def undo(self) -> None:
        self.store.undo(self.status)

    def redo(self) -> None:
        self.store.redo(self.status)
