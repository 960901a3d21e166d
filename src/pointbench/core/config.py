"""YAML workbench configuration loader."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from pointbench.core.history import DEFAULT_MAX_HISTORY, validate_history_size

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class WorkbenchConfig:
    """Settings consumed by the point store, the experiment and logging."""
    rounding_enabled: bool = False
    decimal_places: int = 0
    max_history: int | None = DEFAULT_MAX_HISTORY
    algorithm: str | None = None
    log_level: str = "WARNING"

    @property
    def rounding_decimal_places(self) -> int | None:
        return self.decimal_places if self.rounding_enabled else None

    def validate(self) -> WorkbenchConfig:
        """Raise ValueError on out-of-range settings. Returns self."""
        if isinstance(self.decimal_places, bool) or not isinstance(self.decimal_places, int) \
                or not 0 <= self.decimal_places <= 10:
            raise ValueError(f"decimal_places must be an integer between 0 and 10, got {self.decimal_places!r}")
        validate_history_size(self.max_history)
        if self.algorithm is not None:
            from pointbench.model.experiment import ALGORITHMS, available_algorithms
            if self.algorithm not in ALGORITHMS:
                raise ValueError(
                    f"Unknown algorithm {self.algorithm!r}. Available: {available_algorithms()}"
                )
        if self.log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {LOG_LEVELS}, got {self.log_level!r}")
        return self


def load_config(path: str | Path | None = None) -> WorkbenchConfig:
    """Load a workbench configuration from a YAML file.

    If no path is given, returns the default configuration. Example::

        data:
          rounding:
            enabled: true
            decimal_places: 2
          max_history: 500      # null for unbounded
        experiment:
          algorithm: nearest_neighbor
        logging:
          level: INFO
    """
    if path is None:
        return WorkbenchConfig()

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError("Config file must be a YAML mapping")

    config = WorkbenchConfig()

    data = raw.get("data", {})
    if isinstance(data, dict):
        rounding = data.get("rounding", {})
        if isinstance(rounding, dict):
            config.rounding_enabled = bool(rounding.get("enabled", config.rounding_enabled))
            config.decimal_places = rounding.get("decimal_places", config.decimal_places)
        if "max_history" in data:
            config.max_history = data["max_history"]

    experiment = raw.get("experiment", {})
    if isinstance(experiment, dict):
        config.algorithm = experiment.get("algorithm", config.algorithm)

    logging_section = raw.get("logging", {})
    if isinstance(logging_section, dict):
        config.log_level = str(logging_section.get("level", config.log_level))

    return config.validate()
