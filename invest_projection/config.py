"""
Engine configuration.

Values come from the dataclass defaults, optionally overridden from the
environment:
  PROJECTION_MAX_WORKERS    worker count for the trial pool (default: cpu count)
  PROJECTION_USE_PROCESSES  "1"/"true" to run trials in worker processes
  PROJECTION_SEED           integer seed for reproducible runs
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Analysis options applied when neither the investment nor the caller set them.
DEFAULT_ANALYSIS_OPTIONS = {
    "AnalysisLength": "60",          # months
    "SimCount": "1000",
    "RandomVariableMu": "0",
    "RandomVariableSigma": "1",
    "RandomVariableScaleFactor": "1",
}

DEFAULT_ANALYSIS_TYPE = "MonteCarlo_NormalDist"

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass
class EngineConfig:
    """Runtime knobs for the trial runner."""

    max_workers: int | None = None   # None = os.cpu_count()
    use_processes: bool = False
    seed: int | None = None

    def __post_init__(self):
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {self.max_workers}")

    @property
    def workers(self) -> int:
        return self.max_workers or os.cpu_count() or 1

    @classmethod
    def from_env(cls) -> "EngineConfig":
        max_workers = _int_env("PROJECTION_MAX_WORKERS")
        seed = _int_env("PROJECTION_SEED")
        use_processes = os.getenv("PROJECTION_USE_PROCESSES", "").strip().lower() in _TRUTHY
        return cls(max_workers=max_workers, use_processes=use_processes, seed=seed)


def _int_env(name: str) -> int | None:
    raw = os.getenv(name, "").strip()
    if not raw:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, expected an integer", name, raw)
        return None
