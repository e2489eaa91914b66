"""
Scaled random-walk Monte Carlo engine.

Model: X(0) = base_price, X(t+1) = X(t) + scale_factor * Z(t)

Path values are Decimal. Each draw Z(t) is a float and is converted through
str() before scaling, so long horizons do not pick up binary rounding drift.
"""

import logging
import threading
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor, as_completed
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from decimal import Decimal

import pandas as pd

from invest_projection.config import EngineConfig
from invest_projection.errors import (
    EmptyTrialSet,
    InconsistentPathLength,
    InvalidTrialCount,
    TrialsCancelled,
)
from invest_projection.simulation.config import SimulationParameters

logger = logging.getLogger(__name__)

SamplePath = tuple[Decimal, ...]
TrialSet = tuple[SamplePath, ...]


@dataclass(frozen=True)
class ProjectionResult:
    min: tuple[Decimal, ...]
    max: tuple[Decimal, ...]
    avg: tuple[Decimal, ...]
    generated_at: datetime

    @property
    def step_count(self) -> int:
        return len(self.avg)

    def to_frame(self) -> pd.DataFrame:
        """Float view of the three bands, one row per step."""
        return pd.DataFrame(
            {
                "min": [float(v) for v in self.min],
                "max": [float(v) for v in self.max],
                "avg": [float(v) for v in self.avg],
            },
            index=pd.RangeIndex(self.step_count, name="step"),
        )


def simulate_path(params: SimulationParameters) -> SamplePath:
    """
    One trial. The value recorded at step i is the value before that step's
    draw is applied, so path[0] == base_price and the last draw is never seen.
    """
    current = params.base_price
    path = []
    for _ in range(params.step_count):
        path.append(current)
        current += params.scale_factor * Decimal(str(params.distribution.sample()))
    return tuple(path)


class _LockedSampler:
    """Serializes draws from a distribution that cannot hand out clones."""

    def __init__(self, distribution, lock: threading.Lock):
        self._distribution = distribution
        self._lock = lock

    def sample(self) -> float:
        with self._lock:
            return self._distribution.sample()


def _trial_samplers(distribution, trial_count: int, use_processes: bool) -> list:
    if hasattr(distribution, "spawn"):
        return list(distribution.spawn(trial_count))
    if use_processes:
        raise TypeError(
            f"{type(distribution).__name__} has no spawn(); "
            "process workers need independent samplers"
        )
    logger.debug("%s cannot spawn clones, sharing it behind a lock",
                 type(distribution).__name__)
    lock = threading.Lock()
    return [_LockedSampler(distribution, lock)] * trial_count


def run_trials(
    params: SimulationParameters,
    trial_count: int,
    config: EngineConfig | None = None,
    cancel_event: threading.Event | None = None,
) -> TrialSet:
    """
    Run ``trial_count`` independent paths on a worker pool and block until
    all of them are done.

    Every trial gets its own sampler from ``distribution.spawn()``; nothing
    stateful is shared across workers. ``cancel_event`` is checked between
    dispatches and between completions, never inside a trial.
    """
    if trial_count < 1:
        raise InvalidTrialCount(trial_count)

    config = config or EngineConfig()
    samplers = _trial_samplers(params.distribution, trial_count, config.use_processes)
    executor_cls = ProcessPoolExecutor if config.use_processes else ThreadPoolExecutor
    workers = min(config.workers, trial_count)

    logger.debug("Dispatching %d trials x %d steps on %d %s workers",
                 trial_count, params.step_count, workers,
                 "process" if config.use_processes else "thread")

    paths: list[SamplePath] = []
    with executor_cls(max_workers=workers) as executor:
        futures = []
        try:
            for sampler in samplers:
                if cancel_event is not None and cancel_event.is_set():
                    break
                trial_params = replace(params, distribution=sampler)
                futures.append(executor.submit(simulate_path, trial_params))

            for future in as_completed(futures):
                if cancel_event is not None and cancel_event.is_set():
                    break
                paths.append(future.result())
        except BaseException:
            for future in futures:
                future.cancel()
            raise

        if len(paths) < trial_count:
            for future in futures:
                future.cancel()
            logger.warning("Cancelled after %d of %d trials", len(paths), trial_count)
            raise TrialsCancelled(len(paths), trial_count)

    return tuple(paths)


def aggregate_trials(
    trials: TrialSet,
    step_count: int,
    generated_at: datetime | None = None,
) -> ProjectionResult:
    """Reduce a complete trial set to per-step min, max and mean."""
    if not trials:
        raise EmptyTrialSet()
    for path in trials:
        if len(path) != step_count:
            raise InconsistentPathLength(step_count, len(path))

    count = Decimal(len(trials))
    mins, maxs, avgs = [], [], []
    for i in range(step_count):
        column = [path[i] for path in trials]
        mins.append(min(column))
        maxs.append(max(column))
        avgs.append(sum(column, Decimal(0)) / count)

    return ProjectionResult(
        min=tuple(mins),
        max=tuple(maxs),
        avg=tuple(avgs),
        generated_at=generated_at or datetime.now(timezone.utc),
    )


def project(
    params: SimulationParameters,
    trial_count: int,
    config: EngineConfig | None = None,
    cancel_event: threading.Event | None = None,
) -> ProjectionResult:
    trials = run_trials(params, trial_count, config=config, cancel_event=cancel_event)
    return aggregate_trials(trials, params.step_count)


def summary_stats(result: ProjectionResult) -> dict:
    initial = float(result.avg[0])
    final_avg = float(result.avg[-1])

    stats = {
        "n_steps": result.step_count,
        "initial_value": initial,
        "final_min": float(result.min[-1]),
        "final_max": float(result.max[-1]),
        "final_avg": final_avg,
        "final_spread": float(result.max[-1] - result.min[-1]),
        "generated_at": result.generated_at.isoformat(),
    }
    if initial != 0:
        stats["expected_return_pct"] = (final_avg / initial - 1) * 100
    else:
        stats["expected_return_pct"] = None
    return stats
