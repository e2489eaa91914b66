"""
Freshness cache for projections.

Per investment the cache is in one of three states:

  ABSENT  no projection stored
  FRESH   stored projection generated at or after the investment's last change
  STALE   stored projection older than the last change, or the caller passed
          override options (an override always forces a recompute)

``get_or_compute`` returns a FRESH projection untouched and recomputes in the
other two states. Recomputation holds a per-investment lock and writes the
store only once a complete result exists, so callers see either the previous
projection or the new one.
"""

import logging
import threading
from dataclasses import replace
from datetime import datetime
from enum import Enum
from functools import partial
from typing import Callable, Hashable, Mapping

from invest_projection.config import EngineConfig
from invest_projection.errors import InvestmentNotFound
from invest_projection.investment import InvestmentRecord, as_utc, utcnow
from invest_projection.simulation.analysis import run_analysis
from invest_projection.simulation.engine import ProjectionResult

logger = logging.getLogger(__name__)

Pipeline = Callable[[InvestmentRecord, Mapping[str, str] | None], ProjectionResult]


class CacheState(Enum):
    ABSENT = "absent"
    FRESH = "fresh"
    STALE = "stale"


class InMemoryProjectionStore:
    def __init__(self):
        self._entries: dict[Hashable, ProjectionResult] = {}
        self._lock = threading.Lock()

    def get(self, investment_id: Hashable) -> ProjectionResult | None:
        with self._lock:
            return self._entries.get(investment_id)

    def put(self, investment_id: Hashable, result: ProjectionResult) -> None:
        with self._lock:
            self._entries[investment_id] = result

    def delete(self, investment_id: Hashable) -> None:
        with self._lock:
            self._entries.pop(investment_id, None)


def classify(
    investment: InvestmentRecord,
    cached: ProjectionResult | None,
    override_options: Mapping[str, str] | None = None,
) -> CacheState:
    if cached is None:
        return CacheState.ABSENT
    if override_options:
        return CacheState.STALE
    if as_utc(cached.generated_at) < investment.last_modified:
        return CacheState.STALE
    return CacheState.FRESH


class ProjectionCache:
    """
    Args:
        investments: anything with ``get(investment_id) -> InvestmentRecord | None``
        store: projection store with ``get``/``put``/``delete`` (in-memory by default)
        pipeline: ``pipeline(investment, override_options) -> ProjectionResult``,
                  defaults to ``run_analysis``
        clock: returns the generation timestamp stamped on new projections
        config: engine config handed to the default pipeline
    """

    def __init__(
        self,
        investments,
        store=None,
        pipeline: Pipeline | None = None,
        clock: Callable[[], datetime] | None = None,
        config: EngineConfig | None = None,
    ):
        self._investments = investments
        self._store = store if store is not None else InMemoryProjectionStore()
        self._pipeline = pipeline or partial(run_analysis, config=config)
        self._clock = clock or utcnow
        self._locks: dict[Hashable, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _lock_for(self, investment_id: Hashable) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(investment_id)
            if lock is None:
                lock = self._locks[investment_id] = threading.Lock()
            return lock

    def _lookup(self, investment_id: Hashable) -> InvestmentRecord:
        investment = self._investments.get(investment_id)
        if investment is None:
            raise InvestmentNotFound(investment_id)
        return investment

    def state(self, investment_id: Hashable, override_options=None) -> CacheState:
        investment = self._lookup(investment_id)
        return classify(investment, self._store.get(investment_id), override_options)

    def get_or_compute(
        self,
        investment_id: Hashable,
        override_options: Mapping[str, str] | None = None,
    ) -> ProjectionResult:
        with self._lock_for(investment_id):
            # Stamped before the record is read, so edits made during the run
            # leave the new projection stale.
            started_at = as_utc(self._clock())
            investment = self._lookup(investment_id)
            cached = self._store.get(investment_id)
            state = classify(investment, cached, override_options)

            if state is CacheState.FRESH:
                logger.debug("Projection for %r is fresh", investment_id)
                return cached

            logger.info("Computing projection for %r (%s)", investment_id, state.value)
            result = self._pipeline(investment, override_options or None)
            result = replace(result, generated_at=started_at)
            self._store.put(investment_id, result)
            return result

    def invalidate(self, investment_id: Hashable) -> None:
        with self._lock_for(investment_id):
            self._store.delete(investment_id)
