import threading
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import matplotlib
matplotlib.use("Agg")

import pytest

from invest_projection.investment import InMemoryInvestmentStore, InvestmentRecord
from invest_projection.simulation.engine import ProjectionResult


class ConstantVariable:
    """Always draws the same value; clones are the instance itself."""

    def __init__(self, value=0.0):
        self.value = value

    def sample(self):
        return self.value

    def spawn(self, n):
        return [self] * n


class SequenceVariable:
    """Replays a fixed list of draws. Not spawnable."""

    def __init__(self, draws):
        self._draws = list(draws)
        self._idx = 0

    def sample(self):
        value = self._draws[self._idx]
        self._idx += 1
        return value


class CountingVariable:
    """Not spawnable and not thread-safe on its own."""

    def __init__(self):
        self.calls = 0

    def sample(self):
        current = self.calls
        self.calls = current + 1
        return 1.0


class FakeClock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)
        return self.now


class CountingPipeline:
    """Stand-in for run_analysis that records every invocation."""

    def __init__(self):
        self.calls = []
        self._lock = threading.Lock()

    def __call__(self, investment, override_options):
        with self._lock:
            self.calls.append((investment.investment_id, override_options))
            n = len(self.calls)
        value = investment.base_price + n
        series = (investment.base_price, value)
        return ProjectionResult(
            min=series, max=series, avg=series,
            generated_at=datetime(2000, 1, 1, tzinfo=timezone.utc),
        )


T0 = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return FakeClock(T0 + timedelta(hours=1))


@pytest.fixture
def investments():
    return InMemoryInvestmentStore([
        InvestmentRecord(investment_id=1, base_price=Decimal("100"), last_modified=T0),
        InvestmentRecord(investment_id=2, base_price=Decimal("42.50"), last_modified=T0),
    ])


@pytest.fixture
def pipeline():
    return CountingPipeline()


@pytest.fixture
def small_options():
    return {
        "AnalysisLength": "12",
        "SimCount": "50",
        "RandomVariableMu": "0",
        "RandomVariableSigma": "1",
        "RandomVariableScaleFactor": "1",
    }
