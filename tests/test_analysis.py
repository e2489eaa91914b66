"""Tests for the analysis entry points and dispatch."""
from decimal import Decimal

import pytest

from invest_projection.config import DEFAULT_ANALYSIS_OPTIONS, EngineConfig
from invest_projection.errors import InvalidTrialCount, MissingParameter, UnknownAnalysis
from invest_projection.investment import InvestmentRecord
from invest_projection.simulation.analysis import (
    ANALYSES,
    monte_carlo_lognormal,
    monte_carlo_normal,
    run_analysis,
)

CONFIG = EngineConfig(max_workers=4, seed=2026)


def _stock(base="100", **kwargs):
    return InvestmentRecord(investment_id="ACME", base_price=Decimal(base), **kwargs)


def test_normal_projection_shape(small_options):
    result = monte_carlo_normal(_stock(), small_options, config=CONFIG)
    assert result.step_count == 12
    assert len(result.min) == len(result.max) == 12
    assert result.avg[0] == Decimal(100)


def test_deterministic_walk_with_zero_sigma(small_options):
    small_options.update({"RandomVariableMu": "1", "RandomVariableSigma": "0",
                          "RandomVariableScaleFactor": "2", "AnalysisLength": "6"})
    result = monte_carlo_normal(_stock(base="10"), small_options, config=CONFIG)
    expected = tuple(Decimal(10 + 2 * i) for i in range(6))
    assert result.min == expected
    assert result.max == expected
    assert result.avg == expected


def test_lognormal_walk_only_rises(small_options):
    result = monte_carlo_lognormal(_stock(), small_options, config=CONFIG)
    for i in range(1, result.step_count):
        assert result.min[i] > result.min[i - 1]


def test_zero_sim_count(small_options):
    small_options["SimCount"] = "0"
    with pytest.raises(InvalidTrialCount):
        monte_carlo_normal(_stock(), small_options, config=CONFIG)


def test_missing_sigma(small_options):
    del small_options["RandomVariableSigma"]
    with pytest.raises(MissingParameter) as exc:
        monte_carlo_lognormal(_stock(), small_options, config=CONFIG)
    assert exc.value.parameter == "Sigma"


def test_seeded_analysis_is_reproducible(small_options):
    a = monte_carlo_normal(_stock(), small_options, config=CONFIG)
    b = monte_carlo_normal(_stock(), small_options, config=CONFIG)
    assert a.min == b.min
    assert a.max == b.max


# ── Dispatch ──

def test_registry_names():
    assert set(ANALYSES) == {"MonteCarlo_NormalDist", "MonteCarlo_LogNormalDist"}


def test_unknown_analysis_type():
    with pytest.raises(UnknownAnalysis, match="Bond"):
        run_analysis(_stock(analysis_type="BondAnalysis"))


def test_run_analysis_uses_investment_type(small_options):
    stock = _stock(analysis_type="MonteCarlo_LogNormalDist", analysis_options=small_options)
    result = run_analysis(stock, config=CONFIG)
    assert result.step_count == 12
    assert result.min[1] > result.min[0]


def test_option_precedence():
    stock = _stock(analysis_options={"AnalysisLength": "24", "SimCount": "10"})
    options = stock.effective_options({"SimCount": "5"})
    assert options["AnalysisLength"] == "24"
    assert options["SimCount"] == "5"
    assert options["RandomVariableSigma"] == DEFAULT_ANALYSIS_OPTIONS["RandomVariableSigma"]


def test_overrides_reach_the_analysis(small_options):
    stock = _stock(analysis_options=small_options)
    result = run_analysis(stock, {"AnalysisLength": "3"}, config=CONFIG)
    assert result.step_count == 3
