"""
Monte Carlo analyses selectable by an investment's ``analysis_type``.

Both analyses simulate a scaled random walk starting at the investment's
base price; post-processing into holding value is left to the caller.
"""

import logging
import threading
import time
from typing import Mapping

from invest_projection.config import EngineConfig
from invest_projection.errors import UnknownAnalysis
from invest_projection.investment import InvestmentRecord
from invest_projection.simulation.config import parse_options
from invest_projection.simulation.distributions import RandomVariableKind, build_random_variable
from invest_projection.simulation.engine import ProjectionResult, project

logger = logging.getLogger(__name__)


def _monte_carlo(
    kind: RandomVariableKind,
    investment: InvestmentRecord,
    options: Mapping[str, str],
    config: EngineConfig | None = None,
    cancel_event: threading.Event | None = None,
) -> ProjectionResult:
    config = config or EngineConfig()
    parsed = parse_options(options)
    distribution = build_random_variable(kind, parsed.rv_params, seed=config.seed)
    params = parsed.to_parameters(investment.base_price, distribution)

    t0 = time.perf_counter()
    result = project(params, parsed.sim_count, config=config, cancel_event=cancel_event)
    logger.info("%s projection for %r: %d trials x %d steps in %.2fs",
                kind.name, investment.investment_id, parsed.sim_count,
                parsed.analysis_length, time.perf_counter() - t0)
    return result


def monte_carlo_normal(investment, options, config=None, cancel_event=None) -> ProjectionResult:
    """Random walk with normally distributed increments (Mu, Sigma)."""
    return _monte_carlo(RandomVariableKind.NORMAL, investment, options, config, cancel_event)


def monte_carlo_lognormal(investment, options, config=None, cancel_event=None) -> ProjectionResult:
    """Random walk with log-normal increments; Mu, Sigma describe the underlying normal."""
    return _monte_carlo(RandomVariableKind.LOGNORMAL, investment, options, config, cancel_event)


ANALYSES = {
    "MonteCarlo_NormalDist": monte_carlo_normal,
    "MonteCarlo_LogNormalDist": monte_carlo_lognormal,
}


def run_analysis(
    investment: InvestmentRecord,
    override_options: Mapping[str, str] | None = None,
    config: EngineConfig | None = None,
) -> ProjectionResult:
    analysis = ANALYSES.get(investment.analysis_type)
    if analysis is None:
        raise UnknownAnalysis(investment.analysis_type)
    options = investment.effective_options(override_options)
    return analysis(investment, options, config=config)
