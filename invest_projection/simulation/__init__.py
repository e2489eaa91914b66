"""Monte Carlo random-walk projection of investment values."""
from .config import SimulationParameters, SimulationOptions, parse_options
from .distributions import RandomVariableKind, build_random_variable
from .engine import (
    ProjectionResult,
    aggregate_trials,
    project,
    run_trials,
    simulate_path,
    summary_stats,
)
from .analysis import ANALYSES, monte_carlo_lognormal, monte_carlo_normal, run_analysis
from .cache import CacheState, InMemoryProjectionStore, ProjectionCache
