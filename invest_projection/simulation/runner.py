"""
CLI runner for the random-walk projection.

Usage:
    python -m invest_projection.simulation --base-price 100 --analysis-length 60 \
        --sim-count 1000 --mu 0 --sigma 1 --scale-factor 1

    # Log-normal increments, reproducible, chart written to a file
    python -m invest_projection.simulation --distribution lognormal --seed 7 \
        --base-price 250 --plot projection.png --start-date 2026-01-01
"""

import argparse
import logging
from decimal import Decimal

from invest_projection.config import EngineConfig
from invest_projection.investment import InvestmentRecord
from invest_projection.simulation.analysis import run_analysis
from invest_projection.simulation.config import (
    ANALYSIS_LENGTH,
    RV_MU,
    RV_SCALE_FACTOR,
    RV_SIGMA,
    SIM_COUNT,
)
from invest_projection.simulation.engine import summary_stats

ANALYSIS_TYPES = {
    "normal": "MonteCarlo_NormalDist",
    "lognormal": "MonteCarlo_LogNormalDist",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Monte Carlo random-walk projection of an investment's value"
    )
    parser.add_argument("--base-price", default="100",
                        help="Starting value (default: 100)")
    parser.add_argument("--analysis-length", type=int, default=60,
                        help="Number of steps (months) to project (default: 60)")
    parser.add_argument("--sim-count", type=int, default=1000,
                        help="Number of simulated paths (default: 1000)")
    parser.add_argument("--mu", type=float, default=0.0,
                        help="Mu of the random variable (default: 0)")
    parser.add_argument("--sigma", type=float, default=1.0,
                        help="Sigma of the random variable (default: 1)")
    parser.add_argument("--scale-factor", default="1",
                        help="Multiplier applied to each draw (default: 1)")
    parser.add_argument("--distribution", choices=sorted(ANALYSIS_TYPES),
                        default="normal")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed (default: random)")
    parser.add_argument("--workers", type=int, default=None,
                        help="Worker count (default: PROJECTION_MAX_WORKERS or cpu count)")
    parser.add_argument("--processes", action="store_true",
                        help="Run trials in worker processes instead of threads")
    parser.add_argument("--plot", default=None, metavar="FILE",
                        help="Write the band chart to FILE")
    parser.add_argument("--start-date", default=None,
                        help="Date of the first step for the chart x-axis (YYYY-MM-DD)")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def run(args=None):
    parsed = build_parser().parse_args(args)

    logging.basicConfig(
        level=logging.DEBUG if parsed.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    env = EngineConfig.from_env()
    config = EngineConfig(
        max_workers=parsed.workers if parsed.workers is not None else env.max_workers,
        use_processes=parsed.processes or env.use_processes,
        seed=parsed.seed if parsed.seed is not None else env.seed,
    )

    options = {
        ANALYSIS_LENGTH: str(parsed.analysis_length),
        SIM_COUNT: str(parsed.sim_count),
        RV_MU: repr(parsed.mu),
        RV_SIGMA: repr(parsed.sigma),
        RV_SCALE_FACTOR: parsed.scale_factor,
    }
    investment = InvestmentRecord(
        investment_id="cli",
        base_price=Decimal(parsed.base_price),
        analysis_type=ANALYSIS_TYPES[parsed.distribution],
    )

    print(f"\nSimulating {parsed.sim_count:,} paths x {parsed.analysis_length} steps "
          f"({parsed.distribution}, {config.workers} workers)...")
    result = run_analysis(investment, options, config=config)
    stats = summary_stats(result)

    print("\n" + "=" * 60)
    print("  MONTE CARLO RANDOM-WALK PROJECTION")
    print("=" * 60)
    print(f"  Distribution:   {parsed.distribution} (mu={parsed.mu}, sigma={parsed.sigma})")
    print(f"  Scale factor:   {parsed.scale_factor}")
    print(f"  Paths:          {parsed.sim_count:,}")
    print(f"  Horizon:        {stats['n_steps']} steps")
    print(f"  Initial Value:  {stats['initial_value']:>14,.2f}")
    print("  " + "-" * 56)
    print(f"  Final Min:      {stats['final_min']:>14,.2f}")
    print(f"  Final Avg:      {stats['final_avg']:>14,.2f}")
    print(f"  Final Max:      {stats['final_max']:>14,.2f}")
    print(f"  Final Spread:   {stats['final_spread']:>14,.2f}")
    print("  " + "-" * 56)
    if stats["expected_return_pct"] is not None:
        print(f"  Expected Return:    {stats['expected_return_pct']:>+8.1f}%  (average)")
    print("=" * 60)

    if parsed.plot:
        from invest_projection.simulation.plotting import plot_projection
        plot_projection(
            result,
            title=f"{parsed.distribution.title()} random walk",
            start_date=parsed.start_date,
            output=parsed.plot,
        )
        print(f"\nChart written to {parsed.plot}")

    return stats


def main():
    run()


if __name__ == "__main__":
    main()
