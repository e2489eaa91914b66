"""Simulation parameters and parsing of the string-keyed option map."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from invest_projection.errors import MalformedOption

# Option map keys
ANALYSIS_LENGTH = "AnalysisLength"
SIM_COUNT = "SimCount"
RV_MU = "RandomVariableMu"
RV_SIGMA = "RandomVariableSigma"
RV_SCALE_FACTOR = "RandomVariableScaleFactor"

OPTION_KEYS = (ANALYSIS_LENGTH, SIM_COUNT, RV_MU, RV_SIGMA, RV_SCALE_FACTOR)


@dataclass(frozen=True)
class SimulationParameters:
    base_price: Decimal
    step_count: int
    scale_factor: Decimal
    distribution: Any    # anything with sample() -> float

    def __post_init__(self):
        if self.step_count <= 0:
            raise ValueError(f"step_count must be positive, got {self.step_count}")


@dataclass(frozen=True)
class SimulationOptions:
    """Validated view of an option map."""

    analysis_length: int
    sim_count: int
    scale_factor: Decimal
    rv_params: dict[str, float] = field(default_factory=dict)

    def to_parameters(self, base_price, distribution) -> SimulationParameters:
        return SimulationParameters(
            base_price=Decimal(str(base_price)),
            step_count=self.analysis_length,
            scale_factor=self.scale_factor,
            distribution=distribution,
        )


def parse_options(options: Mapping[str, str]) -> SimulationOptions:
    """
    Validate the option map for a normal / log-normal Monte Carlo run.

    Used keys:
      "AnalysisLength"            - number of steps (months) to project, > 0
      "SimCount"                  - number of trials
      "RandomVariableMu"          - mu of the random variable
      "RandomVariableSigma"       - sigma of the random variable
      "RandomVariableScaleFactor" - multiplier applied to every draw (decimal)

    Mu and sigma are optional here: when absent they are left out of
    ``rv_params`` and the distribution factory reports the missing parameter.
    """
    analysis_length = _parse_int(options, ANALYSIS_LENGTH)
    if analysis_length <= 0:
        raise _malformed(options, ANALYSIS_LENGTH, "not a positive integer")

    sim_count = _parse_int(options, SIM_COUNT)
    scale_factor = _parse_decimal(options, RV_SCALE_FACTOR)

    rv_params = {}
    for key, param in ((RV_MU, "Mu"), (RV_SIGMA, "Sigma")):
        if options.get(key) is not None:
            rv_params[param] = _parse_float(options, key)

    return SimulationOptions(
        analysis_length=analysis_length,
        sim_count=sim_count,
        scale_factor=scale_factor,
        rv_params=rv_params,
    )


def _raw(options, key) -> str:
    value = options.get(key)
    if value is None:
        raise MalformedOption(key)
    raw = str(value).strip()
    # int(), float() and Decimal() all accept "1_000"
    if "_" in raw:
        raise MalformedOption(key, value, "not a plain number")
    return raw


def _malformed(options, key, reason):
    return MalformedOption(key, options.get(key), reason)


def _parse_int(options, key) -> int:
    raw = _raw(options, key)
    try:
        return int(raw)
    except ValueError:
        raise _malformed(options, key, "not an integer") from None


def _parse_float(options, key) -> float:
    raw = _raw(options, key)
    try:
        value = float(raw)
    except ValueError:
        raise _malformed(options, key, "not a number") from None
    if value != value or value in (float("inf"), float("-inf")):
        raise _malformed(options, key, "not a finite number")
    return value


def _parse_decimal(options, key) -> Decimal:
    raw = _raw(options, key)
    try:
        value = Decimal(raw)
    except InvalidOperation:
        raise _malformed(options, key, "not a decimal") from None
    if not value.is_finite():
        raise _malformed(options, key, "not a finite decimal")
    return value
