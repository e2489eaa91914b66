"""
Random variables for the scaled random walk.

Each variable owns its own numpy Generator. Generators are not safe to share
between threads, so concurrent trials never share one: the runner asks the
variable for independent clones via ``spawn(n)``, which derives child seeds
from the variable's SeedSequence. Clones share the parameters and nothing else.
"""

from enum import Enum
from typing import Mapping

import numpy as np

from invest_projection.errors import MissingParameter, UnsupportedDistribution


class RandomVariableKind(Enum):
    NORMAL = "NORMAL"
    LOGNORMAL = "LOGNORMAL"
    # Declared for future use, no construction rule yet
    CONTINUOUS_UNIFORM = "CONTINUOUS_UNIFORM"
    BETA = "BETA"
    CAUCHY = "CAUCHY"
    CHI = "CHI"
    CHI_SQUARED = "CHI_SQUARED"
    ERLANG = "ERLANG"
    EXPONENTIAL = "EXPONENTIAL"
    FISHER_SNEDECOR = "FISHER_SNEDECOR"
    GAMMA = "GAMMA"
    INVERSE_GAMMA = "INVERSE_GAMMA"
    LAPLACE = "LAPLACE"
    PARETO = "PARETO"
    RAYLEIGH = "RAYLEIGH"
    STABLE = "STABLE"
    STUDENT_T = "STUDENT_T"
    WEIBULL = "WEIBULL"
    TRIANGULAR = "TRIANGULAR"

    @classmethod
    def parse(cls, kind) -> "RandomVariableKind":
        if isinstance(kind, cls):
            return kind
        try:
            return cls[str(kind).strip().upper()]
        except KeyError:
            raise UnsupportedDistribution(kind) from None


class RandomVariable:
    """Base class: draws one float per ``sample()`` call from a private Generator."""

    kind: RandomVariableKind
    required_params: tuple[str, ...] = ()

    def __init__(self, seed_seq: np.random.SeedSequence):
        self._seed_seq = seed_seq
        self._rng = np.random.default_rng(seed_seq)

    def sample(self) -> float:
        raise NotImplementedError

    def spawn(self, n: int) -> list["RandomVariable"]:
        """Independent clones with the same parameters and child seeds."""
        return [self._clone(child) for child in self._seed_seq.spawn(n)]

    def _clone(self, seed_seq: np.random.SeedSequence) -> "RandomVariable":
        raise NotImplementedError


class NormalVariable(RandomVariable):
    kind = RandomVariableKind.NORMAL
    required_params = ("Mu", "Sigma")

    def __init__(self, mu: float, sigma: float, seed_seq: np.random.SeedSequence):
        if sigma < 0:
            raise ValueError(f"Sigma must be non-negative, got {sigma}")
        super().__init__(seed_seq)
        self.mu = mu
        self.sigma = sigma

    def sample(self) -> float:
        return float(self._rng.normal(self.mu, self.sigma))

    def _clone(self, seed_seq):
        return NormalVariable(self.mu, self.sigma, seed_seq)

    def __repr__(self):
        return f"NormalVariable(mu={self.mu}, sigma={self.sigma})"


class LogNormalVariable(RandomVariable):
    """Log-normal: mu and sigma describe the underlying normal."""

    kind = RandomVariableKind.LOGNORMAL
    required_params = ("Mu", "Sigma")

    def __init__(self, mu: float, sigma: float, seed_seq: np.random.SeedSequence):
        if sigma < 0:
            raise ValueError(f"Sigma must be non-negative, got {sigma}")
        super().__init__(seed_seq)
        self.mu = mu
        self.sigma = sigma

    def sample(self) -> float:
        return float(self._rng.lognormal(self.mu, self.sigma))

    def _clone(self, seed_seq):
        return LogNormalVariable(self.mu, self.sigma, seed_seq)

    def __repr__(self):
        return f"LogNormalVariable(mu={self.mu}, sigma={self.sigma})"


_BUILDERS = {
    RandomVariableKind.NORMAL: NormalVariable,
    RandomVariableKind.LOGNORMAL: LogNormalVariable,
}


def build_random_variable(
    kind,
    params: Mapping[str, float],
    seed: int | None = None,
) -> RandomVariable:
    """
    Build a sampleable random variable.

    Recognized parameter keys:
      "Mu"    - mean (of the underlying normal for LOGNORMAL)
      "Sigma" - standard deviation (of the underlying normal for LOGNORMAL)
    """
    kind = RandomVariableKind.parse(kind)
    builder = _BUILDERS.get(kind)
    if builder is None:
        raise UnsupportedDistribution(kind)

    for key in builder.required_params:
        if key not in params:
            raise MissingParameter(key)

    values = [float(params[key]) for key in builder.required_params]
    return builder(*values, seed_seq=np.random.SeedSequence(seed))


def supported_kinds() -> list[RandomVariableKind]:
    return list(_BUILDERS)
