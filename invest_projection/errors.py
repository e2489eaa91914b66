"""
Error taxonomy for the projection engine.

Every failure is a local validation error raised synchronously to the caller.
None of them are retried and no partial result accompanies them.
"""


class ProjectionError(ValueError):
    """Base class for all projection engine failures."""


class MissingParameter(ProjectionError):
    def __init__(self, parameter: str):
        self.parameter = parameter
        super().__init__(f"Missing required distribution parameter '{parameter}'")


class UnsupportedDistribution(ProjectionError):
    def __init__(self, kind):
        self.kind = kind
        name = getattr(kind, "name", kind)
        super().__init__(f"Distribution kind '{name}' is not supported")


class InvalidTrialCount(ProjectionError):
    def __init__(self, trial_count: int):
        self.trial_count = trial_count
        super().__init__(f"Trial count must be at least 1, got {trial_count}")


class InconsistentPathLength(ProjectionError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Expected paths of length {expected}, got one of length {actual}")


class EmptyTrialSet(ProjectionError):
    def __init__(self):
        super().__init__("Cannot aggregate an empty trial set")


class MalformedOption(ProjectionError):
    def __init__(self, key: str, value=None, reason: str = "missing"):
        self.key = key
        self.value = value
        if value is None:
            message = f"Option '{key}' is {reason}"
        else:
            message = f"Option '{key}' is {reason}: {value!r}"
        super().__init__(message)


class InvestmentNotFound(ProjectionError, LookupError):
    def __init__(self, investment_id):
        self.investment_id = investment_id
        super().__init__(f"Investment {investment_id!r} not found")


class UnknownAnalysis(ProjectionError):
    def __init__(self, analysis_type: str):
        self.analysis_type = analysis_type
        super().__init__(f"No analysis registered under '{analysis_type}'")


class TrialsCancelled(ProjectionError):
    def __init__(self, completed: int, requested: int):
        self.completed = completed
        self.requested = requested
        super().__init__(f"Simulation cancelled after {completed} of {requested} trials")
