"""Error taxonomy for the anomaly decision engine."""


class AnomalyEngineError(Exception):
    """Base exception for all decision engine failures."""

    pass


class MalformedRequestError(AnomalyEngineError):
    """Raised when a request as a whole cannot be processed (not a list, too large)."""

    pass


class InvariantViolationError(AnomalyEngineError):
    """Raised when an internal invariant fails. Indicates a logic defect."""

    pass
