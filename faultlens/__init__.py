"""FaultLens: severity, explanation, aggregation and root cause for sensor readings."""

__version__ = "1.0.0"
