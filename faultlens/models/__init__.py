"""
Pydantic v2 data models for the anomaly decision engine.

Model Organization:
    - enums: severity levels, feature names, causal vocabulary
    - sensors: validated metrics records and sensor events (input)
    - results: explanations, aggregate windows, root causes, item errors (output)
"""

from .enums import FEATURE_PRIORITY, Feature, RootCauseCategory, SeverityLevel
from .results import (
    AggregateResponse,
    AggregateWindow,
    Contribution,
    Explanation,
    ExplanationResponse,
    ItemError,
    KPISummary,
    RootCause,
    RootCauseResponse,
)
from .sensors import Metrics, SensorEvent

__all__ = [
    # Enumerations
    "FEATURE_PRIORITY",
    "Feature",
    "RootCauseCategory",
    "SeverityLevel",
    # Input models
    "Metrics",
    "SensorEvent",
    # Result models
    "AggregateWindow",
    "Contribution",
    "Explanation",
    "ItemError",
    "RootCause",
    # Response models
    "AggregateResponse",
    "ExplanationResponse",
    "KPISummary",
    "RootCauseResponse",
]
