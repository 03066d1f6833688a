"""
Decision engine for sensor anomaly analysis.

Components, leaves first:

- SeverityClassifier: threshold rules, normal / warning / critical
- FeatureAttributor: ranked per-feature deviation scores
- WindowAggregator: severity counts over one batch snapshot
- RootCauseMapper: causal label from the top contributing feature

All components are pure and stateless; they depend only on their input
and fixed constants, so a request's items can be processed in any order.
"""

__version__ = "1.0.0"

__all__ = [
    "FeatureAttributor",
    "RootCauseMapper",
    "SeverityClassifier",
    "SeverityThresholds",
    "WindowAggregator",
]

from faultlens.engine.aggregator import WindowAggregator
from faultlens.engine.attribution import FeatureAttributor
from faultlens.engine.classifier import SeverityClassifier, SeverityThresholds
from faultlens.engine.rootcause import RootCauseMapper
