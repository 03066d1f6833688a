"""
Enumeration types for the anomaly decision engine.

All enums inherit from str so they serialize to their plain value in
JSON responses, which is what the dashboard keys its charts and tables on.
"""

from enum import Enum


class SeverityLevel(str, Enum):
    """
    Categorical urgency label assigned to a sensor reading.

    Totally ordered normal < warning < critical. Use ``rank`` for
    comparisons; the str mixin would otherwise compare alphabetically.
    """

    NORMAL = "normal"
    WARNING = "warning"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]

    @classmethod
    def ordered(cls) -> list["SeverityLevel"]:
        """All levels, least to most severe."""
        return [cls.NORMAL, cls.WARNING, cls.CRITICAL]


_SEVERITY_RANK = {
    SeverityLevel.NORMAL: 0,
    SeverityLevel.WARNING: 1,
    SeverityLevel.CRITICAL: 2,
}


class Feature(str, Enum):
    """
    The five numeric readings carried by a metrics record.

    Declaration order is the tie-break priority used when two features
    contribute equally: temp first, humidity last.
    """

    TEMP = "temp"
    CURRENT = "current"
    VOLTAGE = "voltage"
    VIBRATION = "vibration"
    HUMIDITY = "humidity"

    @property
    def priority(self) -> int:
        return FEATURE_PRIORITY.index(self)


FEATURE_PRIORITY: list[Feature] = list(Feature)


class RootCauseCategory(str, Enum):
    """Fixed causal vocabulary reported by root-cause mapping."""

    NOMINAL_OPERATION = "nominal operation"
    THERMAL_OVERLOAD = "thermal overload"
    ELECTRICAL_OVERCURRENT = "electrical overcurrent"
    POWER_SUPPLY_INSTABILITY = "power supply instability"
    MECHANICAL_WEAR = "mechanical wear or imbalance"
    ENVIRONMENTAL_EXPOSURE = "environmental exposure"
