"""
Severity Classifier — threshold rules for sensor readings.

Maps a metrics record to normal, warning or critical with a small ordered
rule set, first match wins:

    1. critical  if temp > critical_temp  or current > critical_current
    2. warning   if temp > warning_temp   or current > warning_current
    3. normal    otherwise

Raising temp or current can only raise or hold the level, never lower it.
Voltage, vibration and humidity do not gate severity; they only take part
in attribution and root-cause mapping.

Version: severity_classifier_v1
"""

import structlog
from pydantic import BaseModel, ConfigDict, field_validator

from faultlens.models.enums import SeverityLevel
from faultlens.models.sensors import Metrics

logger = structlog.get_logger()


class SeverityThresholds(BaseModel):
    """Strict upper bounds for temperature (C) and current (A)."""

    model_config = ConfigDict(frozen=True, validate_default=True)

    warning_temp: float = 50.0
    critical_temp: float = 60.0
    warning_current: float = 2.0
    critical_current: float = 3.0

    @field_validator("critical_temp")
    @classmethod
    def validate_temp_ordering(cls, v: float, info) -> float:
        """Ensure the warning temperature sits below the critical one."""
        if "warning_temp" in info.data and info.data["warning_temp"] >= v:
            raise ValueError(
                f"warning_temp ({info.data['warning_temp']}) must be below critical_temp ({v})"
            )
        return v

    @field_validator("critical_current")
    @classmethod
    def validate_current_ordering(cls, v: float, info) -> float:
        """Ensure the warning current sits below the critical one."""
        if "warning_current" in info.data and info.data["warning_current"] >= v:
            raise ValueError(
                f"warning_current ({info.data['warning_current']}) must be below "
                f"critical_current ({v})"
            )
        return v

    @classmethod
    def from_settings(cls, settings) -> "SeverityThresholds":
        return cls(
            warning_temp=settings.warning_temp,
            critical_temp=settings.critical_temp,
            warning_current=settings.warning_current,
            critical_current=settings.critical_current,
        )


DEFAULT_THRESHOLDS = SeverityThresholds()


class SeverityClassifier:
    """
    Classify a metrics record into a severity level.

    Pure and stateless: the same metrics always yield the same level.

    Example:
        >>> classifier = SeverityClassifier()
        >>> classifier.classify(Metrics(temp=58, current=2.8))
        <SeverityLevel.WARNING: 'warning'>
    """

    def __init__(self, thresholds: SeverityThresholds = DEFAULT_THRESHOLDS):
        self.thresholds = thresholds

    def classify(self, metrics: Metrics) -> SeverityLevel:
        """
        Classify severity: normal, warning or critical.

        Args:
            metrics: Validated metrics record

        Returns:
            Severity level
        """
        th = self.thresholds

        if metrics.temp > th.critical_temp or metrics.current > th.critical_current:
            severity = SeverityLevel.CRITICAL
        elif metrics.temp > th.warning_temp or metrics.current > th.warning_current:
            severity = SeverityLevel.WARNING
        else:
            severity = SeverityLevel.NORMAL

        logger.debug(
            "severity_classified",
            temp=metrics.temp,
            current=metrics.current,
            severity=severity,
        )
        return severity
