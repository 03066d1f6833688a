"""
Sensor input models for the anomaly decision engine.

This module defines the validated shape of a metrics record and of a
sensor event. Validation happens here, at the edge; engine components
assume every value they receive is a finite float.
"""

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import FEATURE_PRIORITY, Feature

# Largest accepted reading magnitude; keeps every deviation score finite
MAX_READING_MAGNITUDE = 1e9


class Metrics(BaseModel):
    """
    One snapshot of the five numeric readings taken from a physical asset.

    ``temp`` and ``current`` gate severity and are always required. The
    remaining readings are optional; a null value is treated as absent.
    Unknown keys are ignored so dashboards can send extra fields.

    Attributes:
        temp: Temperature in degrees Celsius
        voltage: Supply voltage in volts
        current: Load current in amperes
        vibration: Unitless vibration magnitude
        humidity: Relative humidity in percent
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    temp: float = Field(description="Temperature (C)")
    current: float = Field(description="Load current (A)")
    voltage: Optional[float] = Field(default=None, description="Supply voltage (V)")
    vibration: Optional[float] = Field(default=None, description="Vibration magnitude")
    humidity: Optional[float] = Field(default=None, description="Relative humidity (%)")

    @field_validator("temp", "current", "voltage", "vibration", "humidity", mode="before")
    @classmethod
    def reject_booleans(cls, v: Any) -> Any:
        """Booleans are ints in Python; refuse them as readings."""
        if isinstance(v, bool):
            raise ValueError("Reading must be a number, not a boolean")
        return v

    @field_validator("temp", "current", "voltage", "vibration", "humidity")
    @classmethod
    def validate_finite(cls, v: Optional[float]) -> Optional[float]:
        """Ensure readings are finite and within the accepted magnitude."""
        if v is None:
            return v
        if not math.isfinite(v):
            raise ValueError("Reading must be a finite number")
        if abs(v) > MAX_READING_MAGNITUDE:
            raise ValueError(f"Reading magnitude must not exceed {MAX_READING_MAGNITUDE:g}")
        return v

    def present(self) -> dict[Feature, float]:
        """Readings that were supplied, keyed by feature in priority order."""
        values = {}
        for feature in FEATURE_PRIORITY:
            value = getattr(self, feature.value)
            if value is not None:
                values[feature] = value
        return values


class SensorEvent(BaseModel):
    """
    A caller-identified metrics record.

    The id is the join key the dashboard uses to line explanations and
    root causes back up with its event list. It need not be unique.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(description="Caller-supplied event identifier")
    metrics: Metrics = Field(description="Readings for this event")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Ensure the event id is non-empty."""
        if not v.strip():
            raise ValueError("Event id must be a non-empty string")
        return v
