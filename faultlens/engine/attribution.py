"""
Feature Attributor — deterministic "why" behind a severity.

Every reading has an expected operating band described by a center and a
scale. A feature's contribution is its normalized deviation magnitude:

    contribution = |value - center| / scale

Contributions are rounded to a fixed precision and ranked descending.
Ties (including the all-zero case) fall back to the fixed feature priority
temp, current, voltage, vibration, humidity, so the ranking never depends
on sort stability or on the order readings arrived in. Ranking is strict
only down to the configured precision: scores closer than 10^-precision
round to the same value and are ordered by priority.

The temperature and current bands are anchored on the critical thresholds:
a reading sitting exactly on its critical threshold contributes 1.0. With
the default thresholds this gives temp 45 +/- 15 and current 1.5 +/- 1.5.

The scores stand in for model attributions (the dashboard calls them
"shap_like") behind the same ordered-contribution contract; swapping in a
learned explainer only needs a new ``score`` implementation.

Version: feature_attributor_v1
"""

import math
from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from faultlens.engine.classifier import DEFAULT_THRESHOLDS, SeverityThresholds
from faultlens.engine.exceptions import InvariantViolationError
from faultlens.models.enums import Feature
from faultlens.models.results import Contribution
from faultlens.models.sensors import Metrics

logger = structlog.get_logger()


class FeatureBand(BaseModel):
    """Typical operating range of one reading."""

    model_config = ConfigDict(frozen=True)

    center: float = Field(description="Expected value")
    scale: float = Field(description="Deviation that counts as one band width")

    @field_validator("scale")
    @classmethod
    def validate_scale(cls, v: float) -> float:
        """Ensure the band has a positive width."""
        if v <= 0:
            raise ValueError(f"Band scale must be positive, got {v}")
        return v

    def deviation(self, value: float) -> float:
        return max(0.0, abs(value - self.center) / self.scale)


TEMP_CENTER = 45.0
CURRENT_CENTER = 1.5

DEFAULT_BANDS: dict[Feature, FeatureBand] = {
    Feature.TEMP: FeatureBand(center=TEMP_CENTER, scale=15.0),
    Feature.CURRENT: FeatureBand(center=CURRENT_CENTER, scale=1.5),
    Feature.VOLTAGE: FeatureBand(center=3.6, scale=0.6),
    Feature.VIBRATION: FeatureBand(center=0.3, scale=0.3),
    Feature.HUMIDITY: FeatureBand(center=50.0, scale=25.0),
}


def bands_for_thresholds(thresholds: SeverityThresholds) -> dict[Feature, FeatureBand]:
    """
    Operating bands with temp and current anchored on the critical thresholds.

    Args:
        thresholds: Classifier thresholds in force

    Returns:
        Band per feature

    Raises:
        ValueError: If a critical threshold does not lie above its band center
    """
    bands = dict(DEFAULT_BANDS)
    bands[Feature.TEMP] = FeatureBand(
        center=TEMP_CENTER, scale=thresholds.critical_temp - TEMP_CENTER
    )
    bands[Feature.CURRENT] = FeatureBand(
        center=CURRENT_CENTER, scale=thresholds.critical_current - CURRENT_CENTER
    )
    return bands


class FeatureAttributor:
    """
    Rank the readings of a metrics record by how far they sit from normal.

    Attributes:
        bands: Operating band per feature
        precision: Decimal places contributions are rounded to before ranking

    Example:
        >>> attributor = FeatureAttributor()
        >>> ranked = attributor.attribute(Metrics(temp=58, current=2.8, voltage=3.2))
        >>> ranked[0].feature
        <Feature.TEMP: 'temp'>
    """

    def __init__(
        self,
        bands: Optional[dict[Feature, FeatureBand]] = None,
        precision: int = 6,
    ):
        self.bands = dict(DEFAULT_BANDS if bands is None else bands)
        missing = [f.value for f in Feature if f not in self.bands]
        if missing:
            raise ValueError(f"No operating band for features: {missing}")
        self.precision = precision

    @classmethod
    def for_thresholds(
        cls,
        thresholds: SeverityThresholds = DEFAULT_THRESHOLDS,
        precision: int = 6,
    ) -> "FeatureAttributor":
        return cls(bands=bands_for_thresholds(thresholds), precision=precision)

    def score(self, feature: Feature, value: float) -> float:
        """
        Normalized deviation of a single reading, rounded.

        Raises:
            InvariantViolationError: If the deviation is not a finite number
        """
        deviation = self.bands[feature].deviation(value)
        if not math.isfinite(deviation):
            raise InvariantViolationError(
                f"Contribution for {feature.value}={value!r} is not finite"
            )
        return round(deviation, self.precision)

    def attribute(self, metrics: Metrics) -> list[Contribution]:
        """
        Compute ranked contributions for every reading present.

        Args:
            metrics: Validated metrics record

        Returns:
            Contributions sorted by contribution descending, then priority
        """
        contributions = [
            Contribution(feature=feature, contribution=self.score(feature, value))
            for feature, value in metrics.present().items()
        ]
        contributions.sort(key=lambda c: (-c.contribution, c.feature.priority))

        logger.debug(
            "features_attributed",
            top_feature=contributions[0].feature,
            top_contribution=contributions[0].contribution,
            feature_count=len(contributions),
        )
        return contributions
