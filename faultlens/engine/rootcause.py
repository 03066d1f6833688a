"""
Root Cause Mapper — coarse causal label per event.

Combines the classifier and the attributor with a fixed causal table:

    normal severity      -> "nominal operation"
    otherwise, top feature of the attribution ranking:
        temp       -> "thermal overload"
        current    -> "electrical overcurrent"
        voltage    -> "power supply instability"
        vibration  -> "mechanical wear or imbalance"
        humidity   -> "environmental exposure"

The top feature always comes from the attributor, never from a separate
rule. When temp and current are both past their critical thresholds, the
cause is thermal overload only if temp's contribution is strictly larger
or the two tie (temp wins ties by priority); otherwise it is electrical
overcurrent. Cause and explanation therefore never disagree.

Version: rootcause_mapper_v1
"""

from typing import Optional

import structlog

from faultlens.engine.attribution import FeatureAttributor
from faultlens.engine.classifier import SeverityClassifier
from faultlens.models.enums import Feature, RootCauseCategory, SeverityLevel
from faultlens.models.results import Contribution, RootCause
from faultlens.models.sensors import SensorEvent

logger = structlog.get_logger()

CAUSAL_TABLE: dict[Feature, RootCauseCategory] = {
    Feature.TEMP: RootCauseCategory.THERMAL_OVERLOAD,
    Feature.CURRENT: RootCauseCategory.ELECTRICAL_OVERCURRENT,
    Feature.VOLTAGE: RootCauseCategory.POWER_SUPPLY_INSTABILITY,
    Feature.VIBRATION: RootCauseCategory.MECHANICAL_WEAR,
    Feature.HUMIDITY: RootCauseCategory.ENVIRONMENTAL_EXPOSURE,
}


class RootCauseMapper:
    """
    Infer a probable root cause for a sensor event.

    Attributes:
        classifier: Shared severity classifier
        attributor: Shared feature attributor
        causal_table: Top feature to causal label

    Example:
        >>> mapper = RootCauseMapper()
        >>> event = SensorEvent(id="E-1", metrics={"temp": 65, "current": 3.5, "voltage": 3.1})
        >>> mapper.map_cause(event).cause
        <RootCauseCategory.THERMAL_OVERLOAD: 'thermal overload'>
    """

    def __init__(
        self,
        classifier: Optional[SeverityClassifier] = None,
        attributor: Optional[FeatureAttributor] = None,
    ):
        self.classifier = classifier or SeverityClassifier()
        self.attributor = attributor or FeatureAttributor.for_thresholds(
            self.classifier.thresholds
        )
        self.causal_table = dict(CAUSAL_TABLE)

    def cause_for(
        self,
        severity: SeverityLevel,
        contributions: list[Contribution],
    ) -> tuple[RootCauseCategory, Optional[Feature]]:
        """
        Resolve the causal label from an already computed classification.

        Args:
            severity: Classified severity
            contributions: Ranked attribution for the same metrics

        Returns:
            (cause, top feature); the feature is None for nominal operation
        """
        if severity == SeverityLevel.NORMAL:
            return RootCauseCategory.NOMINAL_OPERATION, None

        top = contributions[0].feature
        return self.causal_table[top], top

    def map_cause(self, event: SensorEvent) -> RootCause:
        """
        Map one event to its root cause.

        Args:
            event: Validated sensor event

        Returns:
            RootCause keyed by the event id
        """
        severity = self.classifier.classify(event.metrics)
        contributions = (
            [] if severity == SeverityLevel.NORMAL
            else self.attributor.attribute(event.metrics)
        )
        cause, feature = self.cause_for(severity, contributions)

        logger.debug(
            "root_cause_mapped",
            event_id=event.id,
            severity=severity,
            cause=cause,
            feature=feature,
        )
        return RootCause(id=event.id, cause=cause, severity=severity, feature=feature)
