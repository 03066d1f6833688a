"""
Anomaly request service.

Exposes the three dashboard operations as plain request handlers:

- explain:          anomaly_explanation      events -> explanations
- realtime_stream:  anomaly_realtime_stream  batch  -> counts
- root_causes:      anomaly_rootcause        events -> root_causes

plus the KPI summary behind the dashboard header. Items are validated one
by one. An invalid item becomes an ItemError in its own slot and the rest
of the request is still processed; only a request that is not a list at
all, or is over the size limit, fails as a whole.
"""

from collections.abc import Sequence
from typing import Any, Optional, Union

import structlog
from pydantic import BaseModel, ValidationError

from faultlens.engine.aggregator import WindowAggregator, verify_conservation
from faultlens.engine.attribution import FeatureAttributor
from faultlens.engine.classifier import SeverityClassifier, SeverityThresholds
from faultlens.engine.exceptions import MalformedRequestError
from faultlens.engine.rootcause import RootCauseMapper
from faultlens.models.enums import SeverityLevel
from faultlens.models.results import (
    AggregateResponse,
    Explanation,
    ExplanationResponse,
    ItemError,
    KPISummary,
    RootCauseResponse,
)
from faultlens.models.sensors import Metrics, SensorEvent
from faultlens.utils.logging import log_event

logger = structlog.get_logger()


def item_error_from_validation(index: int, raw: Any, exc: ValidationError) -> ItemError:
    """
    Convert a pydantic ValidationError into a per-item error slot.

    Args:
        index: Position of the item in the request
        raw: The item as received
        exc: Validation failure raised for it

    Returns:
        ItemError carrying the event id when one could be read
    """
    fields = []
    messages = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        if loc:
            fields.append(loc)
            messages.append(f"{loc}: {err.get('msg')}")
        else:
            messages.append(str(err.get("msg")))

    event_id = None
    if isinstance(raw, dict) and isinstance(raw.get("id"), str) and raw["id"].strip():
        event_id = raw["id"]

    return ItemError(index=index, id=event_id, message="; ".join(messages), fields=fields)


class AnomalyService:
    """
    Stateless request handlers over the shared decision engine.

    One classifier instance backs aggregation, attribution and root-cause
    mapping so the three operations never disagree on thresholds.

    Attributes:
        classifier: Shared severity classifier
        attributor: Feature attributor anchored on the classifier thresholds
        aggregator: Window aggregator using the shared classifier
        mapper: Root-cause mapper using the shared classifier and attributor
        max_batch_size: Largest accepted events/batch list
    """

    def __init__(
        self,
        classifier: Optional[SeverityClassifier] = None,
        attributor: Optional[FeatureAttributor] = None,
        max_batch_size: int = 10000,
    ):
        self.classifier = classifier or SeverityClassifier()
        self.attributor = attributor or FeatureAttributor.for_thresholds(
            self.classifier.thresholds
        )
        self.aggregator = WindowAggregator(self.classifier)
        self.mapper = RootCauseMapper(self.classifier, self.attributor)
        self.max_batch_size = max_batch_size

    @classmethod
    def from_settings(cls, settings) -> "AnomalyService":
        """Build a service from application settings."""
        classifier = SeverityClassifier(SeverityThresholds.from_settings(settings))
        attributor = FeatureAttributor.for_thresholds(
            classifier.thresholds, precision=settings.contribution_precision
        )
        return cls(
            classifier=classifier,
            attributor=attributor,
            max_batch_size=settings.max_batch_size,
        )

    # ------------------------------------------------------------------
    # Validation helpers
    # ------------------------------------------------------------------

    def _ensure_sequence(self, items: Any, name: str) -> Sequence:
        if isinstance(items, (str, bytes)) or not isinstance(items, Sequence):
            raise MalformedRequestError(
                f"'{name}' must be a list, got {type(items).__name__}"
            )
        if len(items) > self.max_batch_size:
            raise MalformedRequestError(
                f"'{name}' has {len(items)} items, limit is {self.max_batch_size}"
            )
        return items

    def _parse(
        self, model: type[BaseModel], index: int, raw: Any
    ) -> Union[BaseModel, ItemError]:
        try:
            return model.model_validate(raw)
        except ValidationError as e:
            error = item_error_from_validation(index, raw, e)
            log_event(
                logger,
                "warning",
                "item_validation_failed",
                index=index,
                event_id=error.id,
                fields=error.fields,
            )
            return error

    def _parse_all(
        self, model: type[BaseModel], items: Any, name: str
    ) -> list[Union[BaseModel, ItemError]]:
        items = self._ensure_sequence(items, name)
        return [self._parse(model, i, raw) for i, raw in enumerate(items)]

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def explain(self, events: Any) -> ExplanationResponse:
        """
        Classify each event and rank the features behind its severity.

        Args:
            events: List of raw or validated sensor events

        Returns:
            ExplanationResponse with one slot per input event, in input order

        Raises:
            MalformedRequestError: If events is not a list or is too large
        """
        slots = []
        for item in self._parse_all(SensorEvent, events, "events"):
            if isinstance(item, ItemError):
                slots.append(item)
                continue

            contributions = self.attributor.attribute(item.metrics)
            slots.append(
                Explanation(
                    id=item.id,
                    severity=self.classifier.classify(item.metrics),
                    shap_like_contributions=contributions,
                    top_feature=contributions[0].feature,
                )
            )

        logger.info(
            "explanations_computed",
            event_count=len(slots),
            invalid_count=sum(isinstance(s, ItemError) for s in slots),
        )
        return ExplanationResponse(explanations=slots)

    def realtime_stream(self, batch: Any) -> AggregateResponse:
        """
        Count the records of one batch snapshot per severity level.

        Invalid records are listed under ``errors`` and left out of the
        counts, so the counts sum to batch_size minus the error count.

        Args:
            batch: List of raw or validated metrics records

        Returns:
            AggregateResponse with every severity level present

        Raises:
            MalformedRequestError: If batch is not a list or is too large
            InvariantViolationError: If the counts do not account for the records
        """
        parsed = self._parse_all(Metrics, batch, "batch")
        errors = [item for item in parsed if isinstance(item, ItemError)]
        records = [item for item in parsed if not isinstance(item, ItemError)]

        window = self.aggregator.aggregate(records)
        verify_conservation(window, len(parsed) - len(errors))

        logger.info(
            "realtime_window_computed",
            batch_size=len(parsed),
            invalid_count=len(errors),
        )
        return AggregateResponse(counts=window.counts, batch_size=len(parsed), errors=errors)

    def root_causes(self, events: Any) -> RootCauseResponse:
        """
        Map each event to a probable root cause.

        Args:
            events: List of raw or validated sensor events

        Returns:
            RootCauseResponse with one slot per input event, in input order

        Raises:
            MalformedRequestError: If events is not a list or is too large
        """
        slots = [
            item if isinstance(item, ItemError) else self.mapper.map_cause(item)
            for item in self._parse_all(SensorEvent, events, "events")
        ]

        logger.info(
            "root_causes_computed",
            event_count=len(slots),
            invalid_count=sum(isinstance(s, ItemError) for s in slots),
        )
        return RootCauseResponse(root_causes=slots)

    def kpis(self, events: Any, batch: Any) -> KPISummary:
        """
        Headline numbers for the dashboard: sizes and critical event count.

        Args:
            events: List of raw or validated sensor events
            batch: List of raw metrics records (only its length is used)

        Returns:
            KPISummary
        """
        parsed = self._parse_all(SensorEvent, events, "events")
        batch = self._ensure_sequence(batch, "batch")

        valid = [item for item in parsed if not isinstance(item, ItemError)]
        critical = sum(
            1 for event in valid
            if self.classifier.classify(event.metrics) == SeverityLevel.CRITICAL
        )
        return KPISummary(
            event_count=len(parsed),
            batch_size=len(batch),
            critical_events=critical,
            invalid_events=len(parsed) - len(valid),
        )
