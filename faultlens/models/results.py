"""
Result and response models for the anomaly decision engine.

Field names here are a wire contract with the dashboard: it reads
``explanations[i].shap_like_contributions[0].feature``, ``counts`` keyed
by severity name, and ``root_causes[i].cause``.
"""

from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from .enums import Feature, RootCauseCategory, SeverityLevel


class Contribution(BaseModel):
    """
    A feature's normalized deviation from its expected operating band.

    Attributes:
        feature: Which reading this score belongs to
        contribution: Non-negative deviation magnitude, in band scales
    """

    feature: Feature = Field(description="Reading this score belongs to")
    contribution: float = Field(
        description="Normalized deviation magnitude", ge=0.0, allow_inf_nan=False
    )


class Explanation(BaseModel):
    """
    Severity of one event plus the ranked reasons behind it.

    ``shap_like_contributions`` is sorted by contribution descending with
    ties broken by feature priority, so its first entry is always the top
    feature. The name is kept for dashboard compatibility; the scores come
    from a deterministic heuristic, not a trained explainer.
    """

    id: str = Field(description="Originating event id")
    severity: SeverityLevel = Field(description="Classified severity")
    shap_like_contributions: list[Contribution] = Field(
        description="Per-feature contributions, highest first"
    )
    top_feature: Optional[Feature] = Field(
        default=None, description="Feature of the first contribution"
    )

    @property
    def contributions(self) -> list[Contribution]:
        return self.shap_like_contributions


class AggregateWindow(BaseModel):
    """
    Severity tallies over one batch snapshot.

    Every level is always present, zero or not.
    """

    counts: dict[SeverityLevel, int] = Field(description="Records per severity level")

    @field_validator("counts")
    @classmethod
    def validate_complete(cls, v: dict[SeverityLevel, int]) -> dict[SeverityLevel, int]:
        """Ensure all levels are present with non-negative counts."""
        missing = [level.value for level in SeverityLevel.ordered() if level not in v]
        if missing:
            raise ValueError(f"Counts missing severity levels: {missing}")
        if any(count < 0 for count in v.values()):
            raise ValueError("Counts must be non-negative")
        return {level: v[level] for level in SeverityLevel.ordered()}

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class RootCause(BaseModel):
    """
    Probable cause of one event, drawn from the fixed causal vocabulary.

    Attributes:
        id: Originating event id
        cause: Causal label
        severity: Severity the cause was derived from
        feature: Top contributing feature, None for nominal operation
    """

    id: str = Field(description="Originating event id")
    cause: RootCauseCategory = Field(description="Causal label")
    severity: SeverityLevel = Field(description="Classified severity")
    feature: Optional[Feature] = Field(
        default=None, description="Top contributing feature, if anomalous"
    )


class ItemError(BaseModel):
    """
    Validation failure for a single input item.

    Occupies the failing item's slot in a response so the rest of the
    batch is still processed and nothing is silently dropped.
    """

    index: int = Field(description="Position of the item in the request", ge=0)
    id: Optional[str] = Field(default=None, description="Event id, when one could be read")
    error: str = Field(default="validation_error", description="Error type")
    message: str = Field(description="Human-readable summary")
    fields: list[str] = Field(default_factory=list, description="Offending field paths")


class ExplanationResponse(BaseModel):
    """Response of anomaly_explanation."""

    explanations: list[Union[Explanation, ItemError]] = Field(default_factory=list)


class AggregateResponse(BaseModel):
    """Response of anomaly_realtime_stream."""

    counts: dict[SeverityLevel, int] = Field(description="Records per severity level")
    batch_size: int = Field(description="Number of records received", ge=0)
    errors: list[ItemError] = Field(default_factory=list)


class RootCauseResponse(BaseModel):
    """Response of anomaly_rootcause."""

    root_causes: list[Union[RootCause, ItemError]] = Field(default_factory=list)


class KPISummary(BaseModel):
    """
    Headline numbers for the dashboard's KPI strip.

    ``critical_events`` uses the shared classifier, so it always agrees
    with the severities reported by anomaly_explanation.
    """

    event_count: int = Field(ge=0)
    batch_size: int = Field(ge=0)
    critical_events: int = Field(ge=0)
    invalid_events: int = Field(ge=0)
