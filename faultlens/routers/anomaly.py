"""
Anomaly operations router.

Route paths match the remote function names the dashboard calls:

- POST /anomaly_explanation      {events} -> {explanations}
- POST /anomaly_realtime_stream  {batch}  -> {counts, batch_size, errors}
- POST /anomaly_rootcause        {events} -> {root_causes}
- POST /anomaly_kpis             {events, batch} -> KPI summary

Responses are returned bare (no success/data envelope) because the
dashboard reads ``explanations``, ``counts`` and ``root_causes`` at the
top level of the body.
"""

from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from faultlens.config import get_settings
from faultlens.models.results import (
    AggregateResponse,
    ExplanationResponse,
    KPISummary,
    RootCauseResponse,
)
from faultlens.services.anomaly_service import AnomalyService
from faultlens.utils.logging import get_logger

logger = get_logger(__name__)
router = APIRouter()


@lru_cache
def get_anomaly_service() -> AnomalyService:
    """Shared service instance; the engine holds no per-request state."""
    return AnomalyService.from_settings(get_settings())


class EventsRequest(BaseModel):
    """
    Events to explain or map to root causes.

    Items are left unvalidated here so that one bad event is reported in
    its own slot instead of rejecting the whole request.
    """

    events: list[Any] = Field(description="Sensor events: {id, metrics}")


class BatchRequest(BaseModel):
    """Metrics records making up one aggregate window."""

    batch: list[Any] = Field(description="Metrics records")


class KPIRequest(BaseModel):
    """Inputs behind the dashboard KPI strip."""

    events: list[Any] = Field(default_factory=list)
    batch: list[Any] = Field(default_factory=list)


@router.post("/anomaly_explanation", response_model=ExplanationResponse)
async def anomaly_explanation(
    request: EventsRequest,
    service: AnomalyService = Depends(get_anomaly_service),
):
    """Severity and ranked feature contributions per event."""
    logger.info("anomaly_explanation_requested", event_count=len(request.events))
    return service.explain(request.events)


@router.post("/anomaly_realtime_stream", response_model=AggregateResponse)
async def anomaly_realtime_stream(
    request: BatchRequest,
    service: AnomalyService = Depends(get_anomaly_service),
):
    """Severity counts over one batch snapshot."""
    logger.info("anomaly_realtime_stream_requested", batch_size=len(request.batch))
    return service.realtime_stream(request.batch)


@router.post("/anomaly_rootcause", response_model=RootCauseResponse)
async def anomaly_rootcause(
    request: EventsRequest,
    service: AnomalyService = Depends(get_anomaly_service),
):
    """Probable root cause per event."""
    logger.info("anomaly_rootcause_requested", event_count=len(request.events))
    return service.root_causes(request.events)


@router.post("/anomaly_kpis", response_model=KPISummary)
async def anomaly_kpis(
    request: KPIRequest,
    service: AnomalyService = Depends(get_anomaly_service),
):
    """Event count, batch size and critical event count."""
    return service.kpis(request.events, request.batch)
