"""
Pytest configuration and shared fixtures for the FaultLens test suite.

Factories build plain request dicts (what the dashboard sends) and
validated models (what the engine consumes); fixtures provide a fresh
service and an HTTP test client.
"""

import os
from typing import Optional

import pytest
from fastapi.testclient import TestClient

# Set testing environment BEFORE importing app
os.environ["TESTING"] = "true"
os.environ["LOG_LEVEL"] = "warning"

from faultlens.models.sensors import Metrics, SensorEvent
from faultlens.services.anomaly_service import AnomalyService


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def make_metrics_dict(
    temp: float = 42.0,
    voltage: Optional[float] = 3.55,
    current: float = 1.0,
    vibration: Optional[float] = 0.3,
    humidity: Optional[float] = 40.0,
    **overrides,
) -> dict:
    """Raw metrics record as posted by the dashboard. Defaults are a normal reading."""
    values = dict(
        temp=temp,
        voltage=voltage,
        current=current,
        vibration=vibration,
        humidity=humidity,
    )
    values.update(overrides)
    return {k: v for k, v in values.items() if v is not None}


def make_metrics(**kwargs) -> Metrics:
    """Validated Metrics built from make_metrics_dict."""
    return Metrics(**make_metrics_dict(**kwargs))


def make_event_dict(event_id: str = "E-1", **metric_kwargs) -> dict:
    """Raw sensor event as posted by the dashboard."""
    return {"id": event_id, "metrics": make_metrics_dict(**metric_kwargs)}


def make_event(event_id: str = "E-1", **metric_kwargs) -> SensorEvent:
    """Validated SensorEvent built from make_event_dict."""
    return SensorEvent.model_validate(make_event_dict(event_id, **metric_kwargs))


# ---------------------------------------------------------------------------
# Pytest fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def service():
    """Service with default thresholds."""
    return AnomalyService()


@pytest.fixture
def warning_metrics():
    """The dashboard's first seed event: warning, temp/current tie."""
    return make_metrics(temp=58, voltage=3.2, current=2.8, vibration=0.5, humidity=65)


@pytest.fixture
def normal_metrics():
    """The dashboard's second seed event: normal."""
    return make_metrics(temp=42, voltage=3.55, current=1.0, vibration=0.3, humidity=40)


@pytest.fixture
def client():
    """FastAPI test client for integration tests."""
    from faultlens.main import app

    with TestClient(app) as c:
        yield c
