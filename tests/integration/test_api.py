"""
Integration tests for the FaultLens HTTP API.

Request building, response contract validation, per-item error slots,
and whole-request failures.

All endpoints tested:
- System: /health, /api/v1/system/health, /api/v1/system/config
- Anomaly: anomaly_explanation, anomaly_realtime_stream, anomaly_rootcause, anomaly_kpis
"""

import pytest
from fastapi.testclient import TestClient

from faultlens.engine.aggregator import WindowAggregator
from faultlens.engine.sample_data import demo_events, synthetic_batch
from faultlens.main import app
from faultlens.models.enums import SeverityLevel
from faultlens.models.results import AggregateWindow
from faultlens.routers.anomaly import get_anomaly_service
from faultlens.services.anomaly_service import AnomalyService
from tests.conftest import make_event_dict, make_metrics_dict


class LeakyAggregator(WindowAggregator):
    """Aggregator whose reduce step miscounts, to exercise invariant handling."""

    def tally(self, levels):
        window = super().tally(levels)
        counts = dict(window.counts)
        counts[SeverityLevel.NORMAL] += 1
        return AggregateWindow(counts=counts)


@pytest.fixture
def override_service():
    """Swap the shared service for the duration of one test."""

    def _override(service: AnomalyService):
        app.dependency_overrides[get_anomaly_service] = lambda: service

    yield _override
    app.dependency_overrides.pop(get_anomaly_service, None)


# ============================================================================
# System Endpoints
# ============================================================================


def test_root_health(client: TestClient):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_system_health_envelope(client: TestClient):
    response = client.get("/api/v1/system/health")

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["status"] == "healthy"
    assert data["data"]["environment"] == "testing"
    assert "uptime_seconds" in data["data"]


def test_system_config_reports_constants(client: TestClient):
    response = client.get("/api/v1/system/config")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["thresholds"]["critical_temp"] == 60.0
    assert data["thresholds"]["warning_current"] == 2.0
    assert data["feature_bands"]["temp"] == {"center": 45.0, "scale": 15.0}
    assert data["causal_table"]["vibration"] == "mechanical wear or imbalance"
    assert data["feature_priority"] == ["temp", "current", "voltage", "vibration", "humidity"]


def test_request_id_echoed(client: TestClient):
    response = client.get("/health", headers={"X-Request-ID": "req-123"})
    assert response.headers["X-Request-ID"] == "req-123"


# ============================================================================
# anomaly_explanation
# ============================================================================


def test_explanation_demo_events(client: TestClient):
    response = client.post("/api/v1/anomaly_explanation", json={"events": demo_events()})

    assert response.status_code == 200
    explanations = response.json()["explanations"]
    assert [x["id"] for x in explanations] == ["E-101", "E-102"]
    assert explanations[0]["severity"] == "warning"
    assert explanations[0]["shap_like_contributions"][0]["feature"] == "temp"
    assert explanations[0]["top_feature"] == "temp"
    assert explanations[1]["severity"] == "normal"
    assert len(explanations[1]["shap_like_contributions"]) == 5


def test_explanation_invalid_event_reported_in_slot(client: TestClient):
    events = [
        make_event_dict("E-1", temp=65, current=3.5),
        {"id": "E-2", "metrics": {"temp": 50}},
        make_event_dict("E-3"),
    ]
    response = client.post("/api/v1/anomaly_explanation", json={"events": events})

    assert response.status_code == 200
    explanations = response.json()["explanations"]
    assert len(explanations) == 3
    assert explanations[0]["severity"] == "critical"
    assert explanations[1]["error"] == "validation_error"
    assert explanations[1]["id"] == "E-2"
    assert explanations[1]["index"] == 1
    assert explanations[1]["fields"] == ["metrics.current"]
    assert explanations[2]["severity"] == "normal"


def test_explanation_non_finite_string_rejected_per_item(client: TestClient):
    events = [{"id": "E-inf", "metrics": {"temp": "inf", "current": 1.0}}]
    response = client.post("/api/v1/anomaly_explanation", json={"events": events})

    assert response.status_code == 200
    slot = response.json()["explanations"][0]
    assert slot["error"] == "validation_error"
    assert slot["fields"] == ["metrics.temp"]


def test_explanation_oversized_reading_rejected_per_item(client: TestClient):
    events = [
        {"id": "E-big", "metrics": {"temp": 61, "current": 1.0, "vibration": 1e308}},
        make_event_dict("E-ok", temp=61, current=1.0),
    ]
    response = client.post("/api/v1/anomaly_explanation", json={"events": events})

    assert response.status_code == 200
    big, ok = response.json()["explanations"]
    assert big["error"] == "validation_error"
    assert big["fields"] == ["metrics.vibration"]
    assert ok["severity"] == "critical"
    assert all(c["contribution"] is not None for c in ok["shap_like_contributions"])


def test_explanation_empty_events(client: TestClient):
    response = client.post("/api/v1/anomaly_explanation", json={"events": []})
    assert response.status_code == 200
    assert response.json() == {"explanations": []}


def test_explanation_events_not_a_list(client: TestClient):
    response = client.post("/api/v1/anomaly_explanation", json={"events": {"id": "E-1"}})
    assert response.status_code == 422


def test_explanation_missing_body_field(client: TestClient):
    response = client.post("/api/v1/anomaly_explanation", json={"batch": []})
    assert response.status_code == 422


# ============================================================================
# anomaly_realtime_stream
# ============================================================================


def test_realtime_stream_synthetic_batch(client: TestClient):
    batch = synthetic_batch(60, seed=42)
    batch[0] = {"temp": 61, "voltage": 3.5, "current": 3.1, "vibration": 0.4}
    response = client.post("/api/v1/anomaly_realtime_stream", json={"batch": batch})

    assert response.status_code == 200
    data = response.json()
    assert set(data["counts"]) == {"normal", "warning", "critical"}
    assert sum(data["counts"].values()) == 60
    assert data["counts"]["critical"] >= 1
    assert data["batch_size"] == 60
    assert data["errors"] == []


def test_realtime_stream_empty_batch(client: TestClient):
    response = client.post("/api/v1/anomaly_realtime_stream", json={"batch": []})

    assert response.status_code == 200
    assert response.json()["counts"] == {"normal": 0, "warning": 0, "critical": 0}


def test_realtime_stream_invalid_record_excluded(client: TestClient):
    batch = [make_metrics_dict(), {"temp": 70}, make_metrics_dict(temp=61)]
    response = client.post("/api/v1/anomaly_realtime_stream", json={"batch": batch})

    assert response.status_code == 200
    data = response.json()
    assert data["counts"] == {"normal": 1, "warning": 0, "critical": 1}
    assert data["batch_size"] == 3
    assert [e["index"] for e in data["errors"]] == [1]


def test_realtime_stream_oversize_batch(client: TestClient, override_service):
    override_service(AnomalyService(max_batch_size=2))
    batch = [make_metrics_dict() for _ in range(3)]
    response = client.post("/api/v1/anomaly_realtime_stream", json={"batch": batch})

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert "limit is 2" in response.json()["error"]


def test_realtime_stream_invariant_violation_is_fatal(client: TestClient, override_service):
    service = AnomalyService()
    service.aggregator = LeakyAggregator(service.classifier)
    override_service(service)
    response = client.post(
        "/api/v1/anomaly_realtime_stream", json={"batch": [make_metrics_dict()]}
    )

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert "invariant" in response.json()["error"].lower()


# ============================================================================
# anomaly_rootcause
# ============================================================================


def test_rootcause_demo_events(client: TestClient):
    response = client.post("/api/v1/anomaly_rootcause", json={"events": demo_events()})

    assert response.status_code == 200
    causes = {r["id"]: r["cause"] for r in response.json()["root_causes"]}
    assert causes == {"E-101": "thermal overload", "E-102": "nominal operation"}


def test_rootcause_matches_explanation_top_feature(client: TestClient):
    events = [
        make_event_dict("A", temp=65, current=3.5, voltage=3.1),
        make_event_dict("B", temp=61, current=3.5),
        make_event_dict("C", temp=52, current=1.0, vibration=1.2),
    ]
    explanations = client.post("/api/v1/anomaly_explanation", json={"events": events}).json()
    causes = client.post("/api/v1/anomaly_rootcause", json={"events": events}).json()

    for x, r in zip(explanations["explanations"], causes["root_causes"]):
        assert x["id"] == r["id"]
        assert x["shap_like_contributions"][0]["feature"] == r["feature"]


def test_rootcause_missing_id_reported(client: TestClient):
    events = [{"metrics": make_metrics_dict()}, make_event_dict("E-2")]
    response = client.post("/api/v1/anomaly_rootcause", json={"events": events})

    assert response.status_code == 200
    root_causes = response.json()["root_causes"]
    assert root_causes[0]["error"] == "validation_error"
    assert root_causes[0]["id"] is None
    assert "id" in root_causes[0]["fields"]
    assert root_causes[1]["cause"] == "nominal operation"


# ============================================================================
# anomaly_kpis
# ============================================================================


def test_kpis_uses_shared_classifier(client: TestClient):
    events = demo_events() + [make_event_dict("E-3", temp=62, current=1.0), {"id": ""}]
    response = client.post(
        "/api/v1/anomaly_kpis", json={"events": events, "batch": synthetic_batch(60, seed=1)}
    )

    assert response.status_code == 200
    assert response.json() == {
        "event_count": 4,
        "batch_size": 60,
        "critical_events": 1,
        "invalid_events": 1,
    }
