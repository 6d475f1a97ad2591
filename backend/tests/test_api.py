import pytest
from fastapi.testclient import TestClient

from api.dependencies import get_prediction_orchestrator
from main import app
from services.prediction.registry import build_orchestrator

client = TestClient(app)


@pytest.fixture(autouse=True)
def orchestrator(test_settings):
    """Engine with no external collaborators; every dimension is heuristic-served."""
    engine = build_orchestrator(settings=test_settings)
    app.dependency_overrides[get_prediction_orchestrator] = lambda: engine
    yield engine
    app.dependency_overrides.clear()


def test_health():
    response = client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["cache"] == {"predictions": 0, "features": 0}


def test_predict(request_payload):
    response = client.post("/predict", json=request_payload)
    assert response.status_code == 200
    data = response.json()
    assert len(data["fingerprint"]) == 64
    assert 0 <= data["interview_probability"] <= 1
    assert 0 <= data["offer_probability"] <= 1
    assert data["salary"]["low"] <= data["salary"]["median"] <= data["salary"]["high"]
    assert data["time_to_hire_days"] >= 1
    assert sum(data["time_to_hire_stages"].values()) == data["time_to_hire_days"]
    assert data["hire_probability"] <= data["offer_probability"]
    assert 0 <= data["competitiveness_score"] <= 100
    assert data["degradation"] == "partial"
    assert set(data["tiers"]) == {
        "interview_probability", "offer_probability", "salary", "time_to_hire", "competitiveness",
    }
    assert all(tier == "heuristic" for tier in data["tiers"].values())
    assert isinstance(data["recommendations"], list)


def test_predict_repeat_is_cached(request_payload):
    first = client.post("/predict", json=request_payload).json()
    second = client.post("/predict", json=request_payload).json()
    assert second["created_at"] == first["created_at"]
    assert second["recommendations"] == first["recommendations"]


def test_predict_rejects_empty_cv(request_payload):
    request_payload["cv"] = {}
    response = client.post("/predict", json=request_payload)
    assert response.status_code == 422


def test_predict_rejects_missing_job(request_payload):
    del request_payload["job"]
    response = client.post("/predict", json=request_payload)
    assert response.status_code == 422


def test_outcome_flow(request_payload):
    fp = client.post("/predict", json=request_payload).json()["fingerprint"]

    response = client.post(f"/outcomes/{fp}", json={"interview_obtained": True})
    assert response.status_code == 202
    assert response.json() == {"recorded": 1}

    repeat = client.post(f"/outcomes/{fp}", json={"interview_obtained": False})
    assert repeat.json() == {"recorded": 0}

    stats = client.get("/calibration/interview_probability").json()
    assert stats["count"] == 1
    assert stats["paired_count"] == 1
    assert stats["brier_score"] is not None


def test_invalidate(request_payload, orchestrator):
    fp = client.post("/predict", json=request_payload).json()["fingerprint"]
    response = client.delete(f"/predictions/{fp}")
    assert response.status_code == 200
    assert response.json() == {"invalidated": 2}
    assert orchestrator.cache_stats() == {"predictions": 0, "features": 0}


def test_calibration_unknown_dimension():
    response = client.get("/calibration/happiness")
    assert response.status_code == 422


def test_calibration_rejects_inverted_window():
    response = client.get(
        "/calibration/salary",
        params={"start": "2024-06-02T00:00:00Z", "end": "2024-06-01T00:00:00Z"},
    )
    assert response.status_code == 400
