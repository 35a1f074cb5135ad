import pytest
from fastapi.testclient import TestClient

from btc_dynamics.app.api import dynamics as dynamics_module
from btc_dynamics.app.main import app
from btc_dynamics.core.dynamics.service import DynamicsService
from btc_dynamics.core.errors import UpstreamFetchError
from btc_dynamics.core.sources import brk_client as keys


class FakeSource:
    def __init__(self, failing: tuple[str, ...] = ()) -> None:
        self.failing = failing

    def fetch_series(self, key: str, days: int) -> list[float]:
        if key in self.failing:
            raise UpstreamFetchError(f"{key} unavailable")
        if key == keys.CLOSE:
            return [100.0] * (days - 1) + [10000.0]
        return [1.0] * days


def override_service(monkeypatch: pytest.MonkeyPatch, failing: tuple[str, ...] = ()) -> None:
    monkeypatch.setattr(dynamics_module, "_service", DynamicsService(source=FakeSource(failing)))


def _price_payload() -> dict:
    values = [100.0] * 1499 + [10000.0]
    return {
        "metrics": [
            {"name": "Bitcoin Price", "unit": "currency", "values": values, "baseline_values": values},
            {"name": "Realized Price", "unit": "currency", "values": [50.0] * 1500, "baseline_values": [50.0] * 1500},
        ]
    }


def test_health_endpoint() -> None:
    client = TestClient(app)
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_analyze_endpoint_returns_ranked_report() -> None:
    client = TestClient(app)
    response = client.post("/api/dynamics/analyze", json=_price_payload())
    assert response.status_code == 200
    data = response.json()
    assert data["analyzed_count"] == 2
    assert len(data["anomalies"]) == 1
    anomaly = data["anomalies"][0]
    assert anomaly["name"] == "Bitcoin Price"
    assert anomaly["max_severity"] == "extreme"
    assert anomaly["is_anomaly_in_all_windows"] is True
    assert anomaly["time_series"] == {}
    assert data["window_summary"]["four_year"]["extreme"] == 1


def test_analyze_endpoint_with_filter_and_series() -> None:
    client = TestClient(app)
    payload = _price_payload() | {"filter_mode": "all_windows", "include_time_series": True}
    response = client.post("/api/dynamics/analyze", json=payload)
    assert response.status_code == 200
    anomaly = response.json()["anomalies"][0]
    assert len(anomaly["time_series"]["four_year"]["z_scores"]) == 41


def test_live_endpoint_uses_configured_source(monkeypatch: pytest.MonkeyPatch) -> None:
    override_service(monkeypatch, failing=(keys.STH_SUPPLY,))
    client = TestClient(app)
    response = client.get("/api/dynamics", params={"days": 1500})
    assert response.status_code == 200
    data = response.json()
    assert [a["name"] for a in data["anomalies"]] == ["Bitcoin Price"]
    assert data["failures"][0]["series_key"] == keys.STH_SUPPLY
    assert response.headers.get("X-Request-ID")


def test_live_endpoint_rejects_unknown_filter(monkeypatch: pytest.MonkeyPatch) -> None:
    override_service(monkeypatch)
    client = TestClient(app)
    response = client.get("/api/dynamics", params={"filter_mode": "sideways"})
    assert response.status_code == 422


def test_upstream_failure_returns_502_envelope(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing_run(*args, **kwargs):
        raise UpstreamFetchError("brk unreachable")

    override_service(monkeypatch)
    monkeypatch.setattr(dynamics_module._service, "run", failing_run)
    client = TestClient(app)

    response = client.get("/api/dynamics")

    assert response.status_code == 502
    data = response.json()
    assert data["error_code"] == "upstream_error"
    assert data["detail"] == "brk unreachable"
    assert response.headers["X-Request-ID"] == data["request_id"]
