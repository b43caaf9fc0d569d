"""
Tests for the HTTP surface: success and error envelopes, dependency wiring
and request ids.
"""
import pytest
from fastapi.testclient import TestClient

from petrosys.api.v1.dependencies.reasoning import get_reasoning_client
from petrosys.main import app

NARRATIVE = (
    "Source rock quality: 82%. Thermal maturity 0.9. Reservoir porosity 12%. "
    "Oil in place: low 25, best 45, high 70 MMBO, confidence 75%."
)


@pytest.fixture
def api(make_client):
    def build(replies=None, default=NARRATIVE):
        fake = make_client(replies=replies, default=default)
        app.dependency_overrides[get_reasoning_client] = lambda: fake
        return TestClient(app)
    yield build
    app.dependency_overrides.clear()


def test_health(api):
    client = api()
    assert client.get("/health").json() == {"status": "healthy"}
    assert client.get("/core/health").json() == {"status": "ok"}


def test_petroleum_system_success_envelope(api):
    response = api().post("/analysis/petroleum-system", json={"geochemical_data": {"toc": 3.2}})
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["data"]["source"]["quality"] == 82.0
    assert body["data"]["status"] == "partial"
    assert body["data"]["valid"] is True


def test_reasoning_failure_is_a_502_envelope(api):
    response = api(default=None).post("/analysis/petroleum-system", json={})
    assert response.status_code == 502
    body = response.json()
    assert body["status"] == "error"
    assert body["error"]["code"] == "analysis_failed"
    assert body["error"]["details"]["analyzer"] == "system_integration"


def test_request_body_is_validated(api):
    response = api().post("/analysis/recovery-factor", json={"recovery_method": "magic"})
    assert response.status_code == 422


def test_risk_reports_the_policy(api):
    response = api(default="Source risk 20%. Seal risk 30%.").post("/analysis/risk", json={})
    assert response.status_code == 200
    overall = response.json()["data"]["overall_chance"]
    assert overall["policy"] in ("weighted", "product")


def test_analogs_count(api):
    narrative = "The Gippsland Basin scores similarity 70%. The Sirte Basin scores similarity 55%."
    response = api(default=narrative).post(
        "/multiphysics/analogs", json={"target_basin": {"name": "Taranaki Basin"}}
    )
    assert response.status_code == 200
    assert response.json()["metadata"] == {"count": 2}


def test_unknown_surface_section_is_404(api):
    response = api().post("/multiphysics/surface-correlation/seismic", json={})
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"


def test_parse_stored_narrative(api):
    response = api().post(
        "/extraction/parse",
        json={"record_type": "reserve_estimation", "narrative": "Oil in place: low 70, best 45, high 25 MMBO."},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["valid"] is False
    assert data["oil_in_place"]["valid"] is False


def test_parse_unknown_record_type_is_404(api):
    response = api().post("/extraction/parse", json={"record_type": "seismic", "narrative": NARRATIVE})
    assert response.status_code == 404
    body = response.json()
    assert body["error"]["code"] == "not_found"
    assert "petroleum_system" in body["error"]["details"]["available"]


def test_record_types(api):
    assert "chance_factors" in api().get("/extraction/record-types").json()["data"]


def test_pipeline_run_and_stage_graph(api):
    client = api(default="")
    stages = client.get("/pipeline/stages").json()["data"]
    assert stages[0]["stage"] == "integration"

    response = client.post("/pipeline/run", json={"name": "Prospect A"})
    assert response.status_code == 200
    body = response.json()
    assert body["metadata"] == {"status": "blocked"}
    assert body["data"]["blocked_at"] == "integration"


def test_pipeline_batch_metadata(api):
    response = api(default="").post("/pipeline/batch", json={"runs": [{"name": "A"}, {"name": "B"}]})
    assert response.status_code == 200
    body = response.json()
    assert body["metadata"] == {"total": 2, "complete": 0, "blocked": 2}
    assert [r["name"] for r in body["data"]] == ["A", "B"]


def test_request_id_is_echoed(api):
    response = api().get("/core/health", headers={"X-Request-ID": "req-42"})
    assert response.headers["X-Request-ID"] == "req-42"
    assert "X-Process-Time" in response.headers


def test_unknown_route_uses_the_error_envelope(api):
    response = api().get("/no-such-route")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "http_404"
