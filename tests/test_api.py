import inspect

import pytest
from fastapi.testclient import TestClient

from georisk.api.main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["districts"] == 8


def test_list_districts(client):
    data = client.get("/api/v1/districts").json()
    assert data["count"] == 8
    assert data["districts"][0]["name"] == "Vereda La Clarita"


def test_get_district(client):
    response = client.get("/api/v1/districts/Vereda La Cuchilla")
    assert response.status_code == 200
    assert response.json()["soil_type"] == "Entisol"


def test_get_unknown_district(client):
    assert client.get("/api/v1/districts/Vereda Fantasma").status_code == 404


def test_analyze_district(client):
    response = client.post("/api/v1/analyze", json={"district": "Vereda La Cuchilla"})
    assert response.status_code == 200
    data = response.json()
    assert data["district"] == "Vereda La Cuchilla"
    assert 0 <= data["composite"]["overall_risk"] <= 100
    assert "Vereda La Cuchilla" in data["formatted_output"]


def test_analyze_coordinates_get(client):
    response = client.get("/api/v1/analyze", params={"lat": "6.4167", "lng": "-75.55"})
    assert response.status_code == 200
    assert response.json()["district"] == "Centro Urbano"


@pytest.mark.parametrize("payload", [
    {},
    {"lat": "abc", "lng": "-75.5"},
    {"lat": 120, "lng": -75.5},
])
def test_analyze_rejects_bad_input(client, payload):
    assert client.post("/api/v1/analyze", json=payload).status_code == 422


def test_analyze_unknown_district(client):
    assert client.post("/api/v1/analyze", json={"district": "Vereda Fantasma"}).status_code == 404


def test_simulate_snapshot(client):
    payload = {
        "snapshot": {
            "elevation": 2400,
            "slope": 30,
            "precipitation": 2200,
            "soil_type": "Entisol",
            "geological_formation": "Batolito Antioqueño",
        },
        "season": "Enero",
    }
    data = client.post("/api/v1/simulate", json=payload).json()
    assert data["original_score"] == 68
    assert data["simulated_score"] == 55.2
    assert len(data["seasonal_profile"]) == 12


def test_simulate_district_with_scenario(client):
    response = client.post("/api/v1/simulate", json={"district": "Vereda El Carmelo", "scenario": "lluvias"})
    assert response.status_code == 200
    data = response.json()
    assert data["scenario"] == "lluvias"
    assert data["state"]["soil_saturation"] == 90


def test_simulate_errors(client):
    assert client.post("/api/v1/simulate", json={}).status_code == 422
    assert client.post(
        "/api/v1/simulate", json={"district": "Centro Urbano", "scenario": "meteorito"}
    ).status_code == 404
    assert client.post(
        "/api/v1/simulate", json={"district": "Centro Urbano", "overrides": {"moon_phase": 1}}
    ).status_code == 422


def test_report_download(client):
    response = client.post("/api/v1/report", params={"fmt": "txt"}, json={"district": "Vereda Pantanillo"})
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "Reporte_Riesgo_Vereda_Pantanillo_" in response.headers["content-disposition"]
    assert "Vereda Pantanillo" in response.content.decode("utf-8")


def test_report_bad_format(client):
    assert client.post("/api/v1/report", params={"fmt": "docx"}, json={"district": "Centro Urbano"}).status_code == 422


def test_seasons_and_scenarios(client):
    assert len(client.get("/api/v1/seasons").json()["seasons"]) == 12
    assert set(client.get("/api/v1/scenarios").json()["scenarios"]) == {
        "sequia", "lluvias", "deforestacion", "urbanizacion", "mejoras",
    }


@pytest.mark.parametrize("overrides", [
    {"precipitation": "inf"},
    {"slope": "nan"},
    {"soil_saturation": True},
    {"soil_type": {"name": "Entisol"}},
    {"geological_formation": ["Batolito Antioqueño"]},
])
def test_simulate_rejects_bad_override_values(client, overrides):
    payload = {"district": "Vereda La Cuchilla", "overrides": overrides}
    assert client.post("/api/v1/simulate", json=payload).status_code == 422


def test_simulate_rejects_non_finite_snapshot(client):
    payload = {
        "snapshot": {
            "elevation": 2400,
            "slope": "Infinity",
            "precipitation": 2200,
            "soil_type": "Entisol",
            "geological_formation": "Batolito Antioqueño",
        },
    }
    assert client.post("/api/v1/simulate", json=payload).status_code == 422


def test_blocking_endpoints_run_in_threadpool():
    from georisk.api import main

    for endpoint in (main.run_analysis, main.quick_analysis, main.simulate, main.download_report):
        assert not inspect.iscoroutinefunction(endpoint)
