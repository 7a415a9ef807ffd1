# tests/route_recommendation/api/test_routes.py

import pytest
from fastapi.testclient import TestClient

from conftest import offset
from route_recommendation.api.recommendation_api import app

OSLO = (59.9139, 10.7522)


@pytest.fixture
def client():
    return TestClient(app)


def _candidato(cid, north_km, east_km, **extra):
    lat, lng = offset(*OSLO, north_km, east_km)
    base = {
        "id": cid,
        "lat": lat,
        "lng": lng,
        "nextDueDate": "2026-01-25",
        "areaLabel": "Oslo",
        "categoryTags": ["El-Kontroll"],
    }
    base.update(extra)
    return base


def _grupo():
    desloc = [(0, 0), (0.2, 0.1), (-0.2, 0.3), (0.3, -0.2), (-0.1, -0.3)]
    return [_candidato(f"c{i}", n, e) for i, (n, e) in enumerate(desloc)]


def test_health(client):
    resp = client.get("/recommendations/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_root(client):
    assert client.get("/").status_code == 200


def test_run_returns_recommendations(client):
    resp = client.post(
        "/recommendations/run",
        json={"candidates": _grupo(), "currentDate": "2026-01-15"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["recommendations"]) == 1
    rec = body["recommendations"][0]
    assert rec["id"] == 0
    assert rec["customerCount"] == 5
    assert rec["primaryArea"] == "Oslo"
    assert rec["categories"] == ["El-Kontroll"]
    assert set(rec["centroid"]) == {"lat", "lng"}
    assert body["diagnostics"]["eligible"] == 5
    assert body["message"] is None


def test_run_empty_input_has_message(client):
    resp = client.post("/recommendations/run", json={"candidates": [], "currentDate": "2026-01-15"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["recommendations"] == []
    assert body["diagnostics"]["empty_reason"] == "no_candidates"
    assert body["message"] == "Nenhum cliente cadastrado."


def test_invalid_params_return_422(client):
    resp = client.post(
        "/recommendations/run",
        json={"candidates": _grupo(), "params": {"clusterRadiusKm": -1}, "currentDate": "2026-01-15"},
    )
    assert resp.status_code == 422
    assert "cluster_radius_km" in resp.json()["detail"]


def test_bad_date_and_missing_coordinates_are_counted(client):
    candidatos = _grupo() + [
        _candidato("sem-data", 0, 0, nextDueDate="não é data"),
        {"id": "sem-coord", "nextDueDate": "2026-01-20"},
    ]

    resp = client.post("/recommendations/run", json={"candidates": candidatos, "currentDate": "2026-01-15"})

    diag = resp.json()["diagnostics"]
    assert diag["total_candidates"] == 7
    assert diag["missing_due_date"] == 1
    assert diag["missing_coordinates"] == 1
    assert diag["eligible"] == 5


def test_due_date_derived_from_services(client):
    candidatos = [
        _candidato(f"s{i}", i * 0.1, 0, nextDueDate=None,
                   services=[{"lastDate": "2025-02-01", "intervalMonths": 12}])
        for i in range(4)
    ]

    resp = client.post("/recommendations/run", json={"candidates": candidatos, "currentDate": "2026-01-15"})

    body = resp.json()
    assert body["diagnostics"]["missing_due_date"] == 0
    assert body["diagnostics"]["eligible"] == 4
    assert body["recommendations"][0]["upcomingCount"] == 4


def test_custom_params_are_applied(client):
    candidatos = [_candidato(f"p{i}", i * 7, 0) for i in range(3)]

    resp = client.post(
        "/recommendations/run",
        json={"candidates": candidatos, "params": {"minClusterSize": 2}, "currentDate": "2026-01-15"},
    )

    body = resp.json()
    assert body["diagnostics"]["used_expanded_radius"] is True
    assert body["recommendations"][0]["customerCount"] == 3


def test_hull(client):
    pontos = [[0, 0], [0, 2], [2, 2], [2, 0], [1, 1]]

    resp = client.post("/recommendations/hull", json={"points": pontos})

    assert resp.status_code == 200
    body = resp.json()
    assert len(body["hull"]) == 4
    assert [1, 1] not in body["hull"]
    anel = body["geojson"]["geometry"]["coordinates"][0]
    assert anel[0] == anel[-1]
    assert len(anel) == 5


def test_bad_environment_setting_returns_422(client, monkeypatch):
    monkeypatch.setenv("ROUTE_DAYS_AHEAD", "sessenta")

    resp = client.post("/recommendations/run", json={"candidates": _grupo(), "currentDate": "2026-01-15"})

    assert resp.status_code == 422
