"""
Tests for the cafe HTTP API.

Run with: python -m pytest tests/test_cafes_routes.py
"""

import pytest
from fastapi.testclient import TestClient

from cafe_map.main import app
from cafe_map.routes.cafes_route import get_cafe_service
from cafe_map.services.Cafe_service import CafeService


@pytest.fixture
def client(repo, overpass_ok):
    app.dependency_overrides[get_cafe_service] = lambda: CafeService(repo, transport=overpass_ok)
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def failing_client(repo, overpass_down):
    app.dependency_overrides[get_cafe_service] = lambda: CafeService(repo, transport=overpass_down)
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_root_lists_endpoints(client):
    response = client.get("/")
    assert response.status_code == 200
    assert "/cafes" in response.json()["endpoints"].values()


def test_list_cafes(client):
    response = client.get("/cafes")

    assert response.status_code == 200
    data = response.json()
    assert data["source"] == "api"
    assert data["counter"] == {"visited": 0, "total": 3}
    assert {c["id"] for c in data["cafes"]} == {"node/101", "node/102", "way/201"}
    assert all(c["status"] == "new" for c in data["cafes"])


def test_status_update_is_merged_on_next_load(client):
    response = client.put("/cafes/node/101/status", json={"status": "visited"})
    assert response.status_code == 200
    assert response.json() == {"cafe_id": "node/101", "status": "visited"}

    data = client.get("/cafes").json()
    statuses = {c["id"]: c["status"] for c in data["cafes"]}
    assert statuses["node/101"] == "visited"
    assert data["counter"]["visited"] == 1


def test_reset_status(client):
    client.put("/cafes/node/102/status", json={"status": "disliked"})
    client.put("/cafes/node/102/status", json={"status": "new"})

    assert client.get("/cafes/statuses").json() == {"node/102": "new"}


def test_invalid_status_rejected(client):
    response = client.put("/cafes/node/101/status", json={"status": "favourite"})
    assert response.status_code == 422


def test_overpass_failure_maps_to_502(failing_client):
    response = failing_client.get("/cafes")

    assert response.status_code == 502
    assert "Failed to load cafes" in response.json()["detail"]


def test_list_cafes_filtered_by_status(client):
    client.put("/cafes/way/201/status", json={"status": "visited"})

    data = client.get("/cafes", params={"status": "visited"}).json()
    assert [c["id"] for c in data["cafes"]] == ["way/201"]
    assert data["counter"] == {"visited": 1, "total": 3}

    assert client.get("/cafes", params={"status": "bogus"}).status_code == 422


def test_status_is_keyed_by_element_type(client):
    client.put("/cafes/way/101/status", json={"status": "disliked"})

    data = client.get("/cafes").json()
    statuses = {c["id"]: c["status"] for c in data["cafes"]}
    # node/101 is a different cafe from way/101
    assert statuses["node/101"] == "new"
    assert client.get("/cafes/statuses").json() == {"way/101": "disliked"}


def test_unknown_element_type_rejected(client):
    response = client.put("/cafes/area/101/status", json={"status": "visited"})
    assert response.status_code == 422


def test_statuses_endpoint_ignores_non_text_entries(client, repo):
    repo.status_file.write_text('{"node/101": 5, "node/102": "visited"}', encoding="utf-8")

    response = client.get("/cafes/statuses")

    assert response.status_code == 200
    assert response.json() == {"node/102": "visited"}
