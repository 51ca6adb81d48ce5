"""
Tests for the /api/nodes endpoints.
"""
from neo4j.exceptions import ServiceUnavailable

from kgms.core.config import settings


def _create(client, name, labels=("Person",)):
    resp = client.post("/api/nodes", json={"properties": {"name": name}, "labels": list(labels)})
    assert resp.status_code == 201
    return resp.json()["data"]


def test_create_and_get_node(client):
    node = _create(client, "A")
    assert node["labels"] == ["Person"]
    assert node["properties"]["name"] == "A"

    resp = client.get(f"/api/nodes/{node['id']}")
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["data"]["id"] == node["id"]


def test_create_requires_properties(client):
    resp = client.post("/api/nodes", json={"labels": ["Person"]})
    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert "properties" in body["message"]


def test_create_with_invalid_label_is_400(client):
    resp = client.post("/api/nodes", json={"properties": {}, "labels": ["bad label"]})
    assert resp.status_code == 400
    assert "label" in resp.json()["message"]


def test_get_unknown_node_is_404(client):
    resp = client.get("/api/nodes/missing")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "message": "Node not found"}


def test_list_nodes_envelope(client):
    for name in ("A", "B", "C"):
        _create(client, name)

    resp = client.get("/api/nodes", params={"limit": 2, "skip": 1})
    body = resp.json()
    assert resp.status_code == 200
    assert body["count"] == 2
    assert body["meta"] == {"limit": 2, "skip": 1, "returned": 2}
    assert [n["properties"]["name"] for n in body["data"]] == ["B", "C"]


def test_list_nodes_rejects_negative_skip(client):
    resp = client.get("/api/nodes", params={"skip": -1})
    assert resp.status_code == 400


def test_list_by_label_routes(client):
    _create(client, "A", ["Person"])
    _create(client, "Acme", ["Org"])

    by_query = client.get("/api/nodes", params={"label": "Org"}).json()["data"]
    by_path = client.get("/api/nodes/label/Org").json()["data"]
    assert [n["properties"]["name"] for n in by_query] == ["Acme"]
    assert by_path == by_query


def test_search_nodes(client):
    _create(client, "Alice")
    _create(client, "Bob")

    body = client.get("/api/nodes/search/name/Bob").json()
    assert body["count"] == 1
    assert body["data"][0]["properties"]["name"] == "Bob"


def test_search_value_with_slash(client):
    _create(client, "AC/DC")

    resp = client.get("/api/nodes/search/name/AC%2FDC")
    assert resp.status_code == 200
    assert [n["properties"]["name"] for n in resp.json()["data"]] == ["AC/DC"]


def test_update_node_merges(client):
    node = _create(client, "A")
    resp = client.put(f"/api/nodes/{node['id']}", json={"properties": {"age": 4}})
    assert resp.status_code == 200
    assert resp.json()["data"]["properties"] == {"name": "A", "age": 4, "id": node["id"]}


def test_update_unknown_node_is_404(client):
    resp = client.put("/api/nodes/missing", json={"properties": {"age": 4}})
    assert resp.status_code == 404


def test_update_requires_properties(client):
    node = _create(client, "A")
    resp = client.put(f"/api/nodes/{node['id']}", json={})
    assert resp.status_code == 400


def test_delete_node_then_404(client):
    node = _create(client, "A")

    first = client.delete(f"/api/nodes/{node['id']}")
    assert first.status_code == 200
    assert first.json()["success"] is True

    second = client.delete(f"/api/nodes/{node['id']}")
    assert second.status_code == 404
    assert second.json()["success"] is False


def test_store_failure_is_500_with_detail_in_development(client, store, monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "development")
    store.fail_with = ServiceUnavailable("database unavailable")

    resp = client.get("/api/nodes")
    assert resp.status_code == 500
    body = resp.json()
    assert body["success"] is False
    assert body["message"] == "Internal server error"
    assert "database unavailable" in body["error"]


def test_store_failure_detail_hidden_in_production(client, store, monkeypatch):
    monkeypatch.setattr(settings, "ENVIRONMENT", "production")
    store.fail_with = ServiceUnavailable("database unavailable")

    body = client.get("/api/nodes").json()
    assert "error" not in body
