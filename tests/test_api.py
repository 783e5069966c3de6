"""Tests for the Flask JSON API."""

import pytest

from graph import Graph
from main import app

TRIANGLE = {
    "nodes": [{"id": "0"}, {"id": "1"}, {"id": "2"}],
    "edges": [
        {"source": "0", "target": "1", "weight": 1},
        {"source": "0", "target": "2", "weight": 4},
        {"source": "1", "target": "2", "weight": 1},
    ],
}


@pytest.fixture
def client():
    app.config.update(TESTING=True)
    with app.test_client() as c:
        yield c


def test_lists_registered_algorithms(client):
    resp = client.get("/api/algorithms")

    assert resp.status_code == 200
    keys = [a["key"] for a in resp.get_json()["algorithms"]]
    assert keys == ["dijkstra", "bmssp"]


def test_run_on_triangle(client):
    resp = client.post("/api/run", json={"graph": TRIANGLE, "source": "0", "target": "2"})
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["comparison"]["agree"] is True
    for key in ("dijkstra", "bmssp"):
        run = body["runs"][key]
        assert run["dist"] == {"0": 0, "1": 1, "2": 2}
        assert run["path"]["pairs"] == [["0", "1"], ["1", "2"]]
        assert run["path"]["ordered"] == ["0", "1", "2"]
    assert body["runs"]["dijkstra"]["metrics"]["total_steps"] == 7


def test_run_without_graph_generates_one(client):
    resp = client.post("/api/run", json={"num_nodes": 8, "seed": 3})
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["source"] == "0"
    assert body["target"] is None
    assert len(body["graph"]["nodes"]) == 8
    assert "path" not in body["runs"]["bmssp"]
    assert body["comparison"]["agree"] is True


def test_unknown_source_is_a_bad_request(client):
    resp = client.post("/api/run", json={"graph": TRIANGLE, "source": "9"})

    assert resp.status_code == 400
    assert "unknown source" in resp.get_json()["error"]


def test_invalid_weight_is_a_bad_request(client):
    bad = {"nodes": [{"id": "a"}, {"id": "b"}], "edges": [{"source": "a", "target": "b", "weight": 0}]}
    resp = client.post("/api/run", json={"graph": bad, "source": "a"})

    assert resp.status_code == 400
    assert resp.get_json()["error"].startswith("Graph Format Error")


def test_path_at_first_step_is_empty(client):
    resp = client.post("/api/path", json={"graph": TRIANGLE, "source": "0", "target": "2", "step": 0})
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["total"] == 7
    assert body["path"]["pairs"] == []
    assert body["snapshot"]["phase"] == "init"
    assert "start" in body["status"]["0"]
    assert body["status"]["2"] == ["end"]


def test_path_defaults_to_last_step(client):
    resp = client.post("/api/path", json={"graph": TRIANGLE, "source": "0", "target": "2", "algo": "bmssp"})
    body = resp.get_json()

    assert body["step"] == body["total"] - 1
    assert body["path"]["nodes"] == ["0", "1", "2"]
    assert "path" in body["status"]["1"]


def test_path_requires_a_target(client):
    resp = client.post("/api/path", json={"graph": TRIANGLE, "source": "0"})
    assert resp.status_code == 400


def test_path_step_out_of_range(client):
    resp = client.post("/api/path", json={"graph": TRIANGLE, "source": "0", "target": "2", "step": 99})
    assert resp.status_code == 400


def test_generate_respects_node_limit(client):
    resp = client.post("/api/graph/generate", json={"num_nodes": 100})
    assert resp.status_code == 400


def test_generate_is_seeded(client):
    one = client.post("/api/graph/generate", json={"num_nodes": 12, "seed": 7}).get_json()
    two = client.post("/api/graph/generate", json={"num_nodes": 12, "seed": 7}).get_json()

    assert one == two
    assert one["node_ids"] == [str(i) for i in range(12)]


def test_oversized_num_nodes_rejected_before_generation(client, monkeypatch):
    calls = []
    monkeypatch.setattr(Graph, "create_edge", lambda self, *a, **kw: calls.append(a))
    monkeypatch.setattr(Graph, "create_node", lambda self, *a, **kw: calls.append(a))

    for route in ("/api/graph/generate", "/api/run"):
        resp = client.post(route, json={"num_nodes": 2000, "density": 0.0})
        assert resp.status_code == 400
        assert "limited to 60" in resp.get_json()["error"]
    assert calls == []


@pytest.mark.parametrize("body", [
    {"seed": [1, 2]},
    {"seed": {"a": 1}},
    {"num_nodes": "many"},
    {"density": None},
])
def test_malformed_generator_parameters_are_bad_requests(client, body):
    resp = client.post("/api/graph/generate", json=body)

    assert resp.status_code == 400
    assert "must be a number" in resp.get_json()["error"]
