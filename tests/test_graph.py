"""Tests for the graph model, import and generation."""

import pytest

from graph import Edge, Graph, GraphFormatError


def test_out_edges_keep_supply_order(triangle_graph):
    assert triangle_graph.out_edges("0") == [("1", 1), ("2", 4)]
    assert triangle_graph.out_edges("2") == []


def test_self_loops_are_ignored():
    g = Graph()
    g.create_node("a")
    assert g.create_edge("a", "a", weight=3) is None
    assert g.out_edges("a") == []
    assert g.edge_count() == 0


def test_parallel_edges_are_kept(parallel_graph):
    assert parallel_graph.out_edges("0") == [("1", 5), ("1", 2)]
    assert parallel_graph.edge_count() == 2
    assert len(set(parallel_graph.edges)) == 2


def test_edge_to_unknown_node_is_tolerated():
    g = Graph()
    g.create_node("a")
    g.create_edge("a", "nowhere", weight=2)
    assert g.out_edges("a") == [("nowhere", 2)]
    assert g.out_edges("nowhere") == []
    assert not g.has_node("nowhere")


def test_unknown_node_has_no_out_edges():
    assert Graph().out_edges("missing") == []


def test_round_trip_through_dict(triangle_graph):
    clone = Graph.from_dict(triangle_graph.to_dict())
    assert clone.node_ids() == ["0", "1", "2"]
    assert clone.out_edges("0") == [("1", 1), ("2", 4)]
    assert clone.out_edges("1") == [("2", 1)]


def test_from_dict_accepts_visualizer_shape():
    data = {
        "nodes": [{"id": "0", "data": {"label": "v0"}}, {"data": {"label": "v1"}}],
        "edges": [
            {"source": "0", "target": "1", "label": "7", "data": {"w": 3}},
            {"source": 0, "target": 1, "label": "5"},
        ],
    }
    g = Graph.from_dict(data)
    assert g.node_ids() == ["0", "1"]
    assert g.get_node("1").label == "v1"
    assert g.out_edges("0") == [("1", 3), ("1", 5)]
    assert [e.id for e in g.edges.values()] == ["0-1-0", "0-1-1"]


@pytest.mark.parametrize("weight", [0, -2, 1.5, "heavy", "inf", "nan"])
def test_from_dict_rejects_bad_weights(weight):
    data = {"nodes": [{"id": "a"}, {"id": "b"}], "edges": [{"source": "a", "target": "b", "weight": weight}]}
    with pytest.raises(GraphFormatError):
        Graph.from_dict(data)


def test_from_dict_rejects_edge_without_endpoints():
    with pytest.raises(GraphFormatError) as exc_info:
        Graph.from_dict({"nodes": [], "edges": [{"source": "a"}]})
    assert str(exc_info.value).startswith("Graph Format Error:")


def test_from_dict_rejects_non_object():
    with pytest.raises(GraphFormatError):
        Graph.from_dict(["not", "a", "graph"])


def test_generate_random_is_deterministic():
    a = Graph.generate_random(num_nodes=12, density=0.3, seed=7)
    b = Graph.generate_random(num_nodes=12, density=0.3, seed=7)
    assert a.to_dict() == b.to_dict()
    assert all(1 <= e.weight <= 9 for e in a.edges.values())
    assert all(e.source != e.target for e in a.edges.values())


def test_generate_random_gives_source_an_edge():
    g = Graph.generate_random(num_nodes=5, density=0.0, seed=1)
    assert g.out_edges("0") == [("1", 1), ("2", 4)]
    assert g.get_node("3").label == "v3"


def test_edge_repr_and_equality():
    e = Edge("a", "b", weight=4)
    assert e.id == "a-b"
    assert e == Edge("x", "y", edge_id="a-b")
    assert "a → b" in repr(e)


def test_duplicate_edge_id_gets_suffix():
    g = Graph()
    g.add_edge(Edge("a", "b", weight=1))
    second = g.add_edge(Edge("a", "b", weight=2))

    assert second.id == "a-b#1"
    assert g.get_edge("a-b#1").weight == 2
    assert g.out_edges("a") == [("b", 1), ("b", 2)]
