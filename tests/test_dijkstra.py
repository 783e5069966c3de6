"""Tests for the classical priority tracer."""

import math

from tracers import SnapshotKind, SnapshotPhase, dijkstra


def test_triangle_distances_and_parents(triangle_graph):
    result = dijkstra(triangle_graph, "0")

    assert dict(result.dist) == {"0": 0, "1": 1, "2": 2}
    assert dict(result.pred) == {"1": "0", "2": "1"}
    assert result.source == "0"
    assert result.algorithm == "dijkstra"


def test_first_snapshot_is_initial_state(triangle_graph):
    first = dijkstra(triangle_graph, "0").steps[0]

    assert first.step == 0
    assert first.phase is SnapshotPhase.INIT
    assert first.current is None
    assert first.settled == frozenset()
    assert first.frontier == frozenset({"0"})
    assert first.distance("0") == 0
    assert math.isinf(first.distance("1"))
    assert first.relaxation is None


def test_one_extract_per_settled_node_and_one_relax_per_edge(triangle_graph):
    steps = dijkstra(triangle_graph, "0").steps

    phases = [s.phase for s in steps]
    assert phases.count(SnapshotPhase.EXTRACT) == 3
    assert phases.count(SnapshotPhase.RELAX) == 3
    assert len(steps) == 7
    assert [s.current for s in steps if s.phase is SnapshotPhase.EXTRACT] == ["0", "1", "2"]


def test_relaxation_events(triangle_graph):
    events = [s.relaxation for s in dijkstra(triangle_graph, "0").steps if s.relaxation]

    assert [(e.source, e.target, e.weight, e.improved) for e in events] == [
        ("0", "1", 1, True),
        ("0", "2", 4, True),
        ("1", "2", 1, True),
    ]
    assert not any(e.deferred for e in events)


def test_relax_snapshot_reflects_update(triangle_graph):
    steps = dijkstra(triangle_graph, "0").steps
    relax_1_2 = next(s for s in steps if s.relaxation and s.relaxation.source == "1")

    assert relax_1_2.current == "1"
    assert relax_1_2.distance("2") == 2
    assert relax_1_2.parent("2") == "1"
    assert "2" in relax_1_2.frontier


def test_no_improvement_is_recorded():
    from conftest import build_graph

    g = build_graph(["a", "b", "c"], [("a", "b", 1), ("a", "c", 1), ("b", "c", 5)])
    steps = dijkstra(g, "a").steps
    last_relax = [s for s in steps if s.relaxation][-1]

    assert last_relax.relaxation.improved is False
    assert last_relax.description.endswith("no improvement")


def test_isolated_node_stays_unreachable(isolated_graph):
    result = dijkstra(isolated_graph, "0")

    assert all(math.isinf(s.distance("3")) for s in result.steps)
    assert all("3" not in s.settled for s in result.steps)
    assert "3" not in result.pred
    assert sorted(result.reachable()) == ["0", "1", "2"]


def test_parallel_edges_keep_the_minimum(parallel_graph):
    result = dijkstra(parallel_graph, "0")
    events = [s.relaxation for s in result.steps if s.relaxation]

    assert result.dist["1"] == 2
    assert result.pred["1"] == "0"
    assert sum(1 for e in events if e.improved and e.weight == 2) == 1


def test_all_snapshots_are_base_kind(triangle_graph):
    steps = dijkstra(triangle_graph, "0").steps
    assert all(s.kind is SnapshotKind.BASE and s.bounded is None for s in steps)


def test_equal_distances_extract_in_insertion_order():
    from conftest import build_graph

    g = build_graph(["s", "b", "a", "c"], [("s", "b", 2), ("s", "a", 2), ("s", "c", 2)])
    steps = dijkstra(g, "s").steps

    assert [s.current for s in steps if s.phase is SnapshotPhase.EXTRACT] == ["s", "b", "a", "c"]


def test_dangling_edge_target_is_reached_as_dead_end():
    from conftest import build_graph

    g = build_graph(["a"], [("a", "ghost", 3)])
    result = dijkstra(g, "a")

    assert result.dist["ghost"] == 3
    assert "ghost" in result.final.settled
