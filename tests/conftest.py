"""Shared test fixtures."""

import random

import pytest

from graph import Graph


def build_graph(nodes, edges) -> Graph:
    g = Graph()
    for nid in nodes:
        g.create_node(nid)
    for source, target, weight in edges:
        g.create_edge(source, target, weight=weight)
    return g


def messy_graph(seed: int, num_nodes: int = 12) -> Graph:
    """Random graph with parallel edges, self-loops and a dangling edge target."""
    rng = random.Random(seed)
    ids = [str(i) for i in range(num_nodes)]
    edges = []
    for _ in range(num_nodes * 3):
        u, v = rng.choice(ids), rng.choice(ids)
        edges.append((u, v, rng.randint(1, 9)))
    edges.append((ids[0], "ghost", 2))
    return build_graph(ids, edges)


@pytest.fixture
def triangle_graph() -> Graph:
    """0→1 (1), 0→2 (4), 1→2 (1): the shortest way to 2 goes through 1."""
    return build_graph(["0", "1", "2"], [("0", "1", 1), ("0", "2", 4), ("1", "2", 1)])


@pytest.fixture
def isolated_graph() -> Graph:
    """Triangle plus node 3 with no edges at all."""
    return build_graph(
        ["0", "1", "2", "3"],
        [("0", "1", 1), ("0", "2", 4), ("1", "2", 1)],
    )


@pytest.fixture
def parallel_graph() -> Graph:
    """Two arcs 0→1, the heavier one supplied first."""
    return build_graph(["0", "1"], [("0", "1", 5), ("0", "1", 2)])


@pytest.fixture
def deferred_graph() -> Graph:
    """
    Small enough for k = 2, shaped so that the bound tightens to 12 while
    q (dist 4) is still waiting, and q's edge to u (24) has to be parked.
    """
    return build_graph(
        ["0", "x", "y", "z", "q", "m", "r", "t", "u"],
        [
            ("0", "x", 1), ("0", "y", 2), ("0", "z", 3), ("0", "q", 4),
            ("x", "m", 10), ("y", "r", 10), ("z", "t", 20), ("q", "u", 20),
        ],
    )
