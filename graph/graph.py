"""
graph.py — Graph Container & Generator
=======================================
Single source of truth for the graph. Both tracers read from this object
and never write to it.

Responsibilities:
  1. Building nodes & edges                 (add / create / get)
  2. Adjacency queries                      (out_edges, degree)
  3. Seeded random generation               (generate_random)
  4. Serialisation round-trip               (to_dict / from_dict)

Design decisions:
  - Nodes & edges stored in plain dicts keyed by id for O(1) lookup.
  - A separate adjacency dict  `_adj[node_id] → [(neighbour_id, edge_id)]`
    is maintained incrementally so neighbour queries are O(degree), not O(E).
    Its lists keep insertion order, which is the order relaxations happen in.
  - Self-loops are dropped on insertion. Parallel edges are kept.
  - An edge may name a node that was never added. It is stored anyway;
    the tracers treat such a node as a dead end with no outgoing edges.
"""

import logging
import random
from typing import Dict, List, Tuple, Optional

from graph.node import Node
from graph.edge import Edge
from graph.exceptions import GraphFormatError

logger = logging.getLogger(__name__)


class Graph:
    """
    Attributes:
        nodes      : {node_id: Node}
        edges      : {edge_id: Edge}
        _adj       : {node_id: [(neighbour_id, edge_id), …]}
    """

    def __init__(self):
        self.nodes: Dict[str, Node] = {}
        self.edges: Dict[str, Edge] = {}
        self._adj:  Dict[str, List[Tuple[str, str]]] = {}   # node_id → [(nbr, edge_id)]

    # ==================================================================
    # NODES
    # ==================================================================
    def add_node(self, node: Node) -> Node:
        self.nodes[node.id] = node
        self._adj.setdefault(node.id, [])
        return node

    def create_node(self, node_id: str, label: Optional[str] = None) -> Node:
        """Convenience: create + add in one call."""
        return self.add_node(Node(node_id=node_id, label=label))

    def get_node(self, node_id: str) -> Optional[Node]:
        return self.nodes.get(node_id)

    def has_node(self, node_id: str) -> bool:
        return node_id in self.nodes

    # ==================================================================
    # EDGES
    # ==================================================================
    def add_edge(self, edge: Edge) -> Optional[Edge]:
        """Store a directed edge. Self-loops are ignored and return None."""
        if edge.is_self_loop:
            logger.debug("Ignoring self-loop %s on node %s", edge.id, edge.source)
            return None
        if edge.id in self.edges:
            edge.id = self._unique_edge_id(edge.id)
        self.edges[edge.id] = edge
        self._adj.setdefault(edge.source, []).append((edge.target, edge.id))
        return edge

    def create_edge(self, source: str, target: str, weight: int = 1, edge_id: Optional[str] = None) -> Optional[Edge]:
        return self.add_edge(Edge(source=source, target=target, weight=weight, edge_id=edge_id))

    def get_edge(self, edge_id: str) -> Optional[Edge]:
        return self.edges.get(edge_id)

    def _unique_edge_id(self, base: str) -> str:
        suffix = 1
        while f"{base}#{suffix}" in self.edges:
            suffix += 1
        return f"{base}#{suffix}"

    # ==================================================================
    # ADJACENCY QUERIES
    # ==================================================================
    def out_edges(self, node_id: str) -> List[Tuple[str, int]]:
        """[(target, weight)] for every outgoing edge, in insertion order."""
        return [(nbr, self.edges[eid].weight) for nbr, eid in self._adj.get(node_id, [])]

    def degree(self, node_id: str) -> int:
        return len(self._adj.get(node_id, []))

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> dict:
        return {
            "nodes": [n.to_dict() for n in self.nodes.values()],
            "edges": [e.to_dict() for e in self.edges.values()],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Graph":
        if not isinstance(data, dict):
            raise GraphFormatError("graph description must be an object")
        nodes = data.get("nodes", [])
        edges = data.get("edges", [])
        if not isinstance(nodes, list) or not isinstance(edges, list):
            raise GraphFormatError("'nodes' and 'edges' must both be lists")

        g = cls()
        for i, nd in enumerate(nodes):
            g.add_node(Node.from_dict(nd, index=i))
        for j, ed in enumerate(edges):
            g.add_edge(Edge.from_dict(ed, index=j))
        return g

    # ==================================================================
    # GENERATOR
    # ==================================================================
    @classmethod
    def generate_random(
        cls,
        num_nodes: int = 10,
        density: float = 0.18,
        seed: Optional[int] = 42,
    ) -> "Graph":
        """
        Directed Erdős–Rényi style graph.

        Each ordered pair (u, v), u != v, gets an edge with probability
        `density` and a weight drawn from 1..9. If node "0" ends up with no
        outgoing edge, the fallback edges 0→1 (w=1) and 0→2 (w=4) are added
        so a trace from "0" always has something to do.
        """
        rng = random.Random(seed)
        g = cls()

        ids = [str(i) for i in range(num_nodes)]
        for i, nid in enumerate(ids):
            g.create_node(nid, label=f"v{i}")

        for u in ids:
            for v in ids:
                if u == v:
                    continue
                if rng.random() < density:
                    w = 1 + int(rng.random() * 9)
                    g.create_edge(u, v, weight=w)

        if num_nodes > 0 and g.degree("0") == 0:
            if num_nodes > 1:
                g.create_edge("0", "1", weight=1)
            if num_nodes > 2:
                g.create_edge("0", "2", weight=4)

        logger.debug("Generated graph seed=%s: %d nodes, %d edges", seed, g.node_count(), g.edge_count())
        return g

    # ==================================================================
    # UTILITY
    # ==================================================================
    def node_count(self) -> int:
        return len(self.nodes)

    def edge_count(self) -> int:
        return len(self.edges)

    def node_ids(self) -> List[str]:
        return list(self.nodes.keys())

    def __repr__(self) -> str:
        return f"Graph(nodes={self.node_count()}, edges={self.edge_count()})"
