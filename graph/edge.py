"""
edge.py — Directed Weighted Edge
================================
One directed arc `source → target` with a positive integer weight.

Design decisions:
  - `source` and `target` are node-id strings, NOT Node references.
    This keeps edges serialisable and avoids circular references.
  - Parallel edges are legal: each Edge carries its own id, so two arcs
    between the same ordered pair are stored (and relaxed) independently.
  - Edges are read-only once built. A trace run never mutates the graph.
"""

import math
from typing import Optional, Any

from graph.exceptions import GraphFormatError


class Edge:
    """
    Attributes:
        id       : Unique identifier within its Graph.
        source   : ID of the tail node.
        target   : ID of the head node.
        weight   : Positive integer cost.
    """

    __slots__ = ("id", "source", "target", "weight")

    def __init__(
        self,
        source: str,
        target: str,
        weight: int = 1,
        edge_id: Optional[str] = None,
    ):
        self.id:     str = edge_id or f"{source}-{target}"
        self.source: str = source
        self.target: str = target
        self.weight: int = weight

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {
            "id":     self.id,
            "source": self.source,
            "target": self.target,
            "weight": self.weight,
        }

    @classmethod
    def from_dict(cls, data: dict, index: int = 0) -> "Edge":
        """
        Accepts both the native shape and the exported-visualizer shape:

            {"source": "0", "target": "1", "weight": 3}
            {"source": "0", "target": "1", "label": "3", "data": {"w": 3}}
        """
        if not isinstance(data, dict):
            raise GraphFormatError(f"edge #{index} is not an object")
        if data.get("source") is None or data.get("target") is None:
            raise GraphFormatError(f"edge #{index} needs both 'source' and 'target'")

        source = str(data["source"])
        target = str(data["target"])
        edge_id = data.get("id")
        return cls(
            source=source,
            target=target,
            weight=_parse_weight(data, index),
            edge_id=str(edge_id) if edge_id is not None else f"{source}-{target}-{index}",
        )

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Edge({self.source} → {self.target}, w={self.weight})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Edge) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)


def _parse_weight(data: dict, index: int) -> int:
    raw: Any = data.get("weight")
    if raw is None:
        raw = (data.get("data") or {}).get("w")
    if raw is None:
        raw = data.get("label", 1)
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise GraphFormatError(f"edge #{index} has a non-numeric weight {raw!r}") from None
    if not math.isfinite(value) or value <= 0 or value != int(value):
        raise GraphFormatError(f"edge #{index} weight must be a positive integer, got {raw!r}")
    return int(value)
