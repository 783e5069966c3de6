from typing import Optional

from graph.exceptions import GraphFormatError


# ---------------------------------------------------------------------------
# Node
# ---------------------------------------------------------------------------
class Node:
    """
    Identity only: the tracers keep all per-run state (distance, parent,
    settled/frontier membership) in their own maps, never on the node.

    Attributes:
        id       : Unique identifier (opaque, hashable, totally ordered).
        label    : Human-readable name used in descriptions and exports.
    """

    __slots__ = ("id", "label")

    def __init__(self, node_id: str, label: Optional[str] = None):
        self.id:    str = node_id
        self.label: str = label or node_id

    # ------------------------------------------------------------------
    # Serialisation
    # ------------------------------------------------------------------
    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label}

    @classmethod
    def from_dict(cls, data: dict, index: int = 0) -> "Node":
        if not isinstance(data, dict):
            raise GraphFormatError(f"node #{index} is not an object")
        node_id = data.get("id")
        label = data.get("label")
        if label is None:
            label = (data.get("data") or {}).get("label")
        node_id = str(node_id) if node_id is not None else str(index)
        return cls(node_id=node_id, label=str(label) if label is not None else None)

    # ------------------------------------------------------------------
    # Dunder
    # ------------------------------------------------------------------
    def __repr__(self) -> str:
        return f"Node(id={self.id}, label={self.label})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Node) and self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)
