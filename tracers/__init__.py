"""
tracers/__init__.py — Tracer Registry
=====================================
Single source of truth for every tracer the engine knows about.

    from tracers import REGISTRY, get_algorithm

REGISTRY is a dict:
    {
        "dijkstra": AlgoInfo(key, label, fn, tags, …),
        "bmssp":    AlgoInfo(…),
    }

Every `fn` has the same shape: (graph, source) → TraceResult. Adding a
tracer is: write the function, add one entry here.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from tracers.step       import (
    INF,
    BoundedState,
    Relaxation,
    Snapshot,
    SnapshotKind,
    SnapshotPhase,
    TraceResult,
    TraceState,
)
from tracers.path       import EMPTY_PATH, PathView, path_at, reconstruct_path
from tracers.dijkstra   import dijkstra
from tracers.bmssp      import BoundedFrontierTracer, BoundedParams, bmssp, derive_params
from tracers.exceptions import StalledRoundError, TraceError


# ---------------------------------------------------------------------------
# AlgoInfo: metadata card for each tracer
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:             str                                   # registry key, e.g. "dijkstra"
    label:           str                                   # human label
    fn:              Callable[..., TraceResult]            # (graph, source) → TraceResult
    tags:            List[str] = field(default_factory=list)
    complexity_time: str       = ""
    description:     str       = ""

    def to_dict(self) -> dict:
        return {
            "key":             self.key,
            "label":           self.label,
            "tags":            list(self.tags),
            "complexity_time": self.complexity_time,
            "description":     self.description,
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[str, AlgoInfo] = {

    "dijkstra": AlgoInfo(
        key="dijkstra", label="Dijkstra (priority queue)", fn=dijkstra,
        tags=["weighted", "shortest-path", "global-extract-min"],
        complexity_time="O((V + E) log V)",
        description="Always expands the globally closest unsettled node.",
    ),

    "bmssp": AlgoInfo(
        key="bmssp", label="BMSSP-style bounded frontier", fn=bmssp,
        tags=["weighted", "shortest-path", "batched", "bounded"],
        complexity_time="O(m log^(2/3) n) in the full algorithm",
        description="Expands pivot batches under a shrinking bound, level by level.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: str) -> Optional[AlgoInfo]:
    """Return AlgoInfo by key, or None."""
    return REGISTRY.get(key)


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered tracers in insertion order."""
    return list(REGISTRY.values())


__all__ = [
    "AlgoInfo",
    "REGISTRY",
    "get_algorithm",
    "list_algorithms",
    "INF",
    "Snapshot",
    "SnapshotKind",
    "SnapshotPhase",
    "BoundedState",
    "Relaxation",
    "TraceResult",
    "TraceState",
    "PathView",
    "EMPTY_PATH",
    "reconstruct_path",
    "path_at",
    "dijkstra",
    "bmssp",
    "BoundedFrontierTracer",
    "BoundedParams",
    "derive_params",
    "TraceError",
    "StalledRoundError",
]
