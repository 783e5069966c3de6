"""
step.py — Trace Snapshot
========================
Every tracer emits Snapshot objects. A Snapshot is a frozen-in-time
picture of the tracer's whole working state at one step:

    • Which nodes are settled / on the frontier / being processed
    • The full distance map and predecessor map
    • The edge just examined, and whether it improved anything
    • For the bounded tracer: S, P, U, level, B and B′

Design decisions:
  - Snapshot is a frozen dataclass built only from COPIES: sets become
    frozensets, dicts are copied and wrapped read-only. Mutating a
    tracer after a snapshot is taken can never leak into it, so a replay
    UI may hold any two steps and compare them.
  - The bounded tracer's extra fields live in a separate BoundedState
    payload selected by `kind`, instead of optional attributes that may or
    may not be present.
  - TraceState is the ONLY writer. Tracers mutate it and call record(),
    which appends and returns a fresh Snapshot.
"""

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from graph import Graph


INF = math.inf


def format_distance(value: float) -> str:
    """'∞' for unreachable, integers without a trailing '.0'."""
    if value == INF:
        return "∞"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_set(nodes: Iterable[str]) -> str:
    return "{" + ", ".join(sorted(nodes)) + "}"


class SnapshotKind(Enum):
    BASE    = "base"      # classical tracer
    BOUNDED = "bounded"   # bounded frontier tracer, carries BoundedState


class SnapshotPhase(Enum):
    INIT       = "init"
    EXTRACT    = "extract"
    RELAX      = "relax"
    PIVOTS     = "pivots"       # bounded only
    ROUND_END  = "round_end"    # bounded only
    TRANSITION = "transition"   # bounded only


@dataclass(frozen=True)
class Relaxation:
    """
    One edge examination `source → target`.

    `deferred` is only ever set by the bounded tracer: the candidate would
    have improved the target but was not below the current bound B, so it
    was parked until the bound is lifted.
    """

    source:   str
    target:   str
    weight:   int
    improved: bool
    deferred: bool = False


@dataclass(frozen=True)
class BoundedState:
    """
    Attributes:
        active     : S, the frontier being processed this round.
        pivots     : P ⊆ S, the smallest-distance members that seed the round.
        batch      : U, nodes extracted so far this round.
        level      : Current recursion level.
        bound      : B, relaxations must land strictly below it.
        next_bound : B′, only known once a round has ended.
    """

    active:     FrozenSet[str]
    pivots:     FrozenSet[str]
    batch:      FrozenSet[str]
    level:      int
    bound:      float
    next_bound: Optional[float] = None


@dataclass(frozen=True)
class Snapshot:
    """
    Attributes:
        step        : 0-based index of this snapshot in the run.
        description : Human-readable account of what just happened.
        kind        : Discriminant for the `bounded` payload.
        phase       : Which state transition produced this step.
        current     : Node being processed right now, if any.
        settled     : Nodes whose distance is final.
        frontier    : Nodes with a finite, still-improvable distance.
        dist        : {node_id: distance}, `inf` when unknown.
        pred        : {node_id: parent_id} for every node that has a parent.
        relaxation  : The edge examination that produced this step, if any.
        bounded     : Extra bounded-tracer state, None for BASE snapshots.
    """

    step:        int
    description: str
    kind:        SnapshotKind
    phase:       SnapshotPhase
    current:     Optional[str]
    settled:     FrozenSet[str]
    frontier:    FrozenSet[str]
    dist:        Mapping[str, float]
    pred:        Mapping[str, str]
    relaxation:  Optional[Relaxation] = None
    bounded:     Optional[BoundedState] = None

    def distance(self, node_id: str) -> float:
        return self.dist.get(node_id, INF)

    def parent(self, node_id: str) -> Optional[str]:
        return self.pred.get(node_id)


@dataclass(frozen=True)
class TraceResult:
    """Everything a run hands back: the snapshot sequence and final maps."""

    algorithm: str
    source:    str
    steps:     Tuple[Snapshot, ...]
    dist:      Mapping[str, float]
    pred:      Mapping[str, str]

    def distance(self, node_id: str) -> float:
        return self.dist.get(node_id, INF)

    @property
    def final(self) -> Snapshot:
        return self.steps[-1]

    def reachable(self) -> List[str]:
        return [n for n, d in self.dist.items() if d < INF]


# ---------------------------------------------------------------------------
# Mutable working state: one per run
# ---------------------------------------------------------------------------
class TraceState:
    """
    Owns the distance / predecessor / settled / frontier collections of a
    single run and turns them into Snapshots on demand.

    Usage inside a tracer:
        state = TraceState(graph, source)
        state.settle(u)
        state.record(SnapshotPhase.EXTRACT, f"Extract-min: settle {u}", current=u)
    """

    def __init__(self, graph: Graph, source: str, kind: SnapshotKind = SnapshotKind.BASE):
        self.source:   str                = source
        self.kind:     SnapshotKind       = kind
        self.dist:     Dict[str, float]   = {nid: INF for nid in graph.nodes}
        self.pred:     Dict[str, str]     = {}
        self.settled:  Set[str]           = set()
        self.frontier: Set[str]           = {source}
        self.steps:    List[Snapshot]     = []
        self.dist[source] = 0

    # -- helpers --
    def distance(self, node_id: str) -> float:
        return self.dist.get(node_id, INF)

    def settle(self, node_id: str) -> None:
        self.settled.add(node_id)
        self.frontier.discard(node_id)

    def improve(self, node_id: str, value: float, parent: str) -> None:
        self.dist[node_id] = value
        self.pred[node_id] = parent
        self.frontier.add(node_id)

    def prefer_parent(self, node_id: str, value: float, parent: str) -> bool:
        """Equal-distance candidate: keep the smaller parent id. Returns True if pred changed."""
        if node_id in self.settled or value != self.distance(node_id):
            return False
        current = self.pred.get(node_id)
        if current is None or parent >= current:
            return False
        self.pred[node_id] = parent
        return True

    def record(
        self,
        phase: SnapshotPhase,
        description: str,
        current: Optional[str] = None,
        relaxation: Optional[Relaxation] = None,
        bounded: Optional[BoundedState] = None,
    ) -> Snapshot:
        snap = Snapshot(
            step=len(self.steps),
            description=description,
            kind=self.kind,
            phase=phase,
            current=current,
            settled=frozenset(self.settled),
            frontier=frozenset(self.frontier),
            dist=MappingProxyType(dict(self.dist)),
            pred=MappingProxyType(dict(self.pred)),
            relaxation=relaxation,
            bounded=bounded,
        )
        self.steps.append(snap)
        return snap

    def result(self, algorithm: str) -> TraceResult:
        return TraceResult(
            algorithm=algorithm,
            source=self.source,
            steps=tuple(self.steps),
            dist=MappingProxyType(dict(self.dist)),
            pred=MappingProxyType(dict(self.pred)),
        )
