"""
recorder.py — Run Recorder & Analytics
========================================
Runs one tracer to completion on a graph, keeps its TraceResult, and
computes the analytics the comparison view needs.

Usage:
    rec = Recorder()
    rec.start(algo_key="dijkstra", graph=g, source="0", target="5")
    rec.run_to_completion()          # runs the tracer
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # JSON-safe dict for save/replay

Comparison Mode:
    Two Recorders (one per tracer) run on the SAME graph and source, then
    compare(rec1, rec2) → ComparisonResult, which also checks that both
    tracers agree on every final distance.
"""

import logging
import time
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple

from graph import Graph
from tracers import (
    INF,
    AlgoInfo,
    PathView,
    Snapshot,
    SnapshotPhase,
    TraceResult,
    get_algorithm,
    path_at,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass: what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:        str   = ""
    algo_label:      str   = ""
    source:          str   = ""
    target:          str   = ""
    total_steps:     int   = 0          # number of Snapshots recorded
    settled:         int   = 0          # nodes settled by the end
    reachable:       int   = 0          # nodes with a finite final distance
    relaxations:     int   = 0          # edge examinations
    improvements:    int   = 0          # examinations that lowered a distance
    deferred:        int   = 0          # examinations parked by the bound (bmssp)
    rounds:          int   = 0          # pivot selections (bmssp)
    path_found:      bool  = False
    path_cost:       Optional[float] = None   # dist[target], None when unreachable
    path_length:     int   = 0          # number of edges on the final path
    wall_time_ms:    float = 0.0


# ---------------------------------------------------------------------------
# ComparisonResult: side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    agree:          bool = True
    disagreements:  Dict[str, Tuple[Optional[float], Optional[float]]] = field(default_factory=dict)
    winner_steps:   str  = ""   # which tracer needed fewer snapshots
    winner_relax:   str  = ""   # which tracer examined fewer edges


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        result      : TraceResult of the run (available after run_to_completion).
        metrics     : Computed RunMetrics (available after run_to_completion).
    """

    def __init__(self):
        self.result:  Optional[TraceResult] = None
        self.metrics: Optional[RunMetrics]  = None

        self._algo_info: Optional[AlgoInfo] = None
        self._source:    str                = ""
        self._target:    str                = ""
        self._graph:     Optional[Graph]    = None

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algo_key: str, graph: Graph, source: str, target: Optional[str] = None) -> None:
        """Select the tracer and inputs for this run."""
        info = get_algorithm(algo_key)
        if info is None:
            raise ValueError(f"Unknown algorithm: {algo_key}")

        self._algo_info = info
        self._graph     = graph
        self._source    = source
        self._target    = target or ""
        self.result     = None
        self.metrics    = None

    def run_to_completion(self) -> RunMetrics:
        """Run the tracer, keep every snapshot, compute metrics."""
        if self._algo_info is None or self._graph is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        self.result = self._algo_info.fn(self._graph, self._source)
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        logger.debug(
            "%s from %s: %d steps, %d settled",
            self._algo_info.key, self._source, self.metrics.total_steps, self.metrics.settled,
        )
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    @property
    def algo_key(self) -> str:
        return self._algo_info.key if self._algo_info else ""

    @property
    def steps(self) -> Tuple[Snapshot, ...]:
        return self.result.steps if self.result else ()

    # ------------------------------------------------------------------
    # Path queries
    # ------------------------------------------------------------------
    def path_at(self, step: int, target: Optional[str] = None) -> PathView:
        """Path to `target` (default: the run's target) implied by snapshot `step`."""
        if self.result is None:
            raise RuntimeError("Call run_to_completion() first.")
        if not 0 <= step < len(self.result.steps):
            raise ValueError(f"step {step} out of range 0..{len(self.result.steps) - 1}")
        return path_at(self.result.steps[step], target or self._target, self._source)

    def final_path(self) -> PathView:
        return self.path_at(len(self.steps) - 1)

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        return {
            "algo_key": self.algo_key,
            "source":   self._source,
            "target":   self._target,
            "metrics":  asdict(self.metrics) if self.metrics else {},
            "dist":     _export_distances(self.result.dist) if self.result else {},
            "pred":     dict(self.result.pred) if self.result else {},
            "steps":    [export_snapshot(s) for s in self.steps],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info = self._algo_info
        result = self.result
        steps = result.steps

        relaxations  = [s.relaxation for s in steps if s.relaxation is not None]
        target_cost  = result.distance(self._target) if self._target else INF
        path         = self.final_path() if self._target else None

        return RunMetrics(
            algo_key=info.key,
            algo_label=info.label,
            source=self._source,
            target=self._target,
            total_steps=len(steps),
            settled=len(steps[-1].settled) if steps else 0,
            reachable=len(result.reachable()),
            relaxations=len(relaxations),
            improvements=sum(1 for r in relaxations if r.improved),
            deferred=sum(1 for r in relaxations if r.deferred),
            rounds=sum(1 for s in steps if s.phase is SnapshotPhase.PIVOTS),
            path_found=target_cost < INF,
            path_cost=_json_distance(target_cost) if self._target else None,
            path_length=len(path.pairs) if path else 0,
            wall_time_ms=round(wall_ms, 2),
        )


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val, l_key, r_key):
        if l_val == r_val:
            return "tie"
        return l_key if l_val < r_val else r_key

    disagreements: Dict[str, Tuple[Optional[float], Optional[float]]] = {}
    if left.result is not None and right.result is not None:
        for node in sorted(set(left.result.dist) | set(right.result.dist)):
            ld, rd = left.result.distance(node), right.result.distance(node)
            if ld != rd:
                disagreements[node] = (_json_distance(ld), _json_distance(rd))
    if disagreements:
        logger.warning("%s and %s disagree on %d node(s)", l.algo_key, r.algo_key, len(disagreements))

    return ComparisonResult(
        left=l,
        right=r,
        agree=not disagreements,
        disagreements=disagreements,
        winner_steps=winner(l.total_steps, r.total_steps, l.algo_label, r.algo_label),
        winner_relax=winner(l.relaxations, r.relaxations, l.algo_label, r.algo_label),
    )


def run_comparison(
    graph: Graph,
    source: str,
    target: Optional[str] = None,
    left_key: str = "dijkstra",
    right_key: str = "bmssp",
) -> Tuple[Recorder, Recorder, ComparisonResult]:
    """Run both tracers on the same inputs and compare them."""
    recorders = []
    for key in (left_key, right_key):
        rec = Recorder()
        rec.start(algo_key=key, graph=graph, source=source, target=target)
        rec.run_to_completion()
        recorders.append(rec)
    left, right = recorders
    return left, right, compare(left, right)


# ---------------------------------------------------------------------------
# Per-node status tags (what the state table shows)
# ---------------------------------------------------------------------------
def status_for(
    node_id: str,
    snapshot: Snapshot,
    source: Optional[str] = None,
    target: Optional[str] = None,
    path_nodes: Iterable[str] = (),
) -> List[str]:
    tags = []
    if node_id == source:
        tags.append("start")
    if node_id == target:
        tags.append("end")
    if snapshot.current == node_id:
        tags.append("current")
    if snapshot.bounded is not None:
        if node_id in snapshot.bounded.active:
            tags.append("S")
        if node_id in snapshot.bounded.pivots:
            tags.append("P")
        if node_id in snapshot.bounded.batch:
            tags.append("U")
    if node_id in snapshot.settled:
        tags.append("settled")
    elif node_id in snapshot.frontier:
        tags.append("frontier")
    if node_id in set(path_nodes):
        tags.append("path")
    return tags


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------
def _json_distance(value: float) -> Optional[float]:
    if value == INF:
        return None
    return int(value) if float(value).is_integer() else value


def _export_distances(dist) -> Dict[str, Optional[float]]:
    return {node: _json_distance(d) for node, d in dist.items()}


def export_snapshot(snap: Snapshot) -> Dict[str, Any]:
    """JSON-safe dict: sets become sorted lists, ∞ becomes null."""
    data: Dict[str, Any] = {
        "step":        snap.step,
        "kind":        snap.kind.value,
        "phase":       snap.phase.value,
        "description": snap.description,
        "current":     snap.current,
        "settled":     sorted(snap.settled),
        "frontier":    sorted(snap.frontier),
        "dist":        _export_distances(snap.dist),
        "pred":        dict(snap.pred),
        "relaxation":  asdict(snap.relaxation) if snap.relaxation else None,
    }
    if snap.bounded is not None:
        b = snap.bounded
        data["bounded"] = {
            "S":     sorted(b.active),
            "P":     sorted(b.pivots),
            "U":     sorted(b.batch),
            "level": b.level,
            "B":     _json_distance(b.bound),
            "B_next": _json_distance(b.next_bound) if b.next_bound is not None else None,
        }
    return data
