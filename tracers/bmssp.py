"""
bmssp.py — Bounded Frontier Tracer ("BMSSP-style")
===================================================
A simplified, teaching-sized take on bounded multi-source shortest paths.
Instead of one global extract-min, work proceeds in ROUNDS:

  1. Pivot selection   S = frontier, P = ceil(|S| / k) smallest of S
  2. Bounded expansion  pop from a local heap seeded with P, at most k
                        extractions; a relaxation is accepted only if it
                        improves the target AND lands strictly below B
  3. End of round       B′ = smallest distance left in the local heap when
                        the round filled up, otherwise B′ = B
  4. Transition         B′ < B  →  tighten B, stay on this level
                        else    →  B ← ∞, level ← max(0, level - 1)

The run ends once every node is settled or still at ∞.

Two rules keep the final distances identical to the classical tracer:

  • Deferred relaxations. A candidate that would improve its target but is
    not below B is parked (best candidate per node) instead of dropped.
    Whenever B is lifted back to ∞ the parked candidates that still
    improve their target are applied.
  • Safe extraction. The local heap only settles a node whose distance is
    below B and no larger than any frontier distance. If the local minimum
    fails that test the round ends early and the node stays on the frontier
    for a later round.

Equal-distance relaxations keep the smaller parent id (the classical tracer
does the same), so the final pred maps match as well.

Snapshots are recorded at init, pivot selection, every extraction, every
relaxation, end of round and every bound/level transition.
"""

import heapq
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Tuple

from graph import Graph
from tracers.exceptions import StalledRoundError
from tracers.step import (
    INF,
    BoundedState,
    Relaxation,
    SnapshotKind,
    SnapshotPhase,
    TraceResult,
    TraceState,
    format_distance,
    format_set,
)

logger = logging.getLogger(__name__)

HeapEntry = Tuple[float, int, str]       # (distance, insertion_seq, node_id)


# ---------------------------------------------------------------------------
# Parameters: derived once per run from the node count
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class BoundedParams:
    k:      int     # branching factor: pivots per |S| and extractions per round
    t:      int     # batch size
    levels: int     # starting level L


def derive_params(n: int) -> BoundedParams:
    base = math.log2(max(4, n))
    k = max(2, math.floor(base ** (1 / 3)))
    t = max(2, math.floor(base ** (2 / 3)))
    log_n = math.log2(n) if n >= 1 else 0.0
    levels = max(1, math.ceil(log_n / max(1, t)))
    return BoundedParams(k=k, t=t, levels=levels)


# ---------------------------------------------------------------------------
# Tracer
# ---------------------------------------------------------------------------
class BoundedFrontierTracer:
    """
    One run of the bounded tracer. Owns its TraceState exclusively; build a
    new instance per run.

    Attributes:
        params      : k / t / L for this graph.
        bound       : Current bound B.
        level       : Current level, starts at L, bottoms out at 0.
        round_index : Rounds started so far.
        deferred    : {target: (candidate, parent, weight)} parked by the bound.
    """

    def __init__(self, graph: Graph, source: str):
        self.graph:       Graph         = graph
        self.state:       TraceState    = TraceState(graph, source, kind=SnapshotKind.BOUNDED)
        self.params:      BoundedParams = derive_params(graph.node_count())
        self.bound:       float         = INF
        self.level:       int           = self.params.levels
        self.round_index: int           = 0
        self.deferred:    Dict[str, Tuple[float, str, int]] = {}
        self._seq = itertools.count()

    # ------------------------------------------------------------------
    # Driver
    # ------------------------------------------------------------------
    def run(self) -> TraceResult:
        state = self.state
        p = self.params
        logger.debug("bmssp: start from %s on %r with k=%d t=%d L=%d", state.source, self.graph, p.k, p.t, p.levels)

        state.record(
            SnapshotPhase.INIT,
            f"Init: dist({state.source}) = 0; frontier ← {{{state.source}}}; "
            f"k={p.k}, t={p.t}, L={p.levels}, B = ∞",
            bounded=self._payload(frozenset(state.frontier)),
        )

        while not self._finished():
            self.round_index += 1
            settled_before = len(state.settled)
            position_before = (self.level, self.bound)

            active = frozenset(state.frontier)
            ordered_pivots = self._select_pivots(active)
            pivots = frozenset(ordered_pivots)
            state.record(
                SnapshotPhase.PIVOTS,
                f"Level {self.level}: FindPivots on S = {format_set(active)}. "
                f"Choose pivots P = {format_set(pivots)}",
                bounded=self._payload(active, pivots),
            )

            batch, heap, filled = self._expand(active, ordered_pivots)

            next_bound = self.bound
            if filled:
                remaining = self._heap_min(heap)
                if remaining is not None:
                    next_bound = remaining
            state.record(
                SnapshotPhase.ROUND_END,
                f"End of round {self.round_index}: U = {format_set(batch)} complete, "
                f"B′ = {format_distance(next_bound)}",
                bounded=self._payload(active, pivots, batch, next_bound=next_bound),
            )

            self._transition(active, pivots, batch, next_bound)

            if len(state.settled) == settled_before and (self.level, self.bound) == position_before:
                logger.error(
                    "bmssp: round %d stalled at level %d with B=%s",
                    self.round_index, self.level, self.bound,
                )
                raise StalledRoundError(self.level, self.bound, self.round_index)

        logger.debug(
            "bmssp: settled %d nodes in %d rounds, %d steps",
            len(state.settled), self.round_index, len(state.steps),
        )
        return state.result("bmssp")

    # ------------------------------------------------------------------
    # Round phases
    # ------------------------------------------------------------------
    def _select_pivots(self, active: FrozenSet[str]) -> List[str]:
        ranked = sorted(active, key=lambda n: (self.state.distance(n), n))
        if not ranked:
            return []
        count = max(1, math.ceil(len(ranked) / self.params.k))
        return ranked[:count]

    def _expand(self, active: FrozenSet[str], ordered_pivots: List[str]) -> Tuple[FrozenSet[str], List[HeapEntry], bool]:
        """Local extraction loop. Returns (U, leftover heap, whether k were extracted)."""
        state = self.state
        pivots = frozenset(ordered_pivots)
        heap: List[HeapEntry] = []
        for node in ordered_pivots:
            heapq.heappush(heap, (state.distance(node), next(self._seq), node))

        batch: List[str] = []
        while heap and len(batch) < self.params.k:
            d, _, u = heap[0]
            if u in state.settled or d > state.distance(u):
                heapq.heappop(heap)
                continue
            if not self._safe_to_settle(u):
                logger.debug("bmssp: round %d stops before %s (dist=%s, B=%s)", self.round_index, u, d, self.bound)
                break

            heapq.heappop(heap)
            state.settle(u)
            batch.append(u)
            state.record(
                SnapshotPhase.EXTRACT,
                f"BaseCase extract {u} (round {self.round_index}, dist = {format_distance(d)})",
                current=u,
                bounded=self._payload(active, pivots, frozenset(batch)),
            )
            for v, w in self.graph.out_edges(u):
                self._relax(u, v, w, heap, active, pivots, frozenset(batch))

        return frozenset(batch), heap, len(batch) >= self.params.k

    def _relax(
        self,
        u: str,
        v: str,
        w: int,
        heap: List[HeapEntry],
        active: FrozenSet[str],
        pivots: FrozenSet[str],
        batch: FrozenSet[str],
    ) -> None:
        state = self.state
        cand = state.distance(u) + w
        improves = cand < state.distance(v)
        deferred = False

        if improves and cand < self.bound:
            state.improve(v, cand, u)
            heapq.heappush(heap, (cand, next(self._seq), v))
            description = f"BaseCase relax ({u} → {v}, w={w}): dist({v}) ← {format_distance(cand)}"
        elif improves:
            deferred = True
            parked = self.deferred.get(v)
            if parked is None or (cand, u) < (parked[0], parked[1]):
                self.deferred[v] = (cand, u, w)
            description = (
                f"BaseCase relax ({u} → {v}, w={w}): {format_distance(cand)} ≥ B = "
                f"{format_distance(self.bound)}, deferred"
            )
        elif state.prefer_parent(v, cand, u):
            description = f"BaseCase relax ({u} → {v}, w={w}): tie at {format_distance(cand)}, parent({v}) ← {u}"
        else:
            description = f"BaseCase relax ({u} → {v}, w={w}): no improvement"

        state.record(
            SnapshotPhase.RELAX,
            description,
            current=u,
            relaxation=Relaxation(u, v, w, improved=improves and not deferred, deferred=deferred),
            bounded=self._payload(active, pivots, batch),
        )

    def _transition(
        self,
        active: FrozenSet[str],
        pivots: FrozenSet[str],
        batch: FrozenSet[str],
        next_bound: float,
    ) -> None:
        if next_bound < self.bound:
            self.bound = next_bound
            description = f"Bound tightened: B ← {format_distance(self.bound)}, stay on level {self.level}"
        else:
            self.bound = INF
            self.level = max(0, self.level - 1)
            released = self._release_deferred()
            description = f"Bound exhausted: B ← ∞, descend to level {self.level}"
            if released:
                description += f"; released {released} deferred relaxation(s)"
        logger.debug("bmssp: round %d → level %d, B=%s", self.round_index, self.level, self.bound)
        self.state.record(SnapshotPhase.TRANSITION, description, bounded=self._payload(active, pivots, batch))

    def _release_deferred(self) -> int:
        state = self.state
        released = 0
        for v, (cand, u, _) in self.deferred.items():
            if cand < state.distance(v):
                state.improve(v, cand, u)
                released += 1
            else:
                state.prefer_parent(v, cand, u)
        self.deferred.clear()
        return released

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _finished(self) -> bool:
        if self.deferred:
            return False
        state = self.state
        return all(n in state.settled or d == INF for n, d in state.dist.items())

    def _safe_to_settle(self, node: str) -> bool:
        d = self.state.distance(node)
        if d >= self.bound:
            return False
        return all(self.state.distance(f) >= d for f in self.state.frontier)

    def _heap_min(self, heap: List[HeapEntry]) -> Optional[float]:
        state = self.state
        live = [d for d, _, n in heap if n not in state.settled and d <= state.distance(n)]
        return min(live) if live else None

    def _payload(
        self,
        active: FrozenSet[str],
        pivots: FrozenSet[str] = frozenset(),
        batch: FrozenSet[str] = frozenset(),
        next_bound: Optional[float] = None,
    ) -> BoundedState:
        return BoundedState(
            active=active,
            pivots=pivots,
            batch=batch,
            level=self.level,
            bound=self.bound,
            next_bound=next_bound,
        )


def bmssp(graph: Graph, source: str) -> TraceResult:
    """Run the bounded tracer to completion."""
    return BoundedFrontierTracer(graph, source).run()
