"""
dijkstra.py — Classical Priority Tracer
=======================================
Dijkstra's algorithm on a min-heap (heapq), recording a Snapshot at:
  1. Initialise distances / push source            (step 0)
  2. Pop minimum-distance node  →  settle it       ("extract")
  3. Each outgoing edge examined                   ("relax", improved or not)

Stale heap entries (nodes already settled) are dropped silently; they are
an artefact of lazy deletion, not a state transition.

Tie-break: heap entries are (distance, insertion_seq, node), so equal
distances are extracted in the order they were pushed. That is the same
order a first-minimum linear scan over an append-only list would produce.
An equal-distance relaxation of an unsettled node keeps the smaller parent
id, so the final pred map does not depend on extraction order.

Correctness note: Dijkstra requires non-negative weights. The graph layer
only supplies positive integers.
"""

import heapq
import itertools
import logging

from graph import Graph
from tracers.step import Relaxation, SnapshotPhase, TraceResult, TraceState, format_distance

logger = logging.getLogger(__name__)


def dijkstra(graph: Graph, source: str) -> TraceResult:
    """Run to completion and return every snapshot plus the final maps."""
    state = TraceState(graph, source)
    seq = itertools.count()
    pq = [(0, next(seq), source)]          # min-heap: (distance, seq, node_id)

    logger.debug("dijkstra: start from %s on %r", source, graph)
    state.record(SnapshotPhase.INIT, f"Init: dist({source}) = 0; PQ ← {{{source}}}; frontier ← {{{source}}}")

    while pq:
        _, _, u = heapq.heappop(pq)
        if u in state.settled:
            continue

        state.settle(u)
        state.record(SnapshotPhase.EXTRACT, f"Extract-min: settle {u} (dist = {format_distance(state.distance(u))})", current=u)

        for v, w in graph.out_edges(u):
            cand = state.distance(u) + w
            improved = cand < state.distance(v)
            if improved:
                state.improve(v, cand, u)
                heapq.heappush(pq, (cand, next(seq), v))
                description = f"Relax ({u} → {v}, w={w}): dist({v}) ← {format_distance(cand)}"
            elif state.prefer_parent(v, cand, u):
                description = f"Relax ({u} → {v}, w={w}): tie at {format_distance(cand)}, parent({v}) ← {u}"
            else:
                description = f"Relax ({u} → {v}, w={w}): no improvement"
            state.record(SnapshotPhase.RELAX, description, current=u, relaxation=Relaxation(u, v, w, improved))

    logger.debug("dijkstra: settled %d nodes in %d steps", len(state.settled), len(state.steps))
    return state.result("dijkstra")
