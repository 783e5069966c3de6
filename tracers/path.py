"""
path.py — Path Reconstructor
============================
Rebuilds the source → target path implied by a predecessor map.

Mid-run predecessor maps can be incomplete. The walk
stops at the source, at a node with no parent, or at the first node it
has already visited (cycle guard). In every case the part of the path found
so far is returned. Nothing here raises.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Mapping, Optional, Tuple

from tracers.step import INF, Snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PathView:
    """
    Attributes:
        pairs    : {(parent, child)} edges on the path.
        nodes    : Every node on the path.
        ordered  : The same nodes, source-most first.
        complete : True when the walk reached the source.
    """

    pairs:    FrozenSet[Tuple[str, str]] = frozenset()
    nodes:    FrozenSet[str]             = frozenset()
    ordered:  Tuple[str, ...]            = ()
    complete: bool                       = False

    @property
    def empty(self) -> bool:
        return not self.nodes


EMPTY_PATH = PathView()


def reconstruct_path(
    pred: Mapping[str, str],
    target: str,
    source: str,
    dist: Optional[Mapping[str, float]] = None,
) -> PathView:
    """
    Walk parent pointers back from `target`.

    When `dist` is given and the target is still at ∞, no path exists at
    that point of the run and EMPTY_PATH is returned.
    """
    if dist is not None and dist.get(target, INF) == INF:
        return EMPTY_PATH
    if target == source:
        return PathView(nodes=frozenset([source]), ordered=(source,), complete=True)

    walk = [target]
    seen = {target}
    pairs = []
    v = target
    while v != source:
        u = pred.get(v)
        if u is None:
            break
        if u in seen:
            logger.debug("Predecessor cycle at %s while walking back from %s", u, target)
            break
        pairs.append((u, v))
        seen.add(u)
        walk.append(u)
        v = u

    if not pairs:
        return EMPTY_PATH

    walk.reverse()
    return PathView(
        pairs=frozenset(pairs),
        nodes=frozenset(walk),
        ordered=tuple(walk),
        complete=v == source,
    )


def path_at(snapshot: Snapshot, target: str, source: str) -> PathView:
    """Path implied by one snapshot's predecessor map."""
    return reconstruct_path(snapshot.pred, target, source, dist=snapshot.dist)
