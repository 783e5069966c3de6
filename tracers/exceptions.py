"""
Exceptions raised by the tracers.

Unreachable nodes and broken predecessor chains are ordinary results, not
errors. Only a violated engine invariant surfaces as an exception.
"""


class TraceError(Exception):
    """
    Base class for tracer faults.

    Raised when a run cannot produce a well-defined trace because the
    engine itself misbehaved, never because of the shape of the input graph.
    """


class StalledRoundError(TraceError):
    """
    Raised when a bounded-tracer round makes no progress.

    Every round must either settle a new node or move the (level, bound)
    pair. A round that does neither would repeat forever, so the run is
    aborted with the position at which it stalled.

    Attributes:
        level       : Level the run was at.
        bound       : Bound B in force during the round.
        round_index : 1-based index of the stalled round.
    """

    def __init__(self, level: int, bound: float, round_index: int):
        self.level = level
        self.bound = bound
        self.round_index = round_index
        super().__init__(
            f"bounded tracer made no progress in round {round_index} "
            f"(level={level}, B={bound})"
        )

    def __str__(self) -> str:
        return f"Stalled Round: {super().__str__()}"
