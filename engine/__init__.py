"""
engine/
-------
Recording & comparison layer.

    from engine import Recorder, compare, run_comparison
"""

from engine.recorder import (
    Recorder,
    RunMetrics,
    ComparisonResult,
    compare,
    run_comparison,
    status_for,
    export_snapshot,
)

__all__ = [
    "Recorder",
    "RunMetrics",
    "ComparisonResult",
    "compare",
    "run_comparison",
    "status_for",
    "export_snapshot",
]
