"""Counters describing what the pipeline did with the lines it received."""
import threading
from typing import Dict

STAT_NAMES = (
    "lines_received",
    "headers_parsed",
    "duplicate_headers",
    "rows_translated",
    "rows_dropped",
    "batches_dispatched",
    "batches_succeeded",
    "batches_failed",
    "points_submitted",
)


class PipelineStats:
    """Thread-safe counters.

    Incremented from the ingesting thread and from dispatch callbacks
    running on the background loop.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._counts: Dict[str, int] = dict.fromkeys(STAT_NAMES, 0)

    def increment(self, name: str, amount: int = 1) -> None:
        if name not in self._counts:
            raise KeyError(f"Unknown pipeline stat: {name}")
        with self._lock:
            self._counts[name] += amount

    def snapshot(self) -> Dict[str, int]:
        with self._lock:
            return dict(self._counts)

    def __getitem__(self, name: str) -> int:
        with self._lock:
            return self._counts[name]
