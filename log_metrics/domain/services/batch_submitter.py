"""Batch Submitter - splits data points into batches and dispatches them."""
import concurrent.futures
import functools
import logging
import threading
from typing import List, Optional, Sequence, Set, Tuple

from log_metrics.config import DEFAULT_NAMESPACE, DEFAULT_STORAGE_RESOLUTION
from log_metrics.domain.entities.data_point import DataPoint
from log_metrics.domain.services.pipeline_stats import PipelineStats
from log_metrics.infrastructure.dispatch.event_loop import BackgroundEventLoop
from log_metrics.infrastructure.metrics.metrics_sink import MetricsSink

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 20

Batch = Tuple[DataPoint, ...]


def partition(points: Sequence[DataPoint], size: int = MAX_BATCH_SIZE) -> List[Batch]:
    """Split points into contiguous batches of at most `size`, keeping order."""
    if size < 1:
        raise ValueError("Batch size must be positive")
    return [tuple(points[i:i + size]) for i in range(0, len(points), size)]


class BatchSubmitter:
    """Fire-and-forget submission of data points to a metrics sink.

    - submit() returns as soon as every batch is scheduled
    - Failures are logged as warnings with the originating line and dropped
    - Nothing is retried
    """

    def __init__(
        self,
        sink: MetricsSink,
        loop: BackgroundEventLoop,
        namespace: str = DEFAULT_NAMESPACE,
        storage_resolution: Optional[int] = DEFAULT_STORAGE_RESOLUTION,
        stats: Optional[PipelineStats] = None,
    ):
        self.sink = sink
        self.loop = loop
        self.namespace = namespace
        self.storage_resolution = storage_resolution
        self.stats = stats or PipelineStats()

        self._pending: Set[concurrent.futures.Future] = set()
        self._pending_changed = threading.Condition()

    def submit(
        self, points: Sequence[DataPoint], origin: Optional[str] = None
    ) -> List[concurrent.futures.Future]:
        """Dispatch points in batches of at most MAX_BATCH_SIZE.

        Args:
            points: Data points of one row, in column order
            origin: Raw line the points came from, quoted in failure warnings

        Returns:
            One future per scheduled batch
        """
        futures = []
        for batch in partition(points):
            coro = self.sink.put_metric_data(self.namespace, batch, self.storage_resolution)
            try:
                future = self.loop.submit(coro)
            except RuntimeError as e:
                coro.close()
                self.stats.increment("batches_failed")
                logger.warning(f"⚠️ Unable to schedule metric batch for {origin!r}: {e}")
                continue

            self.stats.increment("batches_dispatched")
            with self._pending_changed:
                self._pending.add(future)
            future.add_done_callback(functools.partial(self._on_done, batch, origin))
            futures.append(future)
        return futures

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait until every in-flight batch has reported its outcome.

        Returns:
            False if batches were still running when the timeout expired
        """
        with self._pending_changed:
            return self._pending_changed.wait_for(lambda: not self._pending, timeout)

    @property
    def in_flight(self) -> int:
        with self._pending_changed:
            return len(self._pending)

    def _on_done(self, batch: Batch, origin: Optional[str], future: concurrent.futures.Future) -> None:
        # Runs on the dispatch loop thread.
        try:
            self._report(batch, origin, future)
        finally:
            with self._pending_changed:
                self._pending.discard(future)
                self._pending_changed.notify_all()

    def _report(self, batch: Batch, origin: Optional[str], future: concurrent.futures.Future) -> None:
        if future.cancelled():
            self.stats.increment("batches_failed")
            logger.warning(f"⚠️ Metric batch abandoned for {origin!r}")
            return

        error = future.exception()
        if error is not None:
            self.stats.increment("batches_failed")
            logger.warning(f"⚠️ Unable to put metric {origin!r}: {error}", exc_info=error)
            return

        self.stats.increment("batches_succeeded")
        self.stats.increment("points_submitted", len(batch))
