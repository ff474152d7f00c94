"""Shared fixtures for the metrics pipeline tests."""

import threading
from typing import List, Optional, Sequence, Tuple

import pytest

from log_metrics.domain.entities.data_point import DataPoint, Dimension
from log_metrics.domain.errors import TransportError
from log_metrics.domain.services.batch_submitter import BatchSubmitter
from log_metrics.domain.services.pipeline import MetricsPipeline
from log_metrics.infrastructure.dispatch.event_loop import BackgroundEventLoop
from log_metrics.infrastructure.metrics.metrics_sink import MetricsSink

TS_MS = 1700000000000
HOST = (Dimension(name="hostname", value="test-host"),)


class RecordingSink(MetricsSink):
    """Captures every batch it receives."""

    def __init__(self):
        self.calls: List[Tuple[str, Tuple[DataPoint, ...], Optional[int]]] = []
        self.closed = False
        self._lock = threading.Lock()

    async def put_metric_data(
        self,
        namespace: str,
        data_points: Sequence[DataPoint],
        storage_resolution: Optional[int] = None,
    ) -> None:
        with self._lock:
            self.calls.append((namespace, tuple(data_points), storage_resolution))

    async def close(self) -> None:
        self.closed = True

    @property
    def points(self) -> List[DataPoint]:
        return [point for _, batch, _ in self.calls for point in batch]


class FailingSink(MetricsSink):
    """Rejects every batch."""

    async def put_metric_data(self, namespace, data_points, storage_resolution=None):
        raise TransportError("backend unavailable", status_code=503)


@pytest.fixture
def dispatch_loop():
    loop = BackgroundEventLoop(thread_name="test-dispatch")
    loop.start()
    yield loop
    loop.stop()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def submitter(sink, dispatch_loop) -> BatchSubmitter:
    return BatchSubmitter(sink=sink, loop=dispatch_loop, namespace="Lightstreamer", storage_resolution=60)


@pytest.fixture
def pipeline(submitter) -> MetricsPipeline:
    return MetricsPipeline(submitter=submitter, dimensions=HOST)
