"""Metrics sinks - where batches of data points end up."""
import logging
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from log_metrics.domain.entities.data_point import DataPoint

logger = logging.getLogger(__name__)


class MetricsSink(ABC):
    """Transport for one batch of data points.

    Implementations raise on failure; the batch submitter turns that into a
    warning and drops the batch.
    """

    @abstractmethod
    async def put_metric_data(
        self,
        namespace: str,
        data_points: Sequence[DataPoint],
        storage_resolution: Optional[int] = None,
    ) -> None:
        """Submit a batch of at most 20 data points."""

    async def close(self) -> None:
        """Release transport resources."""


class LoggingMetricsSink(MetricsSink):
    """Writes batches to the log instead of a backend.

    Used when no backend credentials are configured.
    """

    def __init__(self, level: int = logging.INFO):
        self.level = level

    async def put_metric_data(
        self,
        namespace: str,
        data_points: Sequence[DataPoint],
        storage_resolution: Optional[int] = None,
    ) -> None:
        logger.log(
            self.level,
            f"📊 {namespace}: {len(data_points)} data points (resolution={storage_resolution})",
        )
        for point in data_points:
            logger.debug(
                f"  {point.metric_name}={point.value} {point.unit.value} "
                f"@ {point.timestamp.isoformat()}"
            )
