"""Datadog Metrics Sink - submits batches to the Datadog series API."""
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from log_metrics.config import Settings
from log_metrics.domain.entities.data_point import DataPoint
from log_metrics.domain.entities.unit import Unit
from log_metrics.domain.errors import TransportError
from log_metrics.infrastructure.datadog.base_client import BaseDatadogClient
from log_metrics.infrastructure.metrics.metrics_sink import MetricsSink

logger = logging.getLogger(__name__)

SERIES_PATH = "/api/v2/series"
GAUGE = 3

# Units without a Datadog counterpart are sent unitless.
_DATADOG_UNITS = {
    Unit.BYTES: "byte",
    Unit.MILLISECONDS: "millisecond",
    Unit.KILOBITS_PER_SECOND: "kilobit",
}


class DatadogMetricsSink(BaseDatadogClient, MetricsSink):
    """Sends each batch as one series submission."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(settings=settings, client=client)
        if not self._is_api_available():
            logger.warning("⚠️ Datadog API key not configured - submissions will be rejected")

    async def put_metric_data(
        self,
        namespace: str,
        data_points: Sequence[DataPoint],
        storage_resolution: Optional[int] = None,
    ) -> None:
        payload = self._build_payload(namespace, data_points, storage_resolution)

        try:
            response = await self._make_request(
                "POST",
                self._url(SERIES_PATH),
                headers=self._get_headers(),
                json=payload,
            )
        except httpx.HTTPError as e:
            raise TransportError(f"Datadog request failed: {e}") from e

        if not response.is_success:
            raise TransportError(
                f"Datadog API error {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )
        logger.debug(f"✅ Submitted {len(data_points)} data points to Datadog")

    def _build_payload(
        self,
        namespace: str,
        data_points: Sequence[DataPoint],
        storage_resolution: Optional[int],
    ) -> Dict[str, Any]:
        """Build the series API request body."""
        return {
            "series": [
                self._build_series(namespace, point, storage_resolution)
                for point in data_points
            ]
        }

    @staticmethod
    def _build_series(
        namespace: str, point: DataPoint, storage_resolution: Optional[int]
    ) -> Dict[str, Any]:
        series: Dict[str, Any] = {
            "metric": series_name(namespace, point.metric_name),
            "type": GAUGE,
            "points": [
                {"timestamp": int(point.timestamp.timestamp()), "value": point.value}
            ],
            "tags": series_tags(point),
        }
        unit = _DATADOG_UNITS.get(point.unit)
        if unit:
            series["unit"] = unit
        if storage_resolution:
            series["interval"] = storage_resolution
        return series


def series_name(namespace: str, metric_name: str) -> str:
    """Datadog metric names cannot contain spaces."""
    return f"{namespace}.{metric_name.replace(' ', '_')}"


def series_tags(point: DataPoint) -> List[str]:
    return [f"{dimension.name}:{dimension.value}" for dimension in point.dimensions]
