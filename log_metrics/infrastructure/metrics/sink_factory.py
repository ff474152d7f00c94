"""
Sink factory for choosing where metric batches are sent.

Datadog is used when an API key is configured; otherwise batches are only
logged, so the pipeline still runs on a developer machine.
"""

import logging
from typing import Optional

from log_metrics.config import Settings, settings as default_settings
from log_metrics.infrastructure.metrics.datadog_metrics_sink import DatadogMetricsSink
from log_metrics.infrastructure.metrics.metrics_sink import LoggingMetricsSink, MetricsSink

logger = logging.getLogger(__name__)


class SinkFactory:
    """Creates the metrics sink that matches the configuration."""

    @classmethod
    def create_sink(cls, settings: Optional[Settings] = None) -> MetricsSink:
        """
        Create a new sink instance based on configuration.

        Args:
            settings: Settings to read credentials from; process settings by default

        Returns:
            MetricsSink: The configured sink instance
        """
        settings = settings or default_settings
        if settings.datadog_api_key:
            logger.info("📡 Creating Datadog metrics sink")
            return DatadogMetricsSink(settings=settings)

        logger.info("📝 No Datadog API key configured - metrics will only be logged")
        return LoggingMetricsSink()

