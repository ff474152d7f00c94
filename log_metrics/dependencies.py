from __future__ import annotations
from typing import Optional
import logging

from log_metrics.config import Settings, settings as default_settings
from log_metrics.domain.services.batch_submitter import BatchSubmitter
from log_metrics.domain.services.pipeline import MetricsPipeline
from log_metrics.domain.services.pipeline_stats import PipelineStats
from log_metrics.infrastructure.dispatch.event_loop import BackgroundEventLoop
from log_metrics.infrastructure.metrics.metrics_sink import MetricsSink
from log_metrics.infrastructure.metrics.sink_factory import SinkFactory

logger = logging.getLogger(__name__)


def configure_logging(level: Optional[str] = None) -> None:
    """Set up root logging at the configured level."""
    logging.basicConfig(level=(level or default_settings.LOG_LEVEL).upper())


def get_metrics_sink(settings: Optional[Settings] = None) -> MetricsSink:
    return SinkFactory.create_sink(settings or default_settings)


def build_pipeline(
    settings: Optional[Settings] = None,
    sink: Optional[MetricsSink] = None,
    loop: Optional[BackgroundEventLoop] = None,
) -> MetricsPipeline:
    """
    Wire a pipeline from settings.

    Args:
        settings: Namespace, resolution, dimensions and backend credentials
        sink: Sink to submit to; chosen from settings when omitted
        loop: Dispatch loop; a new one starts lazily on first submission

    Returns:
        A pipeline waiting for its header line
    """
    settings = settings or default_settings
    stats = PipelineStats()
    submitter = BatchSubmitter(
        sink=sink or get_metrics_sink(settings),
        loop=loop or BackgroundEventLoop(),
        namespace=settings.METRICS_NAMESPACE,
        storage_resolution=settings.METRICS_STORAGE_RESOLUTION,
        stats=stats,
    )
    dimensions = settings.dimensions
    logger.info(
        f"🔧 Metrics pipeline namespace={settings.METRICS_NAMESPACE} "
        f"resolution={settings.METRICS_STORAGE_RESOLUTION} "
        f"dimensions={[d.name for d in dimensions]}"
    )
    return MetricsPipeline(submitter=submitter, dimensions=dimensions, stats=stats)
