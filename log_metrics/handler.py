"""
Logging handler that forwards server statistics lines to a metrics backend.

Attach it to the logger the server writes its periodic CSV statistics to;
every record message becomes one line for the metrics pipeline.
"""

import logging
from typing import Optional

from log_metrics.config import Settings, settings as default_settings
from log_metrics.domain.services.pipeline import MetricsPipeline

logger = logging.getLogger(__name__)

_OWN_LOGGER_PREFIX = "log_metrics"
DEFAULT_CLOSE_TIMEOUT = 5.0


class MetricsLogHandler(logging.Handler):
    """
    Feeds formatted log messages into a MetricsPipeline.

    Records from this package's own loggers are ignored, so pipeline
    warnings never loop back in as data.
    """

    def __init__(
        self,
        pipeline: Optional[MetricsPipeline] = None,
        settings: Optional[Settings] = None,
        level: int = logging.NOTSET,
        close_timeout: float = DEFAULT_CLOSE_TIMEOUT,
    ):
        """
        Initialize the handler.

        Args:
            pipeline: Pipeline to feed; built from settings when omitted
            settings: Settings used to build the pipeline
            level: Minimum record level to forward
            close_timeout: Seconds close() waits for in-flight batches
        """
        super().__init__(level)
        if pipeline is None:
            from log_metrics.dependencies import build_pipeline

            pipeline = build_pipeline(settings or default_settings)
        self.pipeline = pipeline
        self.close_timeout = close_timeout
        self._shut_down = False

    def emit(self, record: logging.LogRecord) -> None:
        if record.name == _OWN_LOGGER_PREFIX or record.name.startswith(_OWN_LOGGER_PREFIX + "."):
            return
        try:
            message = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        self.pipeline.handle_line(message)

    def close(self) -> None:
        """Give in-flight batches a bounded chance to finish, then shut down."""
        if self._shut_down:
            super().close()
            return
        self._shut_down = True
        try:
            submitter = self.pipeline.submitter
            if not submitter.flush(timeout=self.close_timeout):
                logger.warning(f"⚠️ Abandoning {submitter.in_flight} in-flight metric batches")
            submitter.loop.run(submitter.sink.close(), timeout=self.close_timeout)
            submitter.loop.stop()
        except Exception as e:
            logger.error(f"❌ Error while closing metrics handler: {e}")
        finally:
            super().close()


def install_handler(
    settings: Optional[Settings] = None,
    pipeline: Optional[MetricsPipeline] = None,
) -> MetricsLogHandler:
    """Attach a MetricsLogHandler to the configured statistics logger."""
    settings = settings or default_settings
    handler = MetricsLogHandler(pipeline=pipeline, settings=settings)
    logging.getLogger(settings.METRICS_SOURCE_LOGGER).addHandler(handler)
    logger.info(f"✅ Forwarding '{settings.METRICS_SOURCE_LOGGER}' lines to {settings.METRICS_NAMESPACE}")
    return handler
