from log_metrics.config import Settings
from log_metrics.dependencies import build_pipeline, get_metrics_sink
from log_metrics.domain.entities.data_point import Dimension
from log_metrics.domain.services.pipeline import PipelineState
from log_metrics.infrastructure.metrics import DatadogMetricsSink, LoggingMetricsSink, SinkFactory


def test_logging_sink_without_api_key():
    settings = Settings(_env_file=None, DATADOG_API_KEY=None)

    assert isinstance(get_metrics_sink(settings), LoggingMetricsSink)


def test_datadog_sink_with_api_key():
    settings = Settings(_env_file=None, DATADOG_API_KEY="key")

    assert isinstance(get_metrics_sink(settings), DatadogMetricsSink)


def test_build_pipeline_uses_settings():
    settings = Settings(
        _env_file=None,
        DATADOG_API_KEY=None,
        METRICS_NAMESPACE="Edge",
        METRICS_STORAGE_RESOLUTION=None,
        METRICS_DIMENSIONS="hostname=a\nrole=b",
    )

    pipeline = build_pipeline(settings)

    assert pipeline.state is PipelineState.AWAITING_SCHEMA
    assert pipeline.submitter.namespace == "Edge"
    assert pipeline.submitter.storage_resolution is None
    assert pipeline.dimensions == (
        Dimension(name="hostname", value="a"),
        Dimension(name="role", value="b"),
    )
    assert pipeline.stats is pipeline.submitter.stats
    assert not pipeline.submitter.loop.is_running
