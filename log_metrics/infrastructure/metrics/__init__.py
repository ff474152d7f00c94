"""
Metric sinks for the log-metrics pipeline.

A sink receives batches of data points and submits them to a backend.
"""

from .datadog_metrics_sink import DatadogMetricsSink
from .metrics_sink import LoggingMetricsSink, MetricsSink
from .sink_factory import SinkFactory

__all__ = ["MetricsSink", "LoggingMetricsSink", "DatadogMetricsSink", "SinkFactory"]
