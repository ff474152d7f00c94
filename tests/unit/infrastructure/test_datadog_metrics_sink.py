import asyncio
import json
from datetime import datetime, timezone

import httpx
import pytest

from log_metrics.config import Settings
from log_metrics.domain.entities.data_point import DataPoint, Dimension
from log_metrics.domain.entities.unit import Unit
from log_metrics.domain.errors import TransportError
from log_metrics.infrastructure.metrics.datadog_metrics_sink import (
    SERIES_PATH,
    DatadogMetricsSink,
    series_name,
)

TS = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


def make_settings(**overrides):
    values = {
        "DATADOG_API_KEY": "api-key",
        "DATADOG_APP_KEY": "app-key",
        "DATADOG_SITE_URL": "https://api.datadoghq.test/",
    }
    values.update(overrides)
    return Settings(**values)


def make_sink(handler, **overrides):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return DatadogMetricsSink(settings=make_settings(**overrides), client=client)


POINTS = (
    DataPoint(
        metric_name="total heap",
        unit=Unit.BYTES,
        value=1024.0,
        timestamp=TS,
        dimensions=(Dimension(name="hostname", value="ls-1"),),
    ),
    DataPoint(metric_name="sessions", unit=Unit.NONE, value=3.0, timestamp=TS),
)


def test_batch_is_posted_as_series():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(202, json={"errors": []})

    sink = make_sink(handler)
    asyncio.run(sink.put_metric_data("Lightstreamer", POINTS, 60))

    assert len(requests) == 1
    request = requests[0]
    assert request.method == "POST"
    assert str(request.url) == f"https://api.datadoghq.test{SERIES_PATH}"
    assert request.headers["DD-API-KEY"] == "api-key"
    assert request.headers["DD-APPLICATION-KEY"] == "app-key"

    series = json.loads(request.content)["series"]
    assert series[0] == {
        "metric": "Lightstreamer.total_heap",
        "type": 3,
        "points": [{"timestamp": 1700000000, "value": 1024.0}],
        "tags": ["hostname:ls-1"],
        "unit": "byte",
        "interval": 60,
    }
    assert "unit" not in series[1]
    assert series[1]["tags"] == []


def test_resolution_is_optional():
    bodies = []

    def handler(request):
        bodies.append(json.loads(request.content))
        return httpx.Response(202)

    asyncio.run(make_sink(handler).put_metric_data("ns", POINTS[:1], None))

    assert "interval" not in bodies[0]["series"][0]


def test_error_status_raises_transport_error():
    sink = make_sink(lambda request: httpx.Response(403, text="Forbidden"))

    with pytest.raises(TransportError) as exc_info:
        asyncio.run(sink.put_metric_data("ns", POINTS))

    assert exc_info.value.status_code == 403
    assert "403" in str(exc_info.value)


def test_connection_failure_raises_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(TransportError):
        asyncio.run(make_sink(handler).put_metric_data("ns", POINTS))


def test_close_closes_client():
    sink = make_sink(lambda request: httpx.Response(202))
    asyncio.run(sink.close())
    assert sink.client.is_closed


def test_series_name_replaces_spaces():
    assert series_name("Lightstreamer", "items subscribed") == "Lightstreamer.items_subscribed"
