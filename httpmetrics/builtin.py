"""Built-in request pipeline metrics.

Base names for the metrics request middleware records on every request. The
exported name is the base name wrapped in the monitor's prefix and suffix, see
``Monitor.builtin_name``.
"""
from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from .types import Metric, MetricKind

if TYPE_CHECKING:  # pragma: no cover
    from .monitor import Monitor


class BuiltinMetric(str, Enum):
    request_total = "gin_request_total"
    request_uv_total = "gin_request_uv_total"
    uri_request_total = "gin_uri_request_total"
    request_body = "gin_request_body_total"
    response_body = "gin_response_body_total"
    request_duration = "gin_request_duration"
    slow_request = "gin_slow_request_total"


# Label bundle shared by per-route counters
ROUTE_LABELS = ("uri", "method", "code")


def builtin_declarations(monitor: Monitor) -> list[Metric]:
    """Declarations for every built-in metric, named and bucketed per ``monitor``."""
    name = monitor.builtin_name
    return [
        Metric(
            name=name(BuiltinMetric.request_total),
            kind=MetricKind.COUNTER,
            description="all the server received request num.",
        ),
        Metric(
            name=name(BuiltinMetric.request_uv_total),
            kind=MetricKind.COUNTER,
            description="all the server received ip num.",
        ),
        Metric(
            name=name(BuiltinMetric.uri_request_total),
            kind=MetricKind.COUNTER,
            description="all the server received request num with every uri.",
            labels=list(ROUTE_LABELS),
        ),
        Metric(
            name=name(BuiltinMetric.request_body),
            kind=MetricKind.COUNTER,
            description="the server received request body size, unit byte",
        ),
        Metric(
            name=name(BuiltinMetric.response_body),
            kind=MetricKind.COUNTER,
            description="the server send response body size, unit byte",
        ),
        Metric(
            name=name(BuiltinMetric.request_duration),
            kind=MetricKind.HISTOGRAM,
            description="the time server took to handle the request.",
            labels=["uri"],
            buckets=list(monitor.req_duration),
        ),
        Metric(
            name=name(BuiltinMetric.slow_request),
            kind=MetricKind.COUNTER,
            description=f"the server handled slow requests counter, t={monitor.slow_time}.",
            labels=list(ROUTE_LABELS),
        ),
    ]


__all__ = ["BuiltinMetric", "ROUTE_LABELS", "builtin_declarations"]
