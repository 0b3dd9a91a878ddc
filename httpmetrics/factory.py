"""Collector construction for metric declarations.

``build_collector`` is the single dispatch point from ``MetricKind`` to the
matching prometheus_client vector. Collectors are created with
``registry=None`` so construction never touches exporter state; registering
with a ``CollectorRegistry`` is the monitor's job. Adding a kind means adding
a branch here, otherwise it falls through to ``UnknownMetricType``.
"""
from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from prometheus_client import Counter, Gauge, Histogram, Summary

from .errors import (
    InvalidMetricDeclaration,
    MissingBucketParameter,
    MissingObjectivesParameter,
    UnknownMetricType,
)
from .types import Metric, MetricKind


def _normalize_labels(labels: Iterable[str] | None) -> Sequence[str]:
    if not labels:
        return ()
    return tuple(str(l) for l in labels)


def coerce_kind(kind: Any) -> MetricKind | None:
    """Return the concrete MetricKind for ``kind`` or None when it is not one.

    Only MetricKind members and plain ints qualify; bools and floats do not.
    """
    if isinstance(kind, bool) or not isinstance(kind, int):
        return None
    try:
        resolved = MetricKind(kind)
    except ValueError:
        return None
    if resolved == MetricKind.NONE:
        return None
    return resolved


def build_collector(metric: Metric) -> Counter | Gauge | Histogram | Summary:
    kind = coerce_kind(metric.kind)
    labels = _normalize_labels(metric.labels)
    if kind is None:
        raise UnknownMetricType(metric.kind, metric.name)
    if kind == MetricKind.HISTOGRAM and not metric.buckets:
        raise MissingBucketParameter(metric.name)
    if kind == MetricKind.SUMMARY and not metric.objectives:
        raise MissingObjectivesParameter(metric.name)
    # Bad metric/label names, reserved labels (le, quantile) and unsorted buckets
    try:
        return _construct(kind, metric, labels)
    except ValueError as e:
        raise InvalidMetricDeclaration(metric.name, str(e)) from e


def _construct(kind: MetricKind, metric: Metric, labels: Sequence[str]) -> Counter | Gauge | Histogram | Summary:
    if kind == MetricKind.COUNTER:
        # Exported as <name>_total; a trailing _total on the declared name is not doubled
        return Counter(metric.name, metric.description, labels, registry=None)
    if kind == MetricKind.GAUGE:
        return Gauge(metric.name, metric.description, labels, registry=None)
    if kind == MetricKind.HISTOGRAM:
        return Histogram(metric.name, metric.description, labels, buckets=list(metric.buckets), registry=None)
    if kind == MetricKind.SUMMARY:
        # prometheus_client summaries export count/sum only; objectives stay on the declaration
        return Summary(metric.name, metric.description, labels, registry=None)
    raise UnknownMetricType(metric.kind, metric.name)


__all__ = ["build_collector", "coerce_kind"]
