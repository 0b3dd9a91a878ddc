"""httpmetrics exception hierarchy.

Every failure raised by the registry derives from ``MetricsError`` so callers
can catch the whole family at the registration seam. Validation errors carry
the offending metric name (and kind where relevant) as attributes.
"""
from __future__ import annotations

from typing import Any


class MetricsError(Exception):
    """Base class for all httpmetrics exceptions."""

    def __init__(self, message: str, *, name: str = "") -> None:
        super().__init__(message)
        self.name = name


class DuplicateMetricName(MetricsError):
    """A metric with the same name is already registered on the monitor."""

    def __init__(self, name: str) -> None:
        super().__init__(f"metric '{name}' already exists", name=name)


class EmptyMetricName(MetricsError):
    """Metric declared without a name."""

    def __init__(self) -> None:
        super().__init__("metric name cannot be empty")


class UnknownMetricType(MetricsError):
    """Kind is not one of counter, gauge, histogram or summary."""

    def __init__(self, kind: Any, name: str = "") -> None:
        super().__init__(f"metric type '{_kind_repr(kind)}' does not exist", name=name)
        self.kind = kind


class MissingBucketParameter(MetricsError):
    """Histogram declared without bucket boundaries."""

    def __init__(self, name: str) -> None:
        super().__init__(f"metric '{name}' is histogram type, cannot lose bucket param", name=name)


class MissingObjectivesParameter(MetricsError):
    """Summary declared without quantile objectives."""

    def __init__(self, name: str) -> None:
        super().__init__(f"metric '{name}' is summary type, cannot lose objectives param", name=name)


class InvalidMetricDeclaration(MetricsError):
    """prometheus_client refused the declaration (bad name, reserved label, unsorted buckets)."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"metric '{name}' is not a valid declaration: {reason}", name=name)
        self.reason = reason


class ExporterRegistrationFailed(MetricsError):
    """The prometheus CollectorRegistry rejected the collector (e.g. name clash)."""

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"metric '{name}' rejected by exporter registry: {reason}", name=name)
        self.reason = reason


class MetricNotRegistered(MetricsError):
    """Recording attempted on a zero-value metric returned by a failed lookup."""

    def __init__(self, name: str = "") -> None:
        super().__init__(f"metric '{name}' does not exist", name=name)


class MetricTypeMismatch(MetricsError):
    """Recording operation not supported by the metric's kind."""

    def __init__(self, name: str, kind: Any, operation: str) -> None:
        super().__init__(
            f"metric '{name}' is {_kind_repr(kind)} type, does not support {operation}",
            name=name,
        )
        self.kind = kind
        self.operation = operation


def _kind_repr(kind: Any) -> str:
    label = getattr(kind, "name", None)
    if isinstance(label, str):
        return label.lower()
    return repr(kind)


__all__ = [
    "MetricsError",
    "DuplicateMetricName",
    "EmptyMetricName",
    "UnknownMetricType",
    "MissingBucketParameter",
    "MissingObjectivesParameter",
    "InvalidMetricDeclaration",
    "ExporterRegistrationFailed",
    "MetricNotRegistered",
    "MetricTypeMismatch",
]
