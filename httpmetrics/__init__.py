"""httpmetrics public interface.

Stable import surface:
	from httpmetrics import get_monitor, Metric, MetricKind
	from httpmetrics import Monitor, MonitorSettings, BuiltinMetric

Typical startup wiring:

	monitor = get_monitor()
	monitor.set_metric_prefix("shop_")
	monitor.register_builtin_metrics()
	monitor.add_metric(Metric(name="http_requests", kind=MetricKind.COUNTER, labels=["method", "path"]))
"""

from __future__ import annotations

from .builtin import BuiltinMetric, builtin_declarations
from .errors import (
	DuplicateMetricName,
	EmptyMetricName,
	ExporterRegistrationFailed,
	InvalidMetricDeclaration,
	MetricNotRegistered,
	MetricsError,
	MetricTypeMismatch,
	MissingBucketParameter,
	MissingObjectivesParameter,
	UnknownMetricType,
)
from .factory import build_collector
from .monitor import Monitor, get_monitor, reset_monitor
from .settings import MonitorSettings
from .types import Metric, MetricKind

__all__ = [
	"BuiltinMetric",
	"builtin_declarations",
	"build_collector",
	"Metric",
	"MetricKind",
	"Monitor",
	"MonitorSettings",
	"get_monitor",
	"reset_monitor",
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
