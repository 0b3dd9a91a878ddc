"""Metric registry for the request pipeline.

``Monitor`` holds the pipeline configuration (export path, excluded routes,
slow-request threshold, duration buckets, name prefix/suffix) and the mapping
from metric name to registered ``Metric``. Registration validates the
declaration, builds the prometheus collector, registers it with the exporter
``CollectorRegistry`` and only then stores it, so a failed ``add_metric``
leaves both the monitor and the exporter untouched.

Public API:
  get_monitor()            -> process-wide default Monitor (lazily created)
  reset_monitor()          -> drop the default so the next call rebuilds it
  Monitor(...)             -> independent instance (tests, multi-app processes)

The mapping and naming state are guarded by a lock; populate the monitor at
startup before serving traffic.
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Iterable
from dataclasses import replace

from prometheus_client import REGISTRY, CollectorRegistry

from .builtin import BuiltinMetric, builtin_declarations
from .errors import DuplicateMetricName, EmptyMetricName, ExporterRegistrationFailed, UnknownMetricType
from .factory import build_collector, coerce_kind
from .settings import DEFAULT_DURATION_BUCKETS, DEFAULT_METRIC_PATH, DEFAULT_SLOW_TIME, MonitorSettings
from .types import Metric

logger = logging.getLogger(__name__)


class Monitor:
    def __init__(
        self,
        *,
        metric_path: str = DEFAULT_METRIC_PATH,
        slow_time: int = DEFAULT_SLOW_TIME,
        exclude_paths: Iterable[str] | None = None,
        req_duration: Iterable[float] | None = None,
        metric_prefix: str = "",
        metric_suffix: str = "",
        registry: CollectorRegistry | None = None,
        log_registrations: bool = False,
    ) -> None:
        self.metric_path = metric_path
        self.slow_time = slow_time
        self.exclude_paths: list[str] = list(exclude_paths) if exclude_paths is not None else []
        self.req_duration: list[float] = (
            list(req_duration) if req_duration is not None else list(DEFAULT_DURATION_BUCKETS)
        )
        self.metrics: dict[str, Metric] = {}
        self.metadata: dict[str, str] = {}
        self.registry = registry if registry is not None else REGISTRY
        self._prefix = metric_prefix
        self._suffix = metric_suffix
        self._builtins_registered = False
        self._log_fn = logger.info if log_registrations else logger.debug
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings: MonitorSettings, registry: CollectorRegistry | None = None) -> Monitor:
        return cls(
            metric_path=settings.metric_path,
            slow_time=settings.slow_time,
            exclude_paths=settings.exclude_paths,
            req_duration=settings.req_duration,
            metric_prefix=settings.metric_prefix,
            metric_suffix=settings.metric_suffix,
            registry=registry,
            log_registrations=settings.log_registrations,
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def set_metric_path(self, path: str) -> None:
        """Path the exposition endpoint is served on."""
        self.metric_path = path

    def set_exclude_paths(self, paths: Iterable[str]) -> None:
        """Routes that should not be reported (e.g. /ping, /healthz). Stored verbatim."""
        self.exclude_paths = list(paths)

    def set_slow_time(self, slow_time: int) -> None:
        """Duration above which a request counts towards the slow-request counter."""
        self.slow_time = slow_time

    def set_duration(self, duration: Iterable[float]) -> None:
        """Bucket boundaries for the request-duration histogram. Order is the caller's concern."""
        self.req_duration = list(duration)

    def set_metric_prefix(self, prefix: str) -> None:
        """Prepend ``prefix`` to the built-in metric names.

        Calls compose: prefix "a" then "b" turns base name "x" into "bax".
        """
        with self._lock:
            self._prefix = prefix + self._prefix
            self._warn_if_late("prefix")

    def set_metric_suffix(self, suffix: str) -> None:
        """Append ``suffix`` to the built-in metric names ("a" then "b": "x" -> "xab")."""
        with self._lock:
            self._suffix = self._suffix + suffix
            self._warn_if_late("suffix")

    @property
    def metric_prefix(self) -> str:
        return self._prefix

    @property
    def metric_suffix(self) -> str:
        return self._suffix

    def builtin_name(self, metric: BuiltinMetric | str) -> str:
        base = metric.value if isinstance(metric, BuiltinMetric) else metric
        return f"{self._prefix}{base}{self._suffix}"

    def set_metadata(self, key: str, value: str) -> None:
        with self._lock:
            self.metadata[key] = value

    def get_metadata(self, key: str, default: str = "") -> str:
        return self.metadata.get(key, default)

    def _warn_if_late(self, what: str) -> None:
        if self._builtins_registered:
            logger.warning(
                "metrics.naming.late_change %s=%r builtins stay registered under their previous names",
                what, self._prefix if what == "prefix" else self._suffix,
            )

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def find_metric(self, name: str) -> Metric | None:
        with self._lock:
            return self.metrics.get(name)

    def get_metric(self, name: str) -> Metric:
        """Return the metric registered as ``name`` or a zero-value ``Metric()``.

        The zero value has kind NONE, an empty name and no collector; check
        ``metric.registered`` (or use ``find_metric``) before recording.
        """
        metric = self.find_metric(name)
        if metric is None:
            return Metric()
        return metric

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------
    def add_metric(self, metric: Metric) -> Metric:
        """Validate ``metric``, register its collector and store it by name.

        The monitor keeps its own copy of the declaration and returns it; the
        object passed in is never modified, so one declaration can be added to
        several monitors without their collectors crossing over.

        Raises DuplicateMetricName, EmptyMetricName, UnknownMetricType,
        MissingBucketParameter, MissingObjectivesParameter,
        InvalidMetricDeclaration or ExporterRegistrationFailed; on any of them
        nothing is stored.
        """
        with self._lock:
            if metric.name in self.metrics:
                raise DuplicateMetricName(metric.name)
            if not metric.name:
                raise EmptyMetricName()
            kind = coerce_kind(metric.kind)
            if kind is None:
                raise UnknownMetricType(metric.kind, metric.name)
            collector = build_collector(metric)
            try:
                self.registry.register(collector)
            except ValueError as e:
                raise ExporterRegistrationFailed(metric.name, str(e)) from e
            stored = replace(
                metric,
                kind=kind,
                labels=list(metric.labels),
                buckets=list(metric.buckets),
                objectives=dict(metric.objectives),
            )
            stored._collector = collector
            self.metrics[stored.name] = stored
        self._log_fn("metrics.add.ok name=%s type=%s labels=%s", stored.name, kind.name.lower(), stored.labels)
        return stored

    def register_builtin_metrics(self) -> list[str]:
        """Register the built-in request metrics under the current prefix/suffix.

        Names already present are skipped so the call is safe to repeat, also
        from concurrent callers. Returns the names registered by this call.
        """
        added: list[str] = []
        for decl in builtin_declarations(self):
            try:
                self.add_metric(decl)
            except DuplicateMetricName:
                logger.debug("metrics.builtin.skip name=%s already registered", decl.name)
                continue
            added.append(decl.name)
        with self._lock:
            self._builtins_registered = True
        return added


_DEFAULT_MONITOR: Monitor | None = None
_DEFAULT_LOCK = threading.Lock()


def get_monitor() -> Monitor:
    """Return the process-wide default Monitor, creating it on first use.

    Defaults are read from ``HTTPMETRICS_*`` environment variables; collectors
    register with the prometheus default registry.
    """
    global _DEFAULT_MONITOR  # noqa: PLW0603
    if _DEFAULT_MONITOR is not None:
        return _DEFAULT_MONITOR
    with _DEFAULT_LOCK:
        if _DEFAULT_MONITOR is None:
            _DEFAULT_MONITOR = Monitor.from_settings(MonitorSettings.from_env())
        return _DEFAULT_MONITOR


def reset_monitor() -> None:
    """Forget the default monitor; the next get_monitor() builds a fresh one.

    Collectors it registered stay in the prometheus default registry.
    """
    global _DEFAULT_MONITOR  # noqa: PLW0603
    with _DEFAULT_LOCK:
        _DEFAULT_MONITOR = None


__all__ = ["Monitor", "get_monitor", "reset_monitor"]
