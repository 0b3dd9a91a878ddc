"""Metric declaration model.

``Metric`` describes one custom metric (name, kind, help text, label names and
the kind-specific parameters). The prometheus collector handle is attached by
``Monitor.add_metric`` once registration succeeds; until then the declaration
is inert. The recording helpers mirror what request middleware needs:
increment, add, set a gauge and observe a distribution sample.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from .errors import MetricNotRegistered, MetricTypeMismatch


class MetricKind(IntEnum):
    NONE = 0
    COUNTER = 1
    GAUGE = 2
    HISTOGRAM = 3
    SUMMARY = 4


CONCRETE_KINDS = (MetricKind.COUNTER, MetricKind.GAUGE, MetricKind.HISTOGRAM, MetricKind.SUMMARY)


@dataclass
class Metric:
    name: str = ""
    kind: Any = MetricKind.NONE  # MetricKind; arbitrary values are rejected at registration
    description: str = ""
    labels: list[str] = field(default_factory=list)
    buckets: list[float] = field(default_factory=list)       # histogram only
    objectives: dict[float, float] = field(default_factory=dict)  # summary only: quantile -> tolerated error
    _collector: Any = field(default=None, init=False, repr=False, compare=False)

    @property
    def collector(self) -> Any:
        """Underlying prometheus collector, or None while unregistered."""
        return self._collector

    @property
    def registered(self) -> bool:
        return self._collector is not None

    def set_gauge_value(self, label_values: Sequence[str], value: float) -> None:
        self._child("set_gauge_value", label_values, (MetricKind.GAUGE,)).set(value)

    def inc(self, label_values: Sequence[str] = ()) -> None:
        self._child("inc", label_values, (MetricKind.COUNTER, MetricKind.GAUGE)).inc()

    def add(self, label_values: Sequence[str], value: float) -> None:
        self._child("add", label_values, (MetricKind.COUNTER, MetricKind.GAUGE)).inc(value)

    def observe(self, label_values: Sequence[str], value: float) -> None:
        self._child("observe", label_values, (MetricKind.HISTOGRAM, MetricKind.SUMMARY)).observe(value)

    def _child(self, operation: str, label_values: Sequence[str], allowed: tuple[MetricKind, ...]) -> Any:
        if self.kind == MetricKind.NONE or self._collector is None:
            raise MetricNotRegistered(self.name)
        if self.kind not in allowed:
            raise MetricTypeMismatch(self.name, self.kind, operation)
        # Unlabelled collectors refuse .labels(); record on the parent directly
        if not self.labels and not label_values:
            return self._collector
        return self._collector.labels(*[str(v) for v in label_values])


__all__ = ["MetricKind", "Metric", "CONCRETE_KINDS"]
