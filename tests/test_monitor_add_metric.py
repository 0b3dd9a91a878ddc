#!/usr/bin/env python3
"""Registration behaviour of Monitor.add_metric and lookup."""
from __future__ import annotations

import pytest
from prometheus_client import Counter

from httpmetrics import Metric, MetricKind, Monitor
from httpmetrics.errors import (
    DuplicateMetricName,
    EmptyMetricName,
    ExporterRegistrationFailed,
    InvalidMetricDeclaration,
    MetricsError,
    MissingBucketParameter,
    MissingObjectivesParameter,
    UnknownMetricType,
)


@pytest.mark.parametrize("kind", [MetricKind.COUNTER, MetricKind.GAUGE])
def test_add_then_get_roundtrip(monitor, kind):
    monitor.add_metric(Metric(name="jobs_in_flight", kind=kind, description="jobs", labels=["queue"]))
    got = monitor.get_metric("jobs_in_flight")
    assert got.name == "jobs_in_flight"
    assert got.kind is kind
    assert got.registered


def test_duplicate_name_rejected_and_original_kept(monitor):
    first = monitor.add_metric(Metric(name="orders", kind=MetricKind.COUNTER))
    with pytest.raises(DuplicateMetricName):
        monitor.add_metric(Metric(name="orders", kind=MetricKind.GAUGE))
    assert monitor.get_metric("orders") is first
    assert monitor.get_metric("orders").kind is MetricKind.COUNTER


def test_duplicate_checked_before_kind(monitor):
    monitor.add_metric(Metric(name="orders", kind=MetricKind.COUNTER))
    # Name clash wins even though the kind is invalid too
    with pytest.raises(DuplicateMetricName):
        monitor.add_metric(Metric(name="orders", kind=MetricKind.NONE))


def test_empty_name_rejected(monitor):
    with pytest.raises(EmptyMetricName):
        monitor.add_metric(Metric(name="", kind=MetricKind.COUNTER))
    assert monitor.metrics == {}


def test_empty_name_checked_before_kind(monitor):
    with pytest.raises(EmptyMetricName):
        monitor.add_metric(Metric(name="", kind=99))


@pytest.mark.parametrize("kind", [MetricKind.NONE, 5, -3])
def test_unknown_kind_rejected(monitor, kind):
    with pytest.raises(UnknownMetricType) as ei:
        monitor.add_metric(Metric(name="mystery", kind=kind))
    assert ei.value.kind == kind
    assert monitor.find_metric("mystery") is None


def test_histogram_without_buckets_not_added(monitor, registry):
    with pytest.raises(MissingBucketParameter):
        monitor.add_metric(Metric(name="upload_seconds", kind=MetricKind.HISTOGRAM, buckets=[]))
    assert monitor.find_metric("upload_seconds") is None
    assert registry.get_sample_value("upload_seconds_count") is None


def test_summary_without_objectives_not_added(monitor):
    metric = Metric(name="render_seconds", kind=MetricKind.SUMMARY)
    with pytest.raises(MissingObjectivesParameter):
        monitor.add_metric(metric)
    assert monitor.find_metric("render_seconds") is None
    assert metric.collector is None


def test_summary_with_objectives_registered(monitor, registry):
    monitor.add_metric(Metric(name="render_seconds", kind=MetricKind.SUMMARY, objectives={0.5: 0.05}))
    assert registry.get_sample_value("render_seconds_count") == 0.0


def test_get_metric_unknown_returns_zero_value(monitor):
    got = monitor.get_metric("never_added")
    assert got.name == ""
    assert got.kind is MetricKind.NONE
    assert got.collector is None
    assert not got.registered


def test_find_metric_distinguishes_absent(monitor):
    assert monitor.find_metric("never_added") is None
    monitor.add_metric(Metric(name="present", kind=MetricKind.GAUGE))
    assert monitor.find_metric("present") is not None


def test_int_kind_normalized_to_enum(monitor):
    metric = monitor.add_metric(Metric(name="plain_int_kind", kind=2))
    assert metric.kind is MetricKind.GAUGE


def test_collector_registered_with_exporter(monitor, registry):
    monitor.add_metric(Metric(name="logins", kind=MetricKind.COUNTER, labels=["method"]))
    monitor.get_metric("logins").inc(["password"])
    assert registry.get_sample_value("logins_total", {"method": "password"}) == 1.0


def test_exporter_collision_raises_and_leaves_monitor_untouched(monitor, registry):
    # Registered straight on the exporter, bypassing the monitor's own bookkeeping
    Counter("payments", "external", registry=registry)
    metric = Metric(name="payments", kind=MetricKind.COUNTER)
    with pytest.raises(ExporterRegistrationFailed) as ei:
        monitor.add_metric(metric)
    assert isinstance(ei.value.__cause__, ValueError)
    assert monitor.find_metric("payments") is None
    assert metric.collector is None


def test_independent_monitors_do_not_share_state(registry):
    from prometheus_client import CollectorRegistry

    a = Monitor(registry=registry)
    b = Monitor(registry=CollectorRegistry())
    a.add_metric(Metric(name="shared_name", kind=MetricKind.COUNTER))
    b.add_metric(Metric(name="shared_name", kind=MetricKind.COUNTER))
    assert a.get_metric("shared_name") is not b.get_metric("shared_name")


def test_http_requests_scenario(monitor):
    monitor.add_metric(Metric(name="http_requests", kind=MetricKind.COUNTER, labels=["method", "path"]))
    with pytest.raises(DuplicateMetricName):
        monitor.add_metric(Metric(name="http_requests", kind=MetricKind.COUNTER, labels=["method", "path"]))
    assert monitor.get_metric("http_requests").kind is MetricKind.COUNTER


def test_req_latency_scenario(monitor, registry):
    with pytest.raises(MissingBucketParameter):
        monitor.add_metric(Metric(name="req_latency", kind=MetricKind.HISTOGRAM, buckets=[]))
    monitor.add_metric(Metric(name="req_latency", kind=MetricKind.HISTOGRAM, buckets=[0.1, 0.5, 1]))
    assert monitor.get_metric("req_latency").kind is MetricKind.HISTOGRAM
    assert registry.get_sample_value("req_latency_bucket", {"le": "0.5"}) == 0.0


@pytest.mark.parametrize(
    "metric",
    [
        Metric(name="http-requests", kind=MetricKind.COUNTER),
        Metric(name="bad_label", kind=MetricKind.GAUGE, labels=["not-a-label"]),
        Metric(name="reserved_le", kind=MetricKind.HISTOGRAM, labels=["le"], buckets=[1, 2]),
        Metric(name="reserved_quantile", kind=MetricKind.SUMMARY, labels=["quantile"], objectives={0.5: 0.05}),
        Metric(name="unsorted", kind=MetricKind.HISTOGRAM, buckets=[10, 1, 0.5]),
    ],
)
def test_invalid_declaration_raised_as_metrics_error(monitor, registry, metric):
    with pytest.raises(InvalidMetricDeclaration) as ei:
        monitor.add_metric(metric)
    assert isinstance(ei.value, MetricsError)
    assert isinstance(ei.value.__cause__, ValueError)
    assert ei.value.name == metric.name
    assert monitor.metrics == {}


def test_same_declaration_in_two_monitors_keeps_collectors_apart(registry):
    from prometheus_client import CollectorRegistry

    other_registry = CollectorRegistry()
    a = Monitor(registry=registry)
    b = Monitor(registry=other_registry)
    decl = Metric(name="shared", kind=MetricKind.COUNTER)
    a.add_metric(decl)
    first = a.get_metric("shared").collector
    b.add_metric(decl)
    assert a.get_metric("shared").collector is first
    assert decl.collector is None
    a.get_metric("shared").inc()
    assert registry.get_sample_value("shared_total") == 1.0
    assert other_registry.get_sample_value("shared_total") == 0.0


def test_stored_metric_does_not_alias_caller_lists(monitor):
    labels = ["method"]
    decl = Metric(name="aliased", kind=MetricKind.COUNTER, labels=labels)
    stored = monitor.add_metric(decl)
    labels.append("path")
    assert stored.labels == ["method"]


@pytest.mark.parametrize("kind", [True, False, 1.0, 2.5])
def test_bool_and_float_kinds_rejected(monitor, kind):
    with pytest.raises(UnknownMetricType):
        monitor.add_metric(Metric(name="odd_kind", kind=kind))


def test_concurrent_add_metric_registers_each_name_once(monitor, registry):
    import threading

    barrier = threading.Barrier(8)
    outcomes: list[str] = []
    lock = threading.Lock()

    def _add():
        barrier.wait()
        try:
            monitor.add_metric(Metric(name="racy_total", kind=MetricKind.COUNTER))
            result = "ok"
        except DuplicateMetricName:
            result = "dup"
        with lock:
            outcomes.append(result)

    threads = [threading.Thread(target=_add) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sorted(outcomes) == ["dup"] * 7 + ["ok"]
    assert registry.get_sample_value("racy_total") == 0.0
