"""Pytest fixtures for httpmetrics.

Each test gets a Monitor bound to its own CollectorRegistry so collectors never
leak into the prometheus default registry, and the process-wide default
monitor is dropped before and after every test.
"""
from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from httpmetrics import Monitor, reset_monitor


@pytest.fixture()
def registry():
    return CollectorRegistry()


@pytest.fixture()
def monitor(registry):
    return Monitor(registry=registry)


@pytest.fixture(autouse=True)
def _fresh_default_monitor(monkeypatch):
    for var in (
        "HTTPMETRICS_METRIC_PATH",
        "HTTPMETRICS_SLOW_TIME",
        "HTTPMETRICS_EXCLUDE_PATHS",
        "HTTPMETRICS_DURATION_BUCKETS",
        "HTTPMETRICS_METRIC_PREFIX",
        "HTTPMETRICS_METRIC_SUFFIX",
        "HTTPMETRICS_LOG_REGISTRATIONS",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_monitor()
    yield
    reset_monitor()
