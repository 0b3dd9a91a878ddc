"""Monitor settings hydrated from the environment.

Single-pass read of ``HTTPMETRICS_*`` variables into a plain data container.
Malformed numeric values fall back to the documented defaults rather than
failing import of the embedding application.
"""
from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field

__all__ = [
    "MonitorSettings",
    "DEFAULT_METRIC_PATH",
    "DEFAULT_SLOW_TIME",
    "DEFAULT_DURATION_BUCKETS",
    "TRUTHY_SET",
]

logger = logging.getLogger(__name__)

DEFAULT_METRIC_PATH = "/debug/metrics"
DEFAULT_SLOW_TIME = 5
DEFAULT_DURATION_BUCKETS: tuple[float, ...] = (0.1, 0.3, 1.2, 5, 10)

TRUTHY_SET: set[str] = {"1", "true", "yes", "on"}


def _split_csv(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


@dataclass(slots=True)
class MonitorSettings:
    metric_path: str = DEFAULT_METRIC_PATH
    slow_time: int = DEFAULT_SLOW_TIME
    exclude_paths: list[str] = field(default_factory=list)
    req_duration: list[float] = field(default_factory=lambda: list(DEFAULT_DURATION_BUCKETS))
    metric_prefix: str = ""
    metric_suffix: str = ""
    log_registrations: bool = False

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> MonitorSettings:
        e = env if env is not None else os.environ

        def _bool(name: str, default: bool = False) -> bool:
            return e.get(name, str(int(default))).strip().lower() in TRUTHY_SET

        def _int(name: str, default: int) -> int:
            raw = e.get(name)
            if raw is None or not raw.strip():
                return default
            try:
                return int(raw)
            except ValueError:
                logger.warning("settings.invalid_int var=%s value=%r default=%s", name, raw, default)
                return default

        def _floats(name: str, default: tuple[float, ...]) -> list[float]:
            raw = e.get(name, "")
            if not raw.strip():
                return list(default)
            try:
                return [float(p) for p in _split_csv(raw)]
            except ValueError:
                logger.warning("settings.invalid_buckets var=%s value=%r", name, raw)
                return list(default)

        return cls(
            metric_path=e.get("HTTPMETRICS_METRIC_PATH", "").strip() or DEFAULT_METRIC_PATH,
            slow_time=_int("HTTPMETRICS_SLOW_TIME", DEFAULT_SLOW_TIME),
            exclude_paths=_split_csv(e.get("HTTPMETRICS_EXCLUDE_PATHS", "")),
            req_duration=_floats("HTTPMETRICS_DURATION_BUCKETS", DEFAULT_DURATION_BUCKETS),
            metric_prefix=e.get("HTTPMETRICS_METRIC_PREFIX", ""),
            metric_suffix=e.get("HTTPMETRICS_METRIC_SUFFIX", ""),
            log_registrations=_bool("HTTPMETRICS_LOG_REGISTRATIONS"),
        )
