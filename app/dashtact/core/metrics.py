from __future__ import annotations

from dataclasses import dataclass

from prometheus_client import CollectorRegistry, Counter, Histogram, generate_latest
from prometheus_client.exposition import CONTENT_TYPE_LATEST

from app.dashtact.core.config import settings

_HTTP_LABELS = ("route", "method", "status")


@dataclass
class MetricsSnapshot:
    content: bytes
    content_type: str


@dataclass
class _Instruments:
    registry: CollectorRegistry
    http_requests: Counter
    http_latency_ms: Histogram
    permission_denied: Counter
    menu_items_resolved: Histogram
    feature_settings_lookups: Counter


def _build_instruments() -> _Instruments:
    registry = CollectorRegistry()
    return _Instruments(
        registry=registry,
        http_requests=Counter(
            "http_requests_total",
            "HTTP requests by route/method/status.",
            _HTTP_LABELS,
            registry=registry,
        ),
        http_latency_ms=Histogram(
            "http_request_duration_ms",
            "HTTP request latency in milliseconds.",
            _HTTP_LABELS,
            buckets=(5, 10, 25, 50, 100, 250, 500, 1000, 2500, 5000),
            registry=registry,
        ),
        permission_denied=Counter(
            "rbac_denied_total",
            "Requests rejected for a missing permission.",
            ["permission"],
            registry=registry,
        ),
        menu_items_resolved=Histogram(
            "menu_items_resolved",
            "Menu nodes returned to a user after filtering.",
            buckets=(0, 1, 5, 10, 25, 50, 100, 250),
            registry=registry,
        ),
        feature_settings_lookups=Counter(
            "feature_settings_cache_total",
            "Feature settings cache lookups by result.",
            ["result"],
            registry=registry,
        ),
    )


class Metrics:
    """Process-wide Prometheus instruments; every call is a no-op when disabled."""

    def __init__(self, enabled: bool | None = None) -> None:
        self.enabled = bool(settings.METRICS_ENABLED if enabled is None else enabled)
        self._instruments = _build_instruments() if self.enabled else None

    def reset(self) -> None:
        if self.enabled:
            self._instruments = _build_instruments()

    def record_http_request(self, *, route: str, method: str, status_code: int, latency_ms: float) -> None:
        if self._instruments is None:
            return
        labels = (route, method, str(status_code))
        self._instruments.http_requests.labels(*labels).inc()
        self._instruments.http_latency_ms.labels(*labels).observe(latency_ms)

    def increment_rbac_denied(self, permission: str) -> None:
        if self._instruments is not None:
            self._instruments.permission_denied.labels(permission=permission).inc()

    def observe_menu_items_resolved(self, count: int) -> None:
        if self._instruments is not None:
            self._instruments.menu_items_resolved.observe(count)

    def record_feature_settings_cache(self, hit: bool) -> None:
        if self._instruments is not None:
            self._instruments.feature_settings_lookups.labels(result="hit" if hit else "miss").inc()

    def render(self) -> MetricsSnapshot:
        if self._instruments is None:
            return MetricsSnapshot(content=b"metrics_disabled\n", content_type="text/plain")
        return MetricsSnapshot(content=generate_latest(self._instruments.registry), content_type=CONTENT_TYPE_LATEST)


metrics = Metrics()
