"""
Prometheus metrics: HTTP requests, registry mutations by outcome, snapshot
save failures and the number of registered wallets.

All collectors live on a dedicated CollectorRegistry served at /metrics.
"""

from __future__ import annotations

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

METRICS_REGISTRY = CollectorRegistry()

http_requests_total = Counter(
    "turboauth_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=METRICS_REGISTRY,
)

http_request_duration_seconds = Histogram(
    "turboauth_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0],
    registry=METRICS_REGISTRY,
)

# outcome: success | rejected | unauthorized
registry_mutations_total = Counter(
    "turboauth_registry_mutations_total",
    "Registry mutations by operation and outcome",
    ["operation", "outcome"],
    registry=METRICS_REGISTRY,
)

registry_save_failures_total = Counter(
    "turboauth_registry_save_failures_total",
    "Snapshot saves that failed after a committed mutation",
    ["operation"],
    registry=METRICS_REGISTRY,
)

registered_wallets = Gauge(
    "turboauth_registered_wallets",
    "Wallets present in the registry",
    registry=METRICS_REGISTRY,
)


def observe_request(method: str, endpoint: str, status: int, duration: float) -> None:
    http_requests_total.labels(method=method, endpoint=endpoint, status=str(status)).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


def record_mutation(operation: str, outcome: str) -> None:
    registry_mutations_total.labels(operation=operation, outcome=outcome).inc()


def record_save_failure(operation: str) -> None:
    registry_save_failures_total.labels(operation=operation).inc()


def set_registered_wallets(count: int) -> None:
    registered_wallets.set(count)


def render_latest() -> bytes:
    """All metrics in Prometheus text exposition format."""
    return generate_latest(METRICS_REGISTRY)
