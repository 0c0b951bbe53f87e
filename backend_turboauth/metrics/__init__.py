"""
Prometheus metrics for the TurboAuth registry and its HTTP API.
"""

from backend_turboauth.metrics.prometheus import (
    CONTENT_TYPE_LATEST,
    METRICS_REGISTRY,
    observe_request,
    record_mutation,
    record_save_failure,
    render_latest,
    set_registered_wallets,
)

__all__ = [
    "CONTENT_TYPE_LATEST",
    "METRICS_REGISTRY",
    "observe_request",
    "record_mutation",
    "record_save_failure",
    "render_latest",
    "set_registered_wallets",
]
