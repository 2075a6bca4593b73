"""
Middleware Package

Contains FastAPI middleware for:
- Prometheus metrics collection
"""

from autoapply.middleware.metrics import (
    PrometheusMiddleware,
    setup_metrics,
    record_lifecycle_event,
    record_document_lookup,
    REQUEST_LATENCY,
    REQUEST_COUNT,
    ACTIVE_REQUESTS,
    LIFECYCLE_EVENTS,
)

__all__ = [
    "PrometheusMiddleware",
    "setup_metrics",
    "record_lifecycle_event",
    "record_document_lookup",
    "REQUEST_LATENCY",
    "REQUEST_COUNT",
    "ACTIVE_REQUESTS",
    "LIFECYCLE_EVENTS",
]
