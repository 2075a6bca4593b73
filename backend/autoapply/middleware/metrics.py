"""
Prometheus Metrics Middleware

Provides request/response metrics for monitoring:
- HTTP request latency
- Request count by endpoint and status
- Active request gauge
- Job application lifecycle outcomes (create / update / move / delete / score)
- Generated document cache hit/miss

Usage:
    from autoapply.middleware.metrics import setup_metrics

    app = FastAPI()
    setup_metrics(app)

Metrics Endpoint:
    GET /metrics - Prometheus-format metrics
"""

import time
import logging
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse
from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
    CONTENT_TYPE_LATEST,
    generate_latest,
    REGISTRY,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match

from autoapply.services.lifecycle import LifecycleEvent

logger = logging.getLogger(__name__)

# ==================== Prometheus Metrics ====================

REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency in seconds",
    ["method", "endpoint", "status"],
    buckets=[0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

ACTIVE_REQUESTS = Gauge(
    "http_requests_active",
    "Number of active HTTP requests",
    ["method", "endpoint"]
)

LIFECYCLE_EVENTS = Counter(
    "job_application_events_total",
    "Job application mutations by kind and outcome",
    ["kind", "outcome"]  # outcome: ok or the error class name
)

DOCUMENT_CACHE_HITS = Counter(
    "document_cache_hits_total",
    "Generated document cache hits",
)

DOCUMENT_CACHE_MISSES = Counter(
    "document_cache_misses_total",
    "Generated document cache misses",
)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    FastAPI middleware for Prometheus metrics collection.

    Records:
    - Request latency
    - Request count by status code
    - Active request count
    """

    def __init__(self, app: FastAPI, app_name: str = "autoapply"):
        super().__init__(app)
        self.app_name = app_name

    async def dispatch(
        self,
        request: Request,
        call_next: Callable
    ) -> Response:
        endpoint = self._get_endpoint(request)
        method = request.method

        if endpoint == "/metrics":
            return await call_next(request)

        ACTIVE_REQUESTS.labels(method=method, endpoint=endpoint).inc()
        start_time = time.perf_counter()

        try:
            response = await call_next(request)
            status = str(response.status_code)
        except Exception as e:
            status = "500"
            logger.error(f"Request error: {e}")
            raise
        finally:
            duration = time.perf_counter() - start_time
            route_path = self._resolved_endpoint(request, endpoint)

            REQUEST_LATENCY.labels(
                method=method,
                endpoint=route_path,
                status=status
            ).observe(duration)

            REQUEST_COUNT.labels(
                method=method,
                endpoint=route_path,
                status=status
            ).inc()

            ACTIVE_REQUESTS.labels(
                method=method,
                endpoint=endpoint
            ).dec()

        return response

    def _get_endpoint(self, request: Request) -> str:
        """
        Route pattern (e.g. /applications/{application_id}) rather than the
        raw path, to keep label cardinality bounded.

        Only top-level routes that expose a path are matched; included
        routers may be registered as entries without one.
        """
        for route in request.app.routes:
            path = getattr(route, "path", None)
            if path is None:
                continue
            match, _ = route.matches(request.scope)
            if match == Match.FULL:
                return path

        return request.url.path

    def _resolved_endpoint(self, request: Request, default: str) -> str:
        """Pattern of the route that handled the request, once routing has run."""
        route = request.scope.get("route")
        return getattr(route, "path_format", None) or getattr(route, "path", None) or default


def metrics_endpoint(request: Request) -> Response:
    return PlainTextResponse(
        content=generate_latest(REGISTRY),
        media_type=CONTENT_TYPE_LATEST
    )


def setup_metrics(app: FastAPI) -> None:
    """
    Configure Prometheus metrics for FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(PrometheusMiddleware, app_name="autoapply")
    app.add_route("/metrics", metrics_endpoint, methods=["GET"])

    logger.info("Prometheus metrics configured")


# ==================== Helper Functions ====================

def record_lifecycle_event(event: LifecycleEvent) -> None:
    """Lifecycle manager listener: count mutation outcomes."""
    outcome = "ok" if event.ok else type(event.error).__name__
    LIFECYCLE_EVENTS.labels(kind=event.kind, outcome=outcome).inc()


def record_document_lookup(hit: bool) -> None:
    if hit:
        DOCUMENT_CACHE_HITS.inc()
    else:
        DOCUMENT_CACHE_MISSES.inc()
