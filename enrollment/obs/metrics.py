"""Prometheus metrics for the enrollment API and notification worker."""

from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

from fastapi import APIRouter, Request, Response
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from starlette.middleware.base import BaseHTTPMiddleware

_REQUEST_LABELS = ("method", "path", "status")

REQUEST_LATENCY_SECONDS = Histogram(
    "http_request_latency_seconds",
    "Latency of HTTP requests in seconds.",
    labelnames=("method", "path"),
)
REQUEST_COUNTER = Counter(
    "http_requests_total",
    "Total number of HTTP requests processed.",
    labelnames=_REQUEST_LABELS,
)
REQUEST_ERROR_COUNTER = Counter(
    "http_request_errors_total",
    "HTTP requests answered with a 5xx status.",
    labelnames=_REQUEST_LABELS,
)
APPLICATIONS_SUBMITTED_COUNTER = Counter(
    "shareholder_applications_submitted_total",
    "Shareholder applications stored, by share class.",
    labelnames=("share_class",),
)
APPLICATION_VALIDATION_FAILURES_COUNTER = Counter(
    "shareholder_application_validation_failures_total",
    "Submissions rejected by schema validation.",
)
NOTIFICATIONS_COUNTER = Counter(
    "shareholder_notifications_total",
    "Outbound notification attempts, by recipient kind and outcome.",
    labelnames=("kind", "outcome"),
)


def _route_template(request: Request) -> str:
    # ``/api/shareholder-applications/{application_id}`` rather than one series per id.
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Counts requests and observes latency per route template."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:  # type: ignore[override]
        started = time.perf_counter()
        status = "500"
        try:
            response = await call_next(request)
            status = str(response.status_code)
            return response
        finally:
            path = _route_template(request)
            REQUEST_LATENCY_SECONDS.labels(method=request.method, path=path).observe(time.perf_counter() - started)
            REQUEST_COUNTER.labels(method=request.method, path=path, status=status).inc()
            if status.startswith("5"):
                REQUEST_ERROR_COUNTER.labels(method=request.method, path=path, status=status).inc()


metrics_router = APIRouter(tags=["observability"])


@metrics_router.get("/metrics", include_in_schema=False)
def metrics_endpoint() -> Response:
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


__all__ = [
    "APPLICATIONS_SUBMITTED_COUNTER",
    "APPLICATION_VALIDATION_FAILURES_COUNTER",
    "NOTIFICATIONS_COUNTER",
    "PrometheusMiddleware",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "metrics_endpoint",
    "metrics_router",
]
