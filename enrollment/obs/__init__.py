"""Observability utilities."""

from .audit import AuditLogRecord, AuditMiddleware, S3AuditSink
from .metrics import (
    APPLICATION_VALIDATION_FAILURES_COUNTER,
    APPLICATIONS_SUBMITTED_COUNTER,
    NOTIFICATIONS_COUNTER,
    REQUEST_COUNTER,
    REQUEST_ERROR_COUNTER,
    REQUEST_LATENCY_SECONDS,
    PrometheusMiddleware,
    metrics_router,
)
from .tracing import (
    initialise_tracing,
    inject_traceparent,
    instrument_fastapi_app,
    instrument_sqlalchemy_engine,
    kafka_trace_headers,
    span_from_traceparent,
    traceparent_from_kafka_headers,
)

__all__ = [
    "APPLICATIONS_SUBMITTED_COUNTER",
    "APPLICATION_VALIDATION_FAILURES_COUNTER",
    "AuditLogRecord",
    "AuditMiddleware",
    "NOTIFICATIONS_COUNTER",
    "PrometheusMiddleware",
    "REQUEST_COUNTER",
    "REQUEST_ERROR_COUNTER",
    "REQUEST_LATENCY_SECONDS",
    "S3AuditSink",
    "metrics_router",
    "initialise_tracing",
    "inject_traceparent",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "kafka_trace_headers",
    "span_from_traceparent",
    "traceparent_from_kafka_headers",
]
