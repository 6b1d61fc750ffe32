from __future__ import annotations

import json
import logging

from fastapi import FastAPI
from fastapi.testclient import TestClient
from opentelemetry import trace

from enrollment.core.config import Settings
from enrollment.obs import (
    AuditMiddleware,
    PrometheusMiddleware,
    initialise_tracing,
    inject_traceparent,
    kafka_trace_headers,
    metrics_router,
    span_from_traceparent,
    traceparent_from_kafka_headers,
)


class ListHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.messages: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.messages.append(record.getMessage())


def test_metrics_endpoint_exposes_counters() -> None:
    app = FastAPI()
    app.add_middleware(PrometheusMiddleware)
    app.include_router(metrics_router)

    client = TestClient(app)
    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text
    assert "shareholder_applications_submitted_total" in response.text


def test_span_from_traceparent_links_context() -> None:
    initialise_tracing(service_name="unit-test-service")
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span("parent"):
        carrier = inject_traceparent({})
    traceparent = carrier.get("traceparent")
    assert traceparent is not None

    with span_from_traceparent("child", traceparent) as span:
        assert (
            span.get_span_context().trace_id == trace.get_current_span().get_span_context().trace_id
        )


def test_kafka_headers_carry_traceparent() -> None:
    initialise_tracing(service_name="unit-test-service")
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span("publish"):
        headers = kafka_trace_headers()

    traceparent = traceparent_from_kafka_headers(headers)
    assert traceparent is not None
    assert traceparent_from_kafka_headers(None) is None


def test_audit_middleware_masks_personal_data(audit_s3_client) -> None:  # type: ignore[no-untyped-def]
    handler = ListHandler()
    audit_logger = logging.getLogger("audit.test")
    audit_logger.addHandler(handler)
    audit_logger.setLevel(logging.INFO)

    app = FastAPI()
    app.add_middleware(
        AuditMiddleware,
        settings=Settings(audit_log_bucket="audit-test"),
        logger=audit_logger,
    )

    @app.post("/echo")
    def echo() -> dict[str, str]:
        return {"status": "ok"}

    client = TestClient(app)
    response = client.post(
        "/echo",
        json={"firstName": "Jane", "ssn": "123-45-6789", "emailAddress": "jane.doe@example.com"},
        headers={"X-Request-ID": "req-1"},
    )

    assert response.status_code == 200
    assert response.headers["X-Request-ID"] == "req-1"
    record = json.loads(handler.messages[-1])
    assert record["request_id"] == "req-1"
    assert record["body"]["firstName"] == "Jane"
    assert record["body"]["ssn"] == "***-**-6789"
    assert record["body"]["emailAddress"] == "j***@example.com"
    assert "123-45-6789" not in handler.messages[-1]

    stored = audit_s3_client.buckets["audit-test"]
    assert len(stored) == 1
    assert b"123-45-6789" not in next(iter(stored.values()))
