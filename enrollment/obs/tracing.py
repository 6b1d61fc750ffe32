"""OpenTelemetry tracing for the API and the notification worker.

Trace context crosses the Kafka notification topic as a ``traceparent``
record header, so a delivery span in the worker joins the trace of the HTTP
request that stored the application.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.context import Context
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.logging import LoggingInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import SpanProcessor, TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)
from opentelemetry.trace import Span
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

_TRACEPARENT = "traceparent"
_propagator = TraceContextTextMapPropagator()


def _span_processor(endpoint: str | None) -> SpanProcessor:
    if endpoint:
        return BatchSpanProcessor(OTLPSpanExporter(endpoint=endpoint, insecure=True))
    return SimpleSpanProcessor(ConsoleSpanExporter())


def _configured_service() -> str | None:
    provider = trace.get_tracer_provider()
    if isinstance(provider, TracerProvider):
        return provider.resource.attributes.get(SERVICE_NAME)  # type: ignore[return-value]
    return None


def initialise_tracing(
    *,
    service_name: str,
    endpoint: str | None = None,
    instrument_logging: bool = True,
) -> None:
    """Install a global tracer provider for ``service_name``; repeated calls are no-ops."""

    if _configured_service() == service_name:
        return

    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: service_name}))
    provider.add_span_processor(_span_processor(endpoint))
    trace.set_tracer_provider(provider)
    if instrument_logging:
        LoggingInstrumentor().instrument(set_logging_format=True)


def instrument_fastapi_app(app: FastAPI) -> None:
    FastAPIInstrumentor().instrument_app(app)


def instrument_sqlalchemy_engine(engine: Any) -> None:
    SQLAlchemyInstrumentor().instrument(engine=engine)


def _context_from_traceparent(traceparent: str | None) -> Context | None:
    if not traceparent:
        return None
    return _propagator.extract(carrier={_TRACEPARENT: traceparent})


@contextmanager
def span_from_traceparent(name: str, traceparent: str | None, **attributes: Any) -> Iterator[Span]:
    """Start a span, as a child of ``traceparent`` when one is given."""

    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(name, context=_context_from_traceparent(traceparent)) as span:
        for key, value in attributes.items():
            span.set_attribute(key, value)
        yield span


def inject_traceparent(headers: dict[str, str]) -> dict[str, str]:
    """Return a copy of ``headers`` carrying the current trace context."""

    carrier = dict(headers)
    _propagator.inject(carrier)
    return carrier


def kafka_trace_headers() -> list[tuple[str, bytes]]:
    return [(key, value.encode("utf-8")) for key, value in inject_traceparent({}).items()]


def traceparent_from_kafka_headers(headers: list[tuple[str, bytes]] | None) -> str | None:
    for key, value in headers or []:
        if key == _TRACEPARENT and value:
            return value.decode("utf-8")
    return None


__all__ = [
    "initialise_tracing",
    "inject_traceparent",
    "instrument_fastapi_app",
    "instrument_sqlalchemy_engine",
    "kafka_trace_headers",
    "span_from_traceparent",
    "traceparent_from_kafka_headers",
]
