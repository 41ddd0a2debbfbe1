"""
Phalcon Runtime - Tracing with OpenTelemetry

Thin layer over the OpenTelemetry API. Without `setup_tracing` the
global proxy provider is used, so spans are no-ops until an application
installs a provider.

Usage:
    from observability.tracing import setup_tracing, create_span

    setup_tracing(TracingConfig(enabled=True, console_export=True))

    with create_span("di.resolve", attributes={"service.name": "db"}):
        ...
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME, SERVICE_VERSION
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.trace import Span, SpanKind, Status, StatusCode

from config import TracingConfig

# Global state
_tracer_provider: Optional[TracerProvider] = None


def setup_tracing(config: Optional[TracingConfig] = None) -> Optional[TracerProvider]:
    """
    Install an SDK tracer provider.

    Args:
        config: Tracing configuration. Uses defaults if not provided.

    Returns:
        The configured provider, or None when tracing is disabled.
    """
    global _tracer_provider

    if _tracer_provider is not None:
        return _tracer_provider

    config = config or TracingConfig()
    if not config.enabled:
        return None

    resource = Resource.create({
        SERVICE_NAME: config.service_name,
        SERVICE_VERSION: config.service_version,
    })
    _tracer_provider = TracerProvider(resource=resource)

    if config.console_export:
        _tracer_provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(_tracer_provider)
    return _tracer_provider


def get_tracer(name: str, version: str = "1.0.0") -> trace.Tracer:
    """
    Get a tracer instance for manual instrumentation.

    Args:
        name: Tracer name, typically __name__ of the module
        version: Tracer version string
    """
    return trace.get_tracer(name, version)


def shutdown_tracing() -> None:
    """Flush pending spans and forget the installed provider."""
    global _tracer_provider
    if _tracer_provider is not None:
        _tracer_provider.shutdown()
    _tracer_provider = None


@contextmanager
def create_span(
    name: str,
    attributes: Optional[Dict[str, Any]] = None,
    kind: SpanKind = SpanKind.INTERNAL,
    tracer_name: str = "phalcon.runtime",
) -> Iterator[Span]:
    """
    Context manager for creating spans with automatic error recording.

    Args:
        name: Span name
        attributes: Initial span attributes
        kind: Span kind
        tracer_name: Name of the tracer to use
    """
    tracer = get_tracer(tracer_name)
    with tracer.start_as_current_span(name, kind=kind, record_exception=False) as span:
        if attributes:
            for key, value in attributes.items():
                span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise
