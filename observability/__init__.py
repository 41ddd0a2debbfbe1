"""
Phalcon Runtime - Observability Package

Structured logging (structlog) and tracing (OpenTelemetry) used by the
container and available to applications built on the runtime.

Usage:
    from observability import setup_observability, get_logger

    setup_observability()
    logger = get_logger(__name__)
"""
from observability.logging import (
    LogContext,
    bind_context,
    clear_context,
    get_logger,
    setup_logging,
    shutdown_logging,
    unbind_context,
)
from observability.tracing import (
    create_span,
    get_tracer,
    setup_tracing,
    shutdown_tracing,
)

__all__ = [
    # Logging
    "setup_logging",
    "get_logger",
    "shutdown_logging",
    "LogContext",
    "bind_context",
    "unbind_context",
    "clear_context",
    # Tracing
    "setup_tracing",
    "get_tracer",
    "create_span",
    "shutdown_tracing",
    # Combined setup
    "setup_observability",
    "shutdown_observability",
]


def setup_observability() -> None:
    """Initialize logging and tracing from the global configuration."""
    from config import get_config

    config = get_config()
    setup_logging(config.logging)
    setup_tracing(config.tracing)


def shutdown_observability() -> None:
    """Flush and release logging and tracing resources."""
    shutdown_tracing()
    shutdown_logging()
