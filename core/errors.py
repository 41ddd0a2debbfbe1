"""
Phalcon Runtime - Unified Error Handling

Provides the error hierarchy shared by the helpers, the collection
type and the dependency injection container.

Features:
- Hierarchical exception classes with context preservation
- Structured error context for debugging
- OpenTelemetry integration for error tracing
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode


@dataclass
class ErrorContext:
    """Structured context for error debugging and tracing."""

    operation: str
    component: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert context to dictionary for serialization."""
        return {
            "operation": self.operation,
            "component": self.component,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class PhalconError(Exception):
    """
    Base exception for all framework errors.

    Provides:
    - Structured error context
    - Chained exception support
    - OpenTelemetry span recording
    """

    error_code: str = "PHALCON_ERROR"

    def __init__(
        self,
        message: str,
        context: Optional[ErrorContext] = None,
        cause: Optional[BaseException] = None,
        suggestions: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context
        self.cause = cause
        self.suggestions = suggestions or []
        self.timestamp = datetime.now(timezone.utc)

        self._record_to_span()

    @classmethod
    def container_service_not_found(cls, service: str) -> str:
        """Return the generic message used when no container is available."""
        return "A dependency injection container is required to access " + service

    def _record_to_span(self) -> None:
        """Record exception to current OpenTelemetry span."""
        span = trace.get_current_span()
        if span and span.is_recording():
            span.set_status(Status(StatusCode.ERROR, self.message))
            span.record_exception(self)
            span.set_attribute("error.code", self.error_code)
            if self.context:
                span.set_attribute("error.component", self.context.component)
                span.set_attribute("error.operation", self.context.operation)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "suggestions": self.suggestions,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context.to_dict() if self.context else None,
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        parts = [f"[{self.error_code}] {self.message}"]
        if self.context:
            parts.append(f" (component: {self.context.component})")
        if self.cause:
            parts.append(f" [caused by: {self.cause}]")
        return "".join(parts)

    def with_context(self, **kwargs: Any) -> "PhalconError":
        """Add additional context to the error."""
        if self.context:
            self.context.metadata.update(kwargs)
        else:
            self.context = ErrorContext(
                operation="unknown",
                component="unknown",
                metadata=kwargs
            )
        return self


class HelperError(PhalconError):
    """Malformed arguments passed to a helper function."""

    error_code = "HELPER_ERROR"

    def __init__(
        self,
        message: str,
        helper: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.helper = helper


class JsonError(HelperError, ValueError):
    """JSON codec failures."""

    error_code = "JSON_ERROR"


class JsonDecodeError(JsonError):
    """The JSON payload could not be decoded."""

    error_code = "JSON_DECODE_ERROR"


class JsonEncodeError(JsonError):
    """The value could not be encoded as JSON."""

    error_code = "JSON_ENCODE_ERROR"


class CollectionError(PhalconError):
    """Malformed or unsafe collection payloads."""

    error_code = "COLLECTION_ERROR"


class ContainerError(PhalconError):
    """Dependency injection errors."""

    error_code = "CONTAINER_ERROR"

    def __init__(
        self,
        message: str,
        service_name: Optional[str] = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.service_name = service_name


class ServiceNotFoundError(ContainerError, KeyError):
    """A service was requested that is not registered."""

    error_code = "SERVICE_NOT_FOUND"

    def __init__(self, service_name: str, **kwargs: Any):
        super().__init__(
            f"Service '{service_name}' wasn't found in the dependency injection container",
            service_name=service_name,
            **kwargs,
        )

    # KeyError quotes its argument; keep the formatted message instead
    def __str__(self) -> str:
        return PhalconError.__str__(self)


class ServiceResolutionError(ContainerError):
    """A registered definition could not be turned into an instance."""

    error_code = "SERVICE_RESOLUTION_ERROR"

    def __init__(self, service_name: str, reason: str = "", **kwargs: Any):
        message = f"Service '{service_name}' cannot be resolved"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message, service_name=service_name, **kwargs)


class CircularDependencyError(ContainerError):
    """A shared service requested itself while being resolved."""

    error_code = "CIRCULAR_DEPENDENCY"

    def __init__(self, service_name: str, **kwargs: Any):
        super().__init__(
            f"Circular dependency detected for service '{service_name}'",
            service_name=service_name,
            **kwargs,
        )
