"""
Phalcon Runtime - Core Module

Foundational pieces shared by the rest of the runtime:
- Unified error handling
- Tagged coercion targets
- The case-insensitive ordered Collection

Usage:
    from core import Collection, Cast, PhalconError

    options = Collection({"Adapter": "mysql"})
    options.get("adapter")  # "mysql"
"""

from core.errors import (
    PhalconError,
    ErrorContext,
    HelperError,
    JsonError,
    JsonDecodeError,
    JsonEncodeError,
    CollectionError,
    ContainerError,
    ServiceNotFoundError,
    ServiceResolutionError,
    CircularDependencyError,
)
from core.types import (
    Cast,
    CastLike,
    coerce,
    resolve_cast,
)
from core.collection import Collection

__all__ = [
    # Errors
    "PhalconError",
    "ErrorContext",
    "HelperError",
    "JsonError",
    "JsonDecodeError",
    "JsonEncodeError",
    "CollectionError",
    "ContainerError",
    "ServiceNotFoundError",
    "ServiceResolutionError",
    "CircularDependencyError",
    # Types
    "Cast",
    "CastLike",
    "coerce",
    "resolve_cast",
    # Collection
    "Collection",
]
