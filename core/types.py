"""
Phalcon Runtime - Shared Type Definitions

Type aliases and the tagged coercion targets accepted by
`Collection.get` and `helper.arrays.get`.

Usage:
    from core.types import Cast, coerce

    coerce("42", Cast.INT)      # 42
    coerce("x", "array")        # ["x"]
"""
from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any, Callable, Dict, Union


class Cast(str, Enum):
    """Coercion targets for a returned value."""

    STRING = "string"
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    ARRAY = "array"


# Accepted spellings for a cast given as a plain string
CAST_ALIASES: Dict[str, Cast] = {
    "string": Cast.STRING,
    "str": Cast.STRING,
    "int": Cast.INT,
    "integer": Cast.INT,
    "float": Cast.FLOAT,
    "double": Cast.FLOAT,
    "bool": Cast.BOOL,
    "boolean": Cast.BOOL,
    "array": Cast.ARRAY,
    "list": Cast.ARRAY,
}

CastLike = Union[Cast, str]


def _to_array(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, Mapping):
        return value
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


_CONVERTERS: Dict[Cast, Callable[[Any], Any]] = {
    Cast.STRING: str,
    Cast.INT: int,
    Cast.FLOAT: float,
    Cast.BOOL: bool,
    Cast.ARRAY: _to_array,
}


def resolve_cast(cast: CastLike) -> Cast:
    """Turn a Cast member or one of its spellings into a Cast."""
    if isinstance(cast, Cast):
        return cast
    try:
        return CAST_ALIASES[cast.lower()]
    except (AttributeError, KeyError):
        raise ValueError(f"Unknown cast '{cast}'") from None


def coerce(value: Any, cast: CastLike) -> Any:
    """
    Convert `value` to the `cast` target with Python's own conversions.

    Conversion failures (``int("abc")``) propagate unchanged.
    """
    return _CONVERTERS[resolve_cast(cast)](value)
