"""
Phalcon Runtime - JSON Helpers

Wrappers around the standard JSON codec that turn every codec failure
into a `JsonDecodeError` / `JsonEncodeError` carrying the underlying
message, plus the escaping option flags used by `Collection.to_json`.

Usage:
    from helper.jsonutil import decode, encode, JsonOption

    encode({"one": "two", "path": "a/b"})
    # '{"one":"two","path":"a\\/b"}'

    encode({"tag": "<b>"}, JsonOption.DEFAULT)
    # '{"tag":"\\u003Cb\\u003E"}'
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from enum import IntFlag
from types import SimpleNamespace
from typing import Any, Dict, List, Union

from core.errors import JsonDecodeError, JsonEncodeError


class JsonOption(IntFlag):
    """Encoding flags; values match the conventional JSON_* option constants."""

    NONE = 0
    HEX_TAG = 1
    HEX_AMP = 2
    HEX_APOS = 4
    HEX_QUOT = 8
    FORCE_OBJECT = 16
    UNESCAPED_SLASHES = 64
    PRETTY_PRINT = 128
    UNESCAPED_UNICODE = 256

    # HEX_TAG | HEX_AMP | HEX_APOS | HEX_QUOT | UNESCAPED_SLASHES
    DEFAULT = 79


DEFAULT_DEPTH = 512

_HEX_ESCAPES: Dict[str, tuple] = {
    "<": (JsonOption.HEX_TAG, "\\u003C"),
    ">": (JsonOption.HEX_TAG, "\\u003E"),
    "&": (JsonOption.HEX_AMP, "\\u0026"),
    "'": (JsonOption.HEX_APOS, "\\u0027"),
    '"': (JsonOption.HEX_QUOT, "\\u0022"),
}

# A complete JSON string token, escapes included
_STRING_TOKEN = re.compile(r'"(?:[^"\\]|\\.)*"', re.DOTALL)


class _DepthExceeded(Exception):
    pass


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Syntax error, unexpected {name}")


def _exceeds_depth(value: Any, depth: int) -> bool:
    """Walk a decoded document with an explicit stack, stopping at the first level past `depth`."""
    pending = [(value, 1)]
    while pending:
        value, level = pending.pop()
        if isinstance(value, SimpleNamespace):
            value = vars(value)
        if isinstance(value, dict):
            children = value.values()
        elif isinstance(value, list):
            children = value
        else:
            continue
        if level > depth:
            return True
        pending.extend((child, level + 1) for child in children)
    return False


def _expand(value: Any) -> Any:
    if not isinstance(value, type) and callable(getattr(value, "json_serialize", None)):
        return value.json_serialize()
    if isinstance(value, SimpleNamespace):
        return vars(value)
    return value


def _prepare_scalar(value: Any, options: JsonOption) -> Any:
    if isinstance(value, float) and (value != value or value in (float("inf"), float("-inf"))):
        raise ValueError("Inf and NaN cannot be JSON encoded")

    if isinstance(value, str):
        if options & JsonOption.UNESCAPED_UNICODE:
            try:
                value.encode("utf-8")
            except UnicodeEncodeError as e:
                raise ValueError("Malformed UTF-8 characters, possibly incorrectly encoded") from e
        return value

    if value is None or isinstance(value, (bool, int, float)):
        return value

    raise TypeError("Type is not supported")


def _prepare(data: Any, options: JsonOption, depth: int) -> Any:
    """
    Reduce `data` to plain JSON types, enforcing the nesting limit.

    Containers are copied with an explicit work list, so nesting up to
    `depth` never touches the interpreter recursion limit.
    """
    root: List[Any] = [None]
    pending = [(data, 0, root, 0)]
    while pending:
        value, level, parent, slot = pending.pop()
        value = _expand(value)

        if not isinstance(value, (Mapping, list, tuple)):
            parent[slot] = _prepare_scalar(value, options)
            continue

        if level + 1 > depth:
            raise _DepthExceeded()

        if isinstance(value, Mapping):
            pairs = {str(key): item for key, item in value.items()}
            container: Any = dict.fromkeys(pairs)
        elif options & JsonOption.FORCE_OBJECT:
            pairs = {str(index): item for index, item in enumerate(value)}
            container = dict.fromkeys(pairs)
        else:
            pairs = dict(enumerate(value))
            container = [None] * len(pairs)

        parent[slot] = container
        pending.extend((item, level + 1, container, key) for key, item in pairs.items())

    return root[0]


def _escape_string(text: str, options: JsonOption) -> str:
    ensure_ascii = not options & JsonOption.UNESCAPED_UNICODE
    escaped = []
    for char in text:
        flag_escape = _HEX_ESCAPES.get(char)
        if flag_escape and options & flag_escape[0]:
            escaped.append(flag_escape[1])
        elif char == "/" and not options & JsonOption.UNESCAPED_SLASHES:
            escaped.append("\\/")
        else:
            escaped.append(json.dumps(char, ensure_ascii=ensure_ascii)[1:-1])
    return '"' + "".join(escaped) + '"'


def encode(data: Any, options: int = 0, depth: int = DEFAULT_DEPTH) -> str:
    """
    Encode `data` as JSON, raising JsonEncodeError on failure.

    Objects exposing ``json_serialize()`` are expanded through it and
    ``SimpleNamespace`` instances encode as objects.

    Args:
        data: Value to encode
        options: Combination of JsonOption flags
        depth: Maximum nesting depth

    Raises:
        JsonEncodeError: if the value cannot be encoded
    """
    flags = JsonOption(options)
    try:
        prepared = _prepare(data, flags, depth)
        pretty = bool(flags & JsonOption.PRETTY_PRINT)
        encoded = json.dumps(
            prepared,
            ensure_ascii=not flags & JsonOption.UNESCAPED_UNICODE,
            allow_nan=False,
            indent=4 if pretty else None,
            separators=(",", ": ") if pretty else (",", ":"),
        )
    except _DepthExceeded as e:
        raise JsonEncodeError(
            "json_encode error: Maximum stack depth exceeded", helper="encode", cause=e
        ) from e
    except (TypeError, ValueError, RecursionError) as e:
        raise JsonEncodeError(f"json_encode error: {e}", helper="encode", cause=e) from e

    return _STRING_TOKEN.sub(
        lambda match: _escape_string(json.loads(match.group(0)), flags),
        encoded,
    )


def decode(
    data: Union[str, bytes],
    associative: bool = True,
    depth: int = DEFAULT_DEPTH,
) -> Any:
    """
    Decode a JSON document, raising JsonDecodeError on failure.

    Args:
        data: JSON text
        associative: Return objects as dicts; otherwise as SimpleNamespace
        depth: Maximum nesting depth

    Raises:
        JsonDecodeError: if the data cannot be decoded
    """
    object_hook = None if associative else (lambda obj: SimpleNamespace(**obj))
    try:
        decoded = json.loads(data, object_hook=object_hook, parse_constant=_reject_constant)
    except (TypeError, ValueError, RecursionError) as e:
        raise JsonDecodeError(f"json_decode error: {e}", helper="decode", cause=e) from e

    if _exceeds_depth(decoded, depth):
        raise JsonDecodeError("json_decode error: Maximum stack depth exceeded", helper="decode")

    return decoded
