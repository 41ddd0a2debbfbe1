"""
Phalcon Runtime - Array Helpers

Thin wrappers over mapping and sequence operations. Every helper
accepts either a mapping (keys preserved) or a sequence (positions act
as keys) and returns the same shape it was given.

Element accessors (`group`, `order`, `pluck`) go through `read_field`,
which reads a named field the same way from a mapping (by key) and
from a record (by attribute).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from types import SimpleNamespace
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from core.types import Cast, coerce

ArrayLike = Union[Mapping, Sequence]
Predicate = Optional[Callable[[Any], Any]]

_MISSING = object()


def read_field(element: Any, name: Any, default: Any = None) -> Any:
    """
    Read field `name` from `element`.

    Mappings are read by key and everything else by attribute, so
    dicts, dataclasses and plain objects can be mixed in one collection.
    """
    if isinstance(element, Mapping):
        return element.get(name, default)
    if isinstance(name, str):
        return getattr(element, name, default)
    return default


def _items(collection: ArrayLike) -> Iterable[Tuple[Any, Any]]:
    if isinstance(collection, Mapping):
        return collection.items()
    return enumerate(collection)


def _rebuild(collection: ArrayLike, pairs: Iterable[Tuple[Any, Any]]) -> ArrayLike:
    if isinstance(collection, Mapping):
        return dict(pairs)
    return [value for _, value in pairs]


def chunk(collection: ArrayLike, size: int, preserve_keys: bool = False) -> List[ArrayLike]:
    """
    Split the collection into chunks of `size` elements.

    With `preserve_keys` each chunk is a dict keeping the original keys.
    """
    if size < 1:
        raise ValueError("Size parameter expected to be greater than 0")

    pairs = list(_items(collection))
    chunks = []
    for start in range(0, len(pairs), size):
        part = pairs[start:start + size]
        chunks.append(dict(part) if preserve_keys else [value for _, value in part])
    return chunks


def filter(collection: ArrayLike, method: Predicate = None) -> ArrayLike:
    """Keep the elements for which `method` is truthy; no method keeps all."""
    if method is None or not callable(method):
        return collection if isinstance(collection, Mapping) else list(collection)

    return _rebuild(collection, ((k, v) for k, v in _items(collection) if method(v)))


def first(collection: ArrayLike, method: Predicate = None) -> Any:
    """Return the first (optionally filtered) element, or None."""
    for value in _values(filter(collection, method)):
        return value
    return None


def first_key(collection: ArrayLike, method: Predicate = None) -> Any:
    """Return the key of the first (optionally filtered) element, or None."""
    for key, _ in _items(filter(collection, method)):
        return key
    return None


def last(collection: ArrayLike, method: Predicate = None) -> Any:
    """Return the last (optionally filtered) element, or None."""
    values = list(_values(filter(collection, method)))
    return values[-1] if values else None


def last_key(collection: ArrayLike, method: Predicate = None) -> Any:
    """Return the key of the last (optionally filtered) element, or None."""
    keys = [key for key, _ in _items(filter(collection, method))]
    return keys[-1] if keys else None


def _values(collection: ArrayLike) -> Iterable[Any]:
    if isinstance(collection, Mapping):
        return collection.values()
    return collection


def flatten(collection: ArrayLike, deep: bool = False) -> List[Any]:
    """
    Flatten nested lists and mappings one level, or fully with `deep`.
    Strings are never treated as nested collections.
    """
    data: List[Any] = []
    for item in _values(collection):
        if isinstance(item, (str, bytes)) or not isinstance(item, (Mapping, Sequence)):
            data.append(item)
        elif deep:
            data.extend(flatten(item, True))
        else:
            data.extend(_values(item))
    return data


def get(
    collection: ArrayLike,
    index: Any,
    default: Any = None,
    cast: Optional[Union[Cast, str]] = None,
) -> Any:
    """
    Return the element at `index`, or `default` when it is missing or None.

    `cast` coerces the returned value, see `core.types.Cast`.
    """
    value = _lookup(collection, index)
    if value is _MISSING or value is None:
        return default

    if cast is not None:
        value = coerce(value, cast)
    return value


def _lookup(collection: ArrayLike, index: Any) -> Any:
    if isinstance(collection, Mapping):
        return collection.get(index, _MISSING)
    if isinstance(index, int) and -len(collection) <= index < len(collection):
        return collection[index]
    return _MISSING


def group(collection: ArrayLike, method: Union[str, Callable[[Any], Any]]) -> Dict[Any, List[Any]]:
    """
    Group elements by the result of `method`.

    `method` is either a callable applied to each element or the name
    of a field; a record whose field is a method has it called. Elements
    without the field are skipped.
    """
    grouped: Dict[Any, List[Any]] = {}
    for element in _values(collection):
        if callable(method):
            key = method(element)
        else:
            key = read_field(element, method, _MISSING)
            if key is _MISSING:
                continue
            if callable(key):
                key = key()
        grouped.setdefault(key, []).append(element)
    return grouped


def has(collection: ArrayLike, index: Any) -> bool:
    """True when `index` exists and its value is not None."""
    value = _lookup(collection, index)
    return value is not _MISSING and value is not None


def is_unique(collection: ArrayLike) -> bool:
    """True when no value occurs twice."""
    seen: List[Any] = []
    for value in _values(collection):
        if value in seen:
            return False
        seen.append(value)
    return True


def _sort_key(value: Any) -> Tuple[int, Any, str]:
    # numbers < strings < anything else, compared within their own group
    if isinstance(value, (int, float)):
        return (0, value, "")
    if isinstance(value, str):
        return (1, 0, value)
    return (2, 0, f"{type(value).__name__}:{value!r}")


def order(collection: ArrayLike, attribute: Any, order: str = "asc") -> List[Any]:
    """
    Sort elements by the field `attribute`.

    `order` is ``"asc"`` or anything else for descending. Elements with
    equal keys keep their relative order. Elements without the field (or
    with a ``None`` value) come last in either direction. Mixed value types
    sort numbers first, then strings, then everything else.
    """
    present: List[Tuple[Any, Any]] = []
    missing: List[Any] = []
    for element in _values(collection):
        value = read_field(element, attribute)
        if value is None:
            missing.append(element)
        else:
            present.append((_sort_key(value), element))

    present.sort(key=lambda pair: pair[0], reverse=order != "asc")
    return [element for _, element in present] + missing


def pluck(collection: ArrayLike, element: str) -> List[Any]:
    """Collect field `element` from every item that has it set."""
    plucked = []
    for item in _values(collection):
        value = read_field(item, element)
        if value is not None:
            plucked.append(value)
    return plucked


def set(collection: ArrayLike, value: Any, index: Any = None) -> ArrayLike:
    """
    Return a copy of the collection with `value` stored at `index`.

    Without an index the value is appended; for a mapping it receives
    the next integer key.
    """
    if isinstance(collection, Mapping):
        updated = dict(collection)
        if index is None:
            int_keys = [key for key in updated if isinstance(key, int) and not isinstance(key, bool)]
            index = max(int_keys) + 1 if int_keys else 0
        updated[index] = value
        return updated

    updated_list = list(collection)
    if index is None:
        updated_list.append(value)
    else:
        updated_list[index] = value
    return updated_list


def slice_left(collection: ArrayLike, elements: int = 1) -> ArrayLike:
    """Return the first `elements` elements."""
    return _rebuild(collection, list(_items(collection))[:elements])


def slice_right(collection: ArrayLike, elements: int = 1) -> ArrayLike:
    """Return everything after the first `elements` elements."""
    return _rebuild(collection, list(_items(collection))[elements:])


def split(collection: ArrayLike) -> List[List[Any]]:
    """Return ``[keys, values]``."""
    pairs = list(_items(collection))
    return [[key for key, _ in pairs], [value for _, value in pairs]]


def to_object(collection: Mapping) -> SimpleNamespace:
    return SimpleNamespace(**{str(key): value for key, value in collection.items()})


def validate_all(collection: ArrayLike, method: Predicate = None) -> bool:
    """True when every element satisfies `method`."""
    return len(filter(collection, method)) == len(collection)


def validate_any(collection: ArrayLike, method: Predicate = None) -> bool:
    """True when at least one element satisfies `method`."""
    return len(filter(collection, method)) > 0


def white_list(collection: Mapping, white_list: Iterable[Any]) -> Dict[Any, Any]:
    """Keep only the keys listed in `white_list`; non str/int entries are ignored."""
    allowed = {
        key for key in white_list
        if isinstance(key, (int, str)) and not isinstance(key, bool)
    }
    return {key: value for key, value in collection.items() if key in allowed}
