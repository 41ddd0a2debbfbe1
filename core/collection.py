"""
Phalcon Runtime - Collection

An ordered, string-keyed map that is case-insensitive by default.

Two structures are kept in lockstep on every mutation:
- ``_data``: original key -> value, in insertion order
- ``_lower_keys``: normalized key -> original key

Usage:
    from core.collection import Collection

    collection = Collection({"Host": "localhost"})
    collection.get("HOST")            # "localhost"
    collection.get("port", 3306)      # 3306
    collection.set("Port", "3306")
    collection.get("port", cast="int")  # 3306
"""
from __future__ import annotations

import io
import pickle
from collections.abc import Mapping, MutableMapping
from typing import Any, Dict, Iterator, List, Optional

from config import get_config
from core.errors import CollectionError
from core.types import CastLike, coerce
from helper.jsonutil import encode

_MISSING = object()


class _PlainUnpickler(pickle.Unpickler):
    """Unpickler that refuses to reconstruct any class instance."""

    def find_class(self, module: str, name: str) -> Any:
        raise CollectionError(
            f"Refusing to unserialize class '{module}.{name}'",
            suggestions=["Only scalar, list and dict values can be unserialized"],
        )


class Collection(MutableMapping):
    """
    Ordered key/value collection with optional case-insensitive keys.

    Explicit accessors (`get`, `set`, `has`, `remove`) are the primary
    API; the mapping protocol (`c[key]`, `key in c`, `del c[key]`,
    iteration, `len`) is layered on top of them. Iteration yields the
    original keys.
    """

    def __init__(self, data: Optional[Mapping] = None, insensitive: Optional[bool] = None):
        if insensitive is None:
            insensitive = get_config().collection.insensitive
        self._insensitive = insensitive
        self._data: Dict[str, Any] = {}
        self._lower_keys: Dict[str, str] = {}
        self.init(data or {})

    @property
    def insensitive(self) -> bool:
        return self._insensitive

    def _normalize(self, element: str) -> str:
        return element.lower() if self._insensitive else element

    def init(self, data: Mapping) -> None:
        """Merge `data` into the collection."""
        for key, value in data.items():
            self._set_data(key, value)

    def clear(self) -> None:
        self._data = {}
        self._lower_keys = {}

    def count(self) -> int:
        return len(self._data)

    def get(self, element: str, default: Any = None, cast: Optional[CastLike] = None) -> Any:
        """
        Return the value stored under `element`, or `default` when absent.

        Args:
            element: Key, matched case-insensitively in insensitive mode
            default: Value returned when the key is absent (never cast)
            cast: Optional coercion target, see `core.types.Cast`
        """
        key = self._lower_keys.get(self._normalize(str(element)), _MISSING)
        if key is _MISSING:
            return default

        value = self._data[key]
        if cast is not None:
            value = coerce(value, cast)
        return value

    def get_keys(self, insensitive: bool = True) -> List[str]:
        """Return the normalized keys, or the original keys when `insensitive` is False."""
        if insensitive:
            return list(self._lower_keys)
        return list(self._data)

    def get_values(self) -> List[Any]:
        return list(self._data.values())

    def has(self, element: str) -> bool:
        return self._normalize(str(element)) in self._lower_keys

    def remove(self, element: str) -> None:
        """Delete `element`; absent keys are ignored."""
        lower = self._normalize(str(element))
        key = self._lower_keys.pop(lower, _MISSING)
        if key is not _MISSING:
            del self._data[key]

    def set(self, element: str, value: Any) -> None:
        self._set_data(element, value)

    def _set_data(self, element: Any, value: Any) -> None:
        element = str(element)
        lower = self._normalize(element)
        key = self._lower_keys.setdefault(lower, element)
        self._data[key] = value

    def to_array(self) -> Dict[str, Any]:
        return dict(self._data)

    def json_serialize(self) -> Dict[str, Any]:
        """Return the data with values exposing `json_serialize` expanded."""
        records = {}
        for key, value in self._data.items():
            if not isinstance(value, type) and callable(getattr(value, "json_serialize", None)):
                records[key] = value.json_serialize()
            else:
                records[key] = value
        return records

    def to_json(self, options: Optional[int] = None) -> str:
        """
        Return the collection as a JSON object.

        Args:
            options: JsonOption flags, defaults to the configured value
                (HEX_TAG | HEX_AMP | HEX_APOS | HEX_QUOT | UNESCAPED_SLASHES)
        """
        if options is None:
            options = get_config().collection.json_options
        return encode(self.json_serialize(), options)

    def serialize(self) -> bytes:
        """Flatten the data to the legacy serialized form."""
        return pickle.dumps(self.to_array(), protocol=pickle.HIGHEST_PROTOCOL)

    def unserialize(self, serialized: bytes) -> None:
        """
        Merge data produced by `serialize` into the collection.

        Raises:
            CollectionError: if the payload references any class, is
                corrupt, or does not hold a mapping
        """
        try:
            data = _PlainUnpickler(io.BytesIO(serialized)).load()
        except CollectionError:
            raise
        except (pickle.UnpicklingError, EOFError, IndexError, ValueError, TypeError) as e:
            raise CollectionError("Cannot unserialize collection data", cause=e) from e

        if not isinstance(data, dict):
            raise CollectionError(
                f"Unserialized data must be a mapping, got {type(data).__name__}"
            )
        self.init(data)

    # Mapping protocol

    def __getitem__(self, element: str) -> Any:
        value = self.get(element, _MISSING)
        if value is _MISSING:
            raise KeyError(element)
        return value

    def __setitem__(self, element: str, value: Any) -> None:
        self.set(element, value)

    def __delitem__(self, element: str) -> None:
        if not self.has(element):
            raise KeyError(element)
        self.remove(element)

    def __contains__(self, element: object) -> bool:
        return self.has(element)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._data!r}, insensitive={self._insensitive})"

    def __getstate__(self) -> Dict[str, Any]:
        return {"data": self.to_array(), "insensitive": self._insensitive}

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self._insensitive = state["insensitive"]
        self._data = {}
        self._lower_keys = {}
        self.init(state["data"])
