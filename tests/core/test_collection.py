"""
Tests for the case-insensitive ordered Collection.
"""
import pickle
from decimal import Decimal

import pytest

from config import reset_config
from core.collection import Collection
from core.errors import CollectionError
from helper.jsonutil import JsonOption


class Money:
    """Value object exposing json_serialize."""

    def __init__(self, amount, currency):
        self.amount = amount
        self.currency = currency

    def json_serialize(self):
        return {"amount": self.amount, "currency": self.currency}


class TestCollectionBasics:
    """Construction, lookups and key handling."""

    def test_construct_keeps_insertion_order(self, collection):
        assert collection.to_array() == {"one": "two", "Three": "four", "five": "six"}
        assert collection.get_values() == ["two", "four", "six"]

    def test_get_is_case_insensitive(self, collection):
        assert collection.get("three") == "four"
        assert collection.get("THREE") == "four"
        assert collection.get("Three") == "four"

    def test_get_missing_returns_default(self, collection):
        assert collection.get("seven") is None
        assert collection.get("seven", "eight") == "eight"

    def test_get_keys(self, collection):
        assert collection.get_keys() == ["one", "three", "five"]
        assert collection.get_keys(False) == ["one", "Three", "five"]

    def test_has(self, collection):
        assert collection.has("ONE")
        assert collection.has("three")
        assert not collection.has("unknown")

    def test_count(self, collection):
        assert collection.count() == 3
        assert len(collection) == 3

    def test_empty_construction(self):
        collection = Collection()
        assert collection.count() == 0
        assert collection.to_array() == {}

    def test_non_string_keys_are_stringified(self):
        collection = Collection({1: "a"})
        assert collection.get(1) == "a"
        assert collection.get("1") == "a"
        assert collection.get_keys(False) == ["1"]


class TestCollectionMutation:
    """set / remove / clear / init semantics."""

    def test_set_existing_key_keeps_original_spelling(self, collection):
        collection.set("THREE", "updated")

        assert collection.get("three") == "updated"
        assert collection.get_keys(False) == ["one", "Three", "five"]
        assert collection.count() == 3

    def test_set_new_key(self, collection):
        collection.set("Seven", "eight")
        assert collection.get("seven") == "eight"
        assert collection.get_keys() == ["one", "three", "five", "seven"]

    def test_remove(self, collection):
        collection.remove("THREE")

        assert not collection.has("three")
        assert collection.get_keys() == ["one", "five"]
        assert collection.get_keys(False) == ["one", "five"]

    def test_remove_missing_is_noop(self, collection):
        collection.remove("unknown")
        assert collection.count() == 3

    def test_clear(self, collection):
        collection.clear()
        assert collection.count() == 0
        assert collection.get_keys() == []

    def test_init_merges(self, collection):
        collection.init({"ONE": "uno", "nine": "ten"})

        assert collection.get("one") == "uno"
        assert collection.get_keys(False) == ["one", "Three", "five", "nine"]


class TestCollectionSensitive:
    """Case-sensitive mode."""

    def test_lookups_are_exact(self, sample_data):
        collection = Collection(sample_data, insensitive=False)

        assert collection.get("Three") == "four"
        assert collection.get("three") is None
        assert collection.has("Three")
        assert not collection.has("three")

    def test_keys_are_not_normalized(self, sample_data):
        collection = Collection(sample_data, insensitive=False)
        assert collection.get_keys() == ["one", "Three", "five"]

    def test_distinct_spellings_are_distinct_keys(self):
        collection = Collection({"a": 1, "A": 2}, insensitive=False)
        assert collection.count() == 2
        assert collection.get("A") == 2

    def test_default_follows_configuration(self, monkeypatch):
        monkeypatch.setenv("PHALCON_COLLECTION_INSENSITIVE", "false")
        reset_config()

        assert Collection().insensitive is False


class TestCollectionCast:
    """Typed retrieval."""

    @pytest.mark.parametrize(
        "value,cast,expected",
        [
            ("3306", "int", 3306),
            ("1.5", "float", 1.5),
            (42, "string", "42"),
            (1, "bool", True),
            ("x", "array", ["x"]),
        ],
    )
    def test_cast(self, value, cast, expected):
        collection = Collection({"value": value})
        assert collection.get("value", cast=cast) == expected

    def test_default_is_not_cast(self, collection):
        assert collection.get("missing", "fallback", cast="int") == "fallback"

    def test_invalid_conversion_propagates(self):
        collection = Collection({"port": "abc"})
        with pytest.raises(ValueError):
            collection.get("port", cast="int")

    def test_unknown_cast(self, collection):
        with pytest.raises(ValueError, match="Unknown cast"):
            collection.get("one", cast="matrix")


class TestCollectionMappingProtocol:
    """dict-like access layered on the explicit accessors."""

    def test_getitem(self, collection):
        assert collection["ONE"] == "two"

    def test_getitem_missing_raises(self, collection):
        with pytest.raises(KeyError):
            collection["missing"]

    def test_setitem(self, collection):
        collection["Five"] = 5
        assert collection.get("five") == 5
        assert collection.get_keys(False) == ["one", "Three", "five"]

    def test_delitem(self, collection):
        del collection["three"]
        assert "three" not in collection

    def test_delitem_missing_raises(self, collection):
        with pytest.raises(KeyError):
            del collection["missing"]

    def test_contains_and_iter(self, collection):
        assert "FIVE" in collection
        assert list(collection) == ["one", "Three", "five"]
        assert dict(collection.items()) == collection.to_array()

    def test_update(self, collection):
        collection.update({"ONE": 1})
        assert collection.get("one") == 1
        assert collection.count() == 3


class TestCollectionSerialization:
    """JSON and legacy serialized forms."""

    def test_to_json_uses_default_options(self):
        collection = Collection({"tag": "<a href='x'>&\"/"})

        assert collection.to_json() == (
            '{"tag":"\\u003Ca href=\\u0027x\\u0027\\u003E\\u0026\\u0022/"}'
        )

    def test_to_json_with_explicit_options(self):
        collection = Collection({"path": "a/b"})

        assert collection.to_json(JsonOption.NONE) == r'{"path":"a\/b"}'
        assert collection.to_json(JsonOption.UNESCAPED_SLASHES) == '{"path":"a/b"}'

    def test_json_serialize_expands_values(self):
        collection = Collection({"price": Money(10, "EUR"), "name": "ticket"})

        assert collection.json_serialize() == {
            "price": {"amount": 10, "currency": "EUR"},
            "name": "ticket",
        }

    def test_nested_collection_to_json(self):
        collection = Collection({"inner": Collection({"A": 1})})
        assert collection.to_json() == '{"inner":{"A":1}}'

    def test_serialize_round_trip(self, collection, sample_data):
        restored = Collection()
        restored.unserialize(collection.serialize())

        assert restored.to_array() == sample_data
        assert restored.get("three") == "four"

    def test_unserialize_merges(self, collection):
        restored = Collection({"Extra": True})
        restored.unserialize(collection.serialize())

        assert restored.get_keys(False) == ["Extra", "one", "Three", "five"]

    def test_unserialize_refuses_class_instances(self):
        payload = pickle.dumps({"amount": Decimal("1.5")})

        with pytest.raises(CollectionError, match="Refusing to unserialize"):
            Collection().unserialize(payload)

    @pytest.mark.parametrize("payload", [b"", b"not a pickle"])
    def test_unserialize_corrupt_payload(self, payload):
        with pytest.raises(CollectionError):
            Collection().unserialize(payload)

    def test_unserialize_requires_mapping(self):
        with pytest.raises(CollectionError, match="must be a mapping"):
            Collection().unserialize(pickle.dumps([1, 2, 3]))

    def test_pickle_preserves_mode(self, sample_data):
        collection = Collection(sample_data, insensitive=False)
        restored = pickle.loads(pickle.dumps(collection))

        assert restored.insensitive is False
        assert restored.to_array() == sample_data
