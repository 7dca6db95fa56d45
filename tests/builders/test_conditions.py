"""Tests for condition fragment builders."""

import re

import pytest
from bson import ObjectId, SON

from mongoqb.builders.conditions import (
    CompositeFilter,
    Condition,
    ConditionKind,
    Fragment,
    build_fragment,
    equal_to,
    object_id_in,
    object_id_match,
    pipe,
    string_starts_with,
    value_in,
)
from mongoqb.exceptions import EmptyKey, InvalidConditionValue, InvalidIdentifier


class TestEqualTo:
    """Test $eq fragments."""

    def test_builds_eq_document(self) -> None:
        """equal_to wraps the value in $eq under the key."""
        assert equal_to("status", 1).to_mongo() == {"status": {"$eq": 1}}

    def test_deterministic(self) -> None:
        """Identical inputs serialize identically."""
        first = equal_to("name", "john")
        second = equal_to("name", "john")
        assert first == second
        assert first.to_mongo() == second.to_mongo()

    def test_empty_key_rejected(self) -> None:
        with pytest.raises(EmptyKey):
            equal_to("", 1)

    def test_output_is_a_fresh_copy(self) -> None:
        """Mutating serialized output never changes the fragment."""
        fragment = equal_to("tags", ["a", "b"])
        doc = fragment.to_mongo()
        doc["tags"]["$eq"].append("c")
        doc["other"] = 1
        assert fragment.to_mongo() == {"tags": {"$eq": ["a", "b"]}}

    def test_fragment_is_immutable(self) -> None:
        fragment = equal_to("status", 1)
        with pytest.raises(AttributeError):
            fragment.value = 2  # type: ignore[misc]

    def test_custom_document_class(self) -> None:
        doc = equal_to("status", 1).to_mongo(SON)
        assert isinstance(doc, SON)
        assert isinstance(doc["status"], SON)


class TestStringStartsWith:
    """Test anchored prefix matches."""

    def test_plain_prefix(self) -> None:
        assert string_starts_with("model", "T654").to_mongo() == {
            "model": {"$regex": "^T654"}
        }

    def test_regex_metacharacters_are_escaped(self) -> None:
        """Literal value must never be interpreted as a pattern."""
        doc = string_starts_with("name", "a.b*(c)|d").to_mongo()
        pattern = doc["name"]["$regex"]

        assert pattern == "^" + re.escape("a.b*(c)|d")
        assert re.match(pattern, "a.b*(c)|d-suffix")
        assert not re.match(pattern, "axbbbcd")

    def test_non_string_value_rejected(self) -> None:
        with pytest.raises(InvalidConditionValue):
            string_starts_with("model", 654)  # type: ignore[arg-type]


class TestObjectIdMatch:
    """Test ObjectId equality fragments."""

    def test_round_trips_hex(self) -> None:
        """Converted identifier renders back to the same 24-char hex string."""
        fragment = object_id_match("_id", "5c7836b73a8de34c78fec399")
        oid = fragment.to_mongo()["_id"]["$eq"]

        assert isinstance(oid, ObjectId)
        assert str(oid) == "5c7836b73a8de34c78fec399"

    def test_accepts_object_id(self) -> None:
        oid = ObjectId()
        assert object_id_match("_id", oid).value == oid

    def test_invalid_hex_raises(self) -> None:
        """No silent substitution without opt-in."""
        with pytest.raises(InvalidIdentifier) as exc_info:
            object_id_match("_id", "not-a-valid-hex")
        assert exc_info.value.value == "not-a-valid-hex"

    def test_fallback_is_opt_in(self, caplog: pytest.LogCaptureFixture) -> None:
        """With allow_fallback a generated id is used and a warning logged."""
        with caplog.at_level("WARNING", logger="mongoqb.identifiers"):
            fragment = object_id_match("_id", "not-a-valid-hex", allow_fallback=True)

        assert isinstance(fragment.value, ObjectId)
        assert "not-a-valid-hex" in caplog.text

    def test_non_string_value_rejected(self) -> None:
        with pytest.raises(InvalidConditionValue):
            object_id_match("_id", 12345)  # type: ignore[arg-type]


class TestInFragments:
    """Test $in fragments."""

    def test_value_in(self) -> None:
        assert value_in("status", [0, 1]).to_mongo() == {"status": {"$in": [0, 1]}}

    def test_value_in_rejects_string(self) -> None:
        """A bare string is not treated as a list of characters."""
        with pytest.raises(InvalidConditionValue):
            value_in("status", "active")

    def test_object_id_in_preserves_order(self) -> None:
        ids = ["5c7836b73a8de34c78fec399", "000000000000000000000000"]
        doc = object_id_in("_id", ids).to_mongo()
        assert [str(o) for o in doc["_id"]["$in"]] == ids

    def test_object_id_in_invalid_member(self) -> None:
        with pytest.raises(InvalidIdentifier):
            object_id_in("_id", ["5c7836b73a8de34c78fec399", "bogus"])


class TestCondition:
    """Test Condition validation and dispatch."""

    def test_empty_key(self) -> None:
        with pytest.raises(EmptyKey):
            Condition("", 1)

    def test_default_kind_is_equality(self) -> None:
        assert build_fragment(Condition("status", 1)) == Fragment("status", "$eq", 1)

    def test_unknown_kind_rejected(self) -> None:
        """An unknown kind stays inside the QueryBuilderError hierarchy."""
        with pytest.raises(InvalidConditionValue):
            Condition("status", 1, "between")  # type: ignore[arg-type]

    def test_kind_accepts_string_value(self) -> None:
        assert Condition("model", "T6", "starts_with").kind is ConditionKind.STARTS_WITH

    def test_dispatch_by_kind(self) -> None:
        fragment = build_fragment(Condition("model", "T6", ConditionKind.STARTS_WITH))
        assert fragment.operator == "$regex"


class TestPipe:
    """Test AND composition of fragments."""

    def test_disjoint_keys_all_present(self) -> None:
        composite = pipe(equal_to("status", 1), string_starts_with("model", "T654"))
        assert composite.to_mongo() == {
            "status": {"$eq": 1},
            "model": {"$regex": "^T654"},
        }

    def test_same_key_last_write_wins(self) -> None:
        """Operators are not merged; the later fragment replaces the earlier."""
        composite = pipe(equal_to("status", 1), equal_to("status", 2))
        assert composite.to_mongo() == {"status": {"$eq": 2}}

    def test_insertion_order_preserved(self) -> None:
        composite = pipe(equal_to("b", 1), equal_to("a", 2), equal_to("c", 3))
        assert list(composite.to_mongo()) == ["b", "a", "c"]
        assert composite.keys == ["b", "a", "c"]

    def test_nested_composites_flatten(self) -> None:
        inner = pipe(equal_to("a", 1), equal_to("b", 2))
        outer = pipe(inner, equal_to("c", 3))
        assert len(outer) == 3
        assert list(outer.to_mongo()) == ["a", "b", "c"]

    def test_empty_pipe(self) -> None:
        assert pipe().to_mongo() == {}
        assert pipe() == CompositeFilter()

    def test_rejects_non_fragment(self) -> None:
        with pytest.raises(InvalidConditionValue):
            pipe({"status": 1})  # type: ignore[arg-type]
