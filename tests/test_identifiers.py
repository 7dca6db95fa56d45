"""Tests for ObjectId conversion helpers."""

import pytest
from bson import ObjectId

from mongoqb.exceptions import InvalidIdentifier
from mongoqb.identifiers import is_object_id, string_to_object_id, strings_to_object_ids


class TestStringToObjectId:
    """Test single identifier conversion."""

    def test_valid_hex(self) -> None:
        oid = string_to_object_id("5c7836b73a8de34c78fec399")
        assert oid == ObjectId("5c7836b73a8de34c78fec399")

    def test_object_id_passthrough(self) -> None:
        oid = ObjectId()
        assert string_to_object_id(oid) is oid

    @pytest.mark.parametrize(
        "value",
        ["not-a-valid-hex", "", "5c7836b73a8de34c78fec39", "zzzzzzzzzzzzzzzzzzzzzzzz", "abcdefghijkl"],
    )
    def test_invalid_raises(self, value: str) -> None:
        with pytest.raises(InvalidIdentifier):
            string_to_object_id(value)

    def test_fallback_generates_new_id(self) -> None:
        first = string_to_object_id("bogus", allow_fallback=True)
        second = string_to_object_id("bogus", allow_fallback=True)
        assert isinstance(first, ObjectId)
        assert first != second


class TestStringsToObjectIds:
    """Test list conversion."""

    def test_order_preserved(self) -> None:
        ids = ["000000000000000000000001", "000000000000000000000000"]
        assert [str(o) for o in strings_to_object_ids(ids)] == ids

    def test_any_invalid_raises(self) -> None:
        with pytest.raises(InvalidIdentifier):
            strings_to_object_ids(["000000000000000000000001", "nope"])

    def test_fallback_per_item(self) -> None:
        result = strings_to_object_ids(["000000000000000000000001", "nope"], allow_fallback=True)
        assert str(result[0]) == "000000000000000000000001"
        assert isinstance(result[1], ObjectId)


class TestIsObjectId:
    def test_values(self) -> None:
        assert is_object_id("5c7836b73a8de34c78fec399")
        assert is_object_id(ObjectId())
        assert not is_object_id("abcdefghijkl")
        assert not is_object_id(None)
