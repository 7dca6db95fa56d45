"""
Condition builders for MongoDB filter documents.

Each builder turns one raw value into an immutable Fragment of the form
{key: {operator: value}}. Fragments are combined with pipe(), which ANDs
them into a single CompositeFilter:

    query = pipe(
        object_id_match("_id", "5c7836b73a8de34c78fec399"),
        equal_to("status", 1),
        string_starts_with("model", "T654"),
    ).to_mongo()

    # {"_id": {"$eq": ObjectId(...)},
    #  "status": {"$eq": 1},
    #  "model": {"$regex": "^T654"}}

Merging is last-write-wins per top-level key: two fragments on the same key
do NOT combine their operators; the later fragment replaces the earlier
one. Use distinct keys per condition.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from bson import ObjectId

from ..exceptions import EmptyKey, InvalidConditionValue
from ..identifiers import string_to_object_id, strings_to_object_ids
from .base import DocumentClass, to_mongo_value

logger = logging.getLogger("mongoqb.conditions")


class ConditionKind(str, Enum):
    """Operator kind of a Condition."""

    EQUAL_TO = "equal_to"
    STARTS_WITH = "starts_with"
    OBJECT_ID = "object_id"
    IN = "in"
    OBJECT_ID_IN = "object_id_in"


@dataclass(frozen=True)
class Condition:
    """
    A key, a value and the operator kind that relates them.

    Validated on construction: the key must be non-empty and the value must
    suit the kind (a string for STARTS_WITH, a non-string iterable for the
    list kinds).
    """

    key: str
    value: Any
    kind: ConditionKind = ConditionKind.EQUAL_TO

    def __post_init__(self):
        if not isinstance(self.key, str) or not self.key:
            raise EmptyKey("condition key")
        try:
            object.__setattr__(self, "kind", ConditionKind(self.kind))
        except ValueError as e:
            raise InvalidConditionValue(self.key, str(self.kind), self.value) from e

        if self.kind is ConditionKind.STARTS_WITH and not isinstance(self.value, str):
            raise InvalidConditionValue(self.key, self.kind.value, self.value)

        if self.kind in (ConditionKind.IN, ConditionKind.OBJECT_ID_IN):
            if isinstance(self.value, (str, bytes)) or not isinstance(self.value, Iterable):
                raise InvalidConditionValue(self.key, self.kind.value, self.value)

        if self.kind is ConditionKind.OBJECT_ID and not isinstance(self.value, (str, ObjectId)):
            raise InvalidConditionValue(self.key, self.kind.value, self.value)


@dataclass(frozen=True)
class Fragment:
    """A single filter condition: {key: {operator: value}}."""

    key: str
    operator: str
    value: Any

    def to_mongo(self, document_class: DocumentClass = dict) -> Any:
        inner = document_class()
        inner[self.operator] = to_mongo_value(self.value, document_class)
        doc = document_class()
        doc[self.key] = inner
        return doc


@dataclass(frozen=True)
class CompositeFilter:
    """Fragments ANDed together, kept in insertion order."""

    fragments: tuple[Fragment, ...] = ()

    def __iter__(self) -> Iterator[Fragment]:
        return iter(self.fragments)

    def __len__(self) -> int:
        return len(self.fragments)

    @property
    def keys(self) -> list[str]:
        """Distinct top-level keys in first-seen order."""
        return list(dict.fromkeys(f.key for f in self.fragments))

    def to_mongo(self, document_class: DocumentClass = dict) -> Any:
        doc = document_class()
        for fragment in self.fragments:
            # Same key twice: later value replaces, position stays first-seen
            doc[fragment.key] = fragment.to_mongo(document_class)[fragment.key]
        return doc


def build_fragment(condition: Condition, *, allow_fallback: bool = False) -> Fragment:
    """
    Build the Fragment for an already-validated Condition.

    Args:
        condition: Condition to convert
        allow_fallback: For ObjectId kinds, substitute a generated id on
            invalid input instead of raising InvalidIdentifier

    Returns:
        Immutable Fragment
    """
    kind = condition.kind
    key = condition.key

    if kind is ConditionKind.EQUAL_TO:
        return Fragment(key, "$eq", condition.value)

    if kind is ConditionKind.STARTS_WITH:
        return Fragment(key, "$regex", "^" + re.escape(condition.value))

    if kind is ConditionKind.OBJECT_ID:
        oid = string_to_object_id(condition.value, allow_fallback=allow_fallback)
        return Fragment(key, "$eq", oid)

    if kind is ConditionKind.IN:
        return Fragment(key, "$in", tuple(condition.value))

    if kind is ConditionKind.OBJECT_ID_IN:
        oids = strings_to_object_ids(condition.value, allow_fallback=allow_fallback)
        return Fragment(key, "$in", tuple(oids))

    raise InvalidConditionValue(key, str(kind), condition.value)


def equal_to(key: str, value: Any) -> Fragment:
    """{key: {"$eq": value}}"""
    return build_fragment(Condition(key, value, ConditionKind.EQUAL_TO))


def string_starts_with(key: str, value: str) -> Fragment:
    """{key: {"$regex": "^" + escaped value}}, an anchored literal prefix match."""
    return build_fragment(Condition(key, value, ConditionKind.STARTS_WITH))


def object_id_match(key: str, value: str | ObjectId, *, allow_fallback: bool = False) -> Fragment:
    """{key: {"$eq": ObjectId(value)}}; raises InvalidIdentifier on bad hex."""
    return build_fragment(
        Condition(key, value, ConditionKind.OBJECT_ID), allow_fallback=allow_fallback
    )


def value_in(key: str, values: Iterable[Any]) -> Fragment:
    """{key: {"$in": [values...]}}"""
    return build_fragment(Condition(key, values, ConditionKind.IN))


def object_id_in(
    key: str, values: Iterable[str | ObjectId], *, allow_fallback: bool = False
) -> Fragment:
    """{key: {"$in": [ObjectId(v) ...]}}"""
    return build_fragment(
        Condition(key, values, ConditionKind.OBJECT_ID_IN), allow_fallback=allow_fallback
    )


def pipe(*parts: Fragment | CompositeFilter) -> CompositeFilter:
    """
    AND fragments together into one CompositeFilter.

    Nested CompositeFilters are flattened in place. When two fragments share
    a top-level key the last one wins.
    """
    fragments: list[Fragment] = []
    for part in parts:
        if isinstance(part, CompositeFilter):
            fragments.extend(part.fragments)
        elif isinstance(part, Fragment):
            fragments.append(part)
        else:
            raise InvalidConditionValue("pipe", "fragment", part)

    composite = CompositeFilter(tuple(fragments))
    if len(composite.keys) != len(fragments):
        logger.debug(
            f"Composite filter has repeated keys; last fragment wins for {composite.keys}"
        )
    return composite
