"""Serialization shared by the condition and pipeline builders."""

from __future__ import annotations

import copy
from collections.abc import Mapping, MutableMapping
from typing import Any, Callable, Protocol, runtime_checkable

DocumentClass = Callable[[], MutableMapping[str, Any]]


@runtime_checkable
class MongoSerializable(Protocol):
    """Anything that can turn itself into a pymongo-ready structure."""

    def to_mongo(self, document_class: DocumentClass = dict) -> Any: ...


def to_mongo_value(value: Any, document_class: DocumentClass = dict) -> Any:
    """
    Serialize a builder value, mapping or list into fresh pymongo structures.

    Nested builder values are serialized recursively. Everything else is
    deep-copied so callers can never mutate a builder through its output.
    """
    if isinstance(value, MongoSerializable):
        return value.to_mongo(document_class)
    if isinstance(value, Mapping):
        doc = document_class()
        for k, v in value.items():
            doc[k] = to_mongo_value(v, document_class)
        return doc
    if isinstance(value, (list, tuple)):
        return [to_mongo_value(v, document_class) for v in value]
    return copy.deepcopy(value)
