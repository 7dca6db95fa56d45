"""
Aggregation pipeline builder.

Stages are built from condition fragments and named-field Operations and
collected into a Pipeline that preserves the caller's order exactly:

    pipeline = pipe(
        match(conditions.pipe(
            conditions.object_id_match("_id", "5c7836b73a8de34c78fec399"),
            conditions.equal_to("status", 1),
        )),
        project({"name": 1, "make": 1, "model": 1}),
    )
    collection.aggregate(pipeline.to_mongo())

No semantic validation of stage compatibility is performed; that is left to
the server executing the pipeline.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..exceptions import EmptyKey, InvalidConditionValue
from .base import DocumentClass, to_mongo_value
from .conditions import CompositeFilter, Fragment

logger = logging.getLogger("mongoqb.pipeline")


@dataclass(frozen=True, init=False)
class Operation:
    """
    Named-field mapping used as a stage body (projection, group, ...).

    Keys must be non-empty. Repeated keys collapse to the last value while
    keeping first-seen position. An empty Operation is valid.
    """

    fields: tuple[tuple[str, Any], ...] = field(default=())

    def __init__(self, fields: Mapping[str, Any] | Iterable[tuple[str, Any]] = ()):
        items = fields.items() if isinstance(fields, Mapping) else fields
        merged: dict[str, Any] = {}
        for key, value in items:
            if not isinstance(key, str) or not key:
                raise EmptyKey("operation key")
            merged[key] = value
        object.__setattr__(self, "fields", tuple(merged.items()))

    @classmethod
    def from_filter(cls, composite: CompositeFilter | Fragment) -> "Operation":
        """Wrap a filter's serialized form as an Operation."""
        return cls(composite.to_mongo())

    def __len__(self) -> int:
        return len(self.fields)

    def keys(self) -> list[str]:
        return [k for k, _ in self.fields]

    def to_mongo(self, document_class: DocumentClass = dict) -> Any:
        doc = document_class()
        for key, value in self.fields:
            doc[key] = to_mongo_value(value, document_class)
        return doc


@dataclass(frozen=True)
class Stage:
    """A single named aggregation step, e.g. {"$match": {...}}."""

    name: str
    body: Any

    def __post_init__(self):
        if not isinstance(self.name, str) or not self.name:
            raise EmptyKey("stage name")
        if not self.name.startswith("$"):
            object.__setattr__(self, "name", "$" + self.name)

    def to_mongo(self, document_class: DocumentClass = dict) -> Any:
        doc = document_class()
        doc[self.name] = to_mongo_value(self.body, document_class)
        return doc


@dataclass(frozen=True)
class Pipeline:
    """Ordered sequence of stages; order is execution order."""

    stages: tuple[Stage, ...] = ()

    def __iter__(self) -> Iterator[Stage]:
        return iter(self.stages)

    def __len__(self) -> int:
        return len(self.stages)

    def __add__(self, other: "Pipeline") -> "Pipeline":
        if not isinstance(other, Pipeline):
            return NotImplemented
        return Pipeline(self.stages + other.stages)

    def extend(self, *stages: Stage) -> "Pipeline":
        """Return a new Pipeline with stages appended."""
        return Pipeline(self.stages + _check_stages(stages))

    @property
    def stage_names(self) -> list[str]:
        return [s.name for s in self.stages]

    def to_mongo(self, document_class: DocumentClass = dict) -> list[Any]:
        return [s.to_mongo(document_class) for s in self.stages]


def _as_operation(value: Operation | Mapping[str, Any], stage_name: str) -> Operation:
    if isinstance(value, Operation):
        return value
    if isinstance(value, Mapping):
        return Operation(value)
    raise InvalidConditionValue(stage_name, "operation", value)


def _check_stages(stages: Iterable[Any]) -> tuple[Stage, ...]:
    checked = tuple(stages)
    for s in checked:
        if not isinstance(s, Stage):
            raise InvalidConditionValue("pipeline", "stage", s)
    return checked


def stage(name: str, body: Any) -> Stage:
    """Generic stage for operators without a dedicated builder."""
    return Stage(name, body)


def match(body: CompositeFilter | Fragment | Operation | Mapping[str, Any]) -> Stage:
    """$match stage wrapping a filter, a single fragment or an Operation."""
    if isinstance(body, (CompositeFilter, Fragment, Operation)):
        return Stage("$match", body)
    return Stage("$match", _as_operation(body, "$match"))


def project(operation: Operation | Mapping[str, Any]) -> Stage:
    """$project stage. An empty projection is accepted."""
    return Stage("$project", _as_operation(operation, "$project"))


def group(operation: Operation | Mapping[str, Any]) -> Stage:
    """$group stage; the operation should carry an "_id" entry."""
    return Stage("$group", _as_operation(operation, "$group"))


def sort(fields: Operation | Mapping[str, int]) -> Stage:
    """$sort stage; every direction must be 1, -1 or a {"$meta": ...} document."""
    operation = _as_operation(fields, "$sort")
    for key, direction in operation.fields:
        if isinstance(direction, Mapping):
            continue
        if isinstance(direction, bool) or direction not in (1, -1):
            raise InvalidConditionValue(key, "sort", direction)
    return Stage("$sort", operation)


def limit(n: int) -> Stage:
    if isinstance(n, bool) or not isinstance(n, int) or n <= 0:
        raise InvalidConditionValue("$limit", "limit", n)
    return Stage("$limit", n)


def skip(n: int) -> Stage:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise InvalidConditionValue("$skip", "skip", n)
    return Stage("$skip", n)


def unwind(path: str) -> Stage:
    """$unwind stage; a leading "$" is added when missing."""
    if not isinstance(path, str) or not path.lstrip("$"):
        raise EmptyKey("unwind path")
    return Stage("$unwind", path if path.startswith("$") else "$" + path)


def pipe(*stages: Stage) -> Pipeline:
    """Collect stages into a Pipeline in exactly the given order."""
    pipeline = Pipeline(_check_stages(stages))
    logger.debug(f"Built pipeline with stages {pipeline.stage_names}")
    return pipeline
