"""
Query document and aggregation pipeline builders.

Two builder families:
1. conditions - filter fragments ($eq, prefix $regex, ObjectId $eq/$in) and pipe()
2. pipeline   - aggregation stages ($match, $project, ...) and pipe()

Both expose a pipe() function; import them through their modules to keep
the two apart.
"""

from . import conditions, pipeline
from .base import MongoSerializable, to_mongo_value
from .conditions import (
    CompositeFilter,
    Condition,
    ConditionKind,
    Fragment,
    build_fragment,
    equal_to,
    object_id_in,
    object_id_match,
    string_starts_with,
    value_in,
)
from .pipeline import (
    Operation,
    Pipeline,
    Stage,
    group,
    limit,
    match,
    project,
    skip,
    sort,
    stage,
    unwind,
)

__all__ = [
    "conditions",
    "pipeline",
    "MongoSerializable",
    "to_mongo_value",
    # Conditions
    "Condition",
    "ConditionKind",
    "Fragment",
    "CompositeFilter",
    "build_fragment",
    "equal_to",
    "string_starts_with",
    "object_id_match",
    "value_in",
    "object_id_in",
    # Pipeline
    "Operation",
    "Stage",
    "Pipeline",
    "stage",
    "match",
    "project",
    "group",
    "sort",
    "limit",
    "skip",
    "unwind",
]
