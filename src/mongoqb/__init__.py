"""
mongoqb - Declarative MongoDB query and aggregation pipeline construction.

This package provides:
- Condition builders producing immutable filter fragments ($eq, prefix $regex, ObjectId)
- A pipeline builder assembling ordered aggregation stages
- A template engine rendering placeholder text into decoded query documents
- Extended JSON pretty-printing for debugging

Quick Start:
    ```python
    from mongoqb import conditions, pipeline

    stages = pipeline.pipe(
        pipeline.match(conditions.pipe(
            conditions.object_id_match("_id", "5c7836b73a8de34c78fec399"),
            conditions.equal_to("status", 1),
            conditions.string_starts_with("model", "T654"),
        )),
        pipeline.project({"name": 1, "make": 1, "model": 1}),
    )
    collection.aggregate(stages.to_mongo())
    ```
"""

# Builder exports
from .builders import conditions, pipeline
from .builders.conditions import (
    CompositeFilter,
    Condition,
    ConditionKind,
    Fragment,
)
from .builders.pipeline import Operation, Pipeline, Stage

# Templating exports
from .templating import TemplateEngine, build, render

# Identifier helpers
from .identifiers import is_object_id, string_to_object_id, strings_to_object_ids

# Formatting exports
from .formatting import DocumentFormatter, ExtendedJsonFormatter, print_document

# Config exports
from .config.settings import Settings, get_settings

# Errors
from .exceptions import (
    EmptyKey,
    InvalidConditionValue,
    InvalidIdentifier,
    QueryBuilderError,
    TemplateRenderError,
    TemplateSyntaxError,
    UndefinedVariable,
)

__version__ = "0.1.0"
__all__ = [
    # Builders
    "conditions",
    "pipeline",
    "Condition",
    "ConditionKind",
    "Fragment",
    "CompositeFilter",
    "Operation",
    "Stage",
    "Pipeline",
    # Templating
    "TemplateEngine",
    "build",
    "render",
    # Identifiers
    "is_object_id",
    "string_to_object_id",
    "strings_to_object_ids",
    # Formatting
    "DocumentFormatter",
    "ExtendedJsonFormatter",
    "print_document",
    # Config
    "Settings",
    "get_settings",
    # Errors
    "QueryBuilderError",
    "EmptyKey",
    "InvalidConditionValue",
    "InvalidIdentifier",
    "UndefinedVariable",
    "TemplateSyntaxError",
    "TemplateRenderError",
]
