"""
Error types raised by mongoqb builders and the template engine.

Every error derives from QueryBuilderError so callers can catch the whole
family at once. None of these are logged or swallowed inside the library;
they propagate to the immediate caller.
"""

from __future__ import annotations

from typing import Any


class QueryBuilderError(Exception):
    """Base exception for all mongoqb errors."""


class EmptyKey(QueryBuilderError, ValueError):
    """A condition, operation or stage key is empty."""

    def __init__(self, what: str = "key"):
        self.what = what
        super().__init__(f"{what} must be a non-empty string")


class InvalidConditionValue(QueryBuilderError, TypeError):
    """A condition value is not compatible with its condition kind."""

    def __init__(self, key: str, kind: str, value: Any):
        self.key = key
        self.kind = kind
        self.value = value
        super().__init__(
            f"value {value!r} for key '{key}' is not valid for a {kind} condition"
        )


class InvalidIdentifier(QueryBuilderError, ValueError):
    """A string could not be converted to an ObjectId."""

    def __init__(self, value: Any, reason: str | None = None):
        self.value = value
        message = f"'{value}' is not a valid ObjectId"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UndefinedVariable(QueryBuilderError, KeyError):
    """A template references a variable that was not supplied."""

    def __init__(self, name: str, detail: str | None = None):
        self.name = name
        self.detail = detail
        super().__init__(name)

    def __str__(self) -> str:
        if self.detail:
            return f"undefined template variable '{self.name}': {self.detail}"
        return f"undefined template variable '{self.name}'"


class TemplateSyntaxError(QueryBuilderError):
    """The template text itself could not be parsed."""

    def __init__(self, message: str, lineno: int | None = None):
        self.lineno = lineno
        if lineno is not None:
            message = f"line {lineno}: {message}"
        super().__init__(message)


class TemplateRenderError(QueryBuilderError):
    """The rendered template could not be decoded into a document."""

    def __init__(self, rendered_text: str, cause: BaseException):
        self.rendered_text = rendered_text
        self.cause = cause
        super().__init__(
            f"failed to decode rendered template: {cause}\n"
            f"--- rendered text ---\n{rendered_text}"
        )
