"""
Pretty-printing for filters, pipelines and decoded documents.

Formatting is an injected collaborator: builders never print. Callers pick a
DocumentFormatter and, where output is wanted, a rich Console to write to.
The JSON output can be pasted straight into mongosh for debugging.
"""

from __future__ import annotations

from typing import Any, Literal, Protocol

from bson import json_util
from bson.json_util import JSONMode
from rich.console import Console
from rich.syntax import Syntax

from .builders.base import to_mongo_value
from .config.settings import Settings

_JSON_MODES = {
    "relaxed": JSONMode.RELAXED,
    "canonical": JSONMode.CANONICAL,
}


class DocumentFormatter(Protocol):
    """Turns a builder value or document into human-readable text."""

    def format(self, obj: Any) -> str: ...


class ExtendedJsonFormatter:
    """Formats documents as indented MongoDB Extended JSON."""

    def __init__(self, indent: int = 4, mode: Literal["relaxed", "canonical"] = "relaxed"):
        self.indent = indent
        self.mode = mode
        self._options = json_util.DEFAULT_JSON_OPTIONS.with_options(json_mode=_JSON_MODES[mode])

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExtendedJsonFormatter":
        return cls(indent=settings.pretty_indent, mode=settings.json_mode)

    def format(self, obj: Any) -> str:
        return json_util.dumps(
            to_mongo_value(obj),
            indent=self.indent or None,
            json_options=self._options,
        )


def print_document(
    obj: Any,
    formatter: DocumentFormatter,
    console: Console,
    *,
    highlight: bool = True,
) -> str:
    """
    Format obj and write it to console.

    Returns:
        The formatted text
    """
    text = formatter.format(obj)
    if highlight and console.is_terminal:
        console.print(Syntax(text, "json"))
    else:
        # soft_wrap keeps long lines intact for piping
        console.print(text, markup=False, highlight=False, soft_wrap=True)
    return text
