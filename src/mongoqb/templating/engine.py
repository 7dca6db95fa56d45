"""
Template engine for MongoDB queries and pipelines.

A query or pipeline is written as text with placeholders, rendered against
a variable mapping and decoded into a document in one step:

    query = build(
        '{"_id": {"$oid": "{{ id }}"}, "name": {"$regex": "{{ name }}", "$options": "i"}}',
        {"id": "5c7836b73a8de34c78fec399", "name": "john|jane"},
    )

Values are substituted as raw text. The engine does not quote or escape
anything; the template author is responsible for producing valid output.
Booleans and None are written as the JSON literals true, false and null.
The `tojson` filter emits MongoDB Extended JSON for values that need it:

    '{"_id": {{ oid | tojson }}}'

Block and comment tags are doubled so they never clash with JSON text.
Loops and conditionals use `{%% for s in items %%}...{%% endfor %%}`,
and comments `{## ... ##}`, so a literal "{%" or "{#" inside a JSON string
is left alone.

The decode target is chosen by the caller through the decoder argument, a
callable taking the rendered text. The default decodes Extended JSON into a
dict with native BSON types (ObjectId, Regex, datetime). An object holding
"$regex" next to other query operators stays a plain query document.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any, TypeVar

import jinja2
from bson import json_util
from bson.json_util import JSONOptions
from jinja2 import meta

from ..config.settings import Settings
from ..exceptions import TemplateRenderError, TemplateSyntaxError, UndefinedVariable

logger = logging.getLogger("mongoqb.templating")

T = TypeVar("T")

_UNDEFINED_NAME_PATTERNS = (
    re.compile(r"'([^']+)' is undefined"),
    re.compile(r"has no attribute '([^']+)'"),
    re.compile(r"has no element '?([^']+?)'?$"),
)

# Keys of the legacy Extended JSON regex wrapper
_LEGACY_REGEX_KEYS = frozenset({"$regex", "$options"})

_JSON_LITERALS = {True: "true", False: "false", None: "null"}


def _query_pairs_hook(json_options: JSONOptions) -> Callable[[Sequence[tuple[str, Any]]], Any]:
    def hook(pairs: Sequence[tuple[str, Any]]) -> Any:
        keys = {k for k, _ in pairs}
        if "$regex" in keys and not keys <= _LEGACY_REGEX_KEYS:
            # $regex query operator with siblings such as $nin, not a BSON regex
            return json_options.document_class(pairs)
        return json_util.object_pairs_hook(pairs, json_options)

    return hook


def decode_extended_json(text: str) -> Any:
    """Decode MongoDB Extended JSON (relaxed or canonical) into a dict."""
    return json.loads(text, object_pairs_hook=_query_pairs_hook(json_util.DEFAULT_JSON_OPTIONS))


def decode_json(text: str) -> Any:
    """Decode plain JSON, leaving $oid/$date wrappers untouched."""
    return json.loads(text)


def extended_json_decoder(document_class: type) -> Callable[[str], Any]:
    """Build an Extended JSON decoder producing document_class mappings (e.g. bson.SON)."""
    options = json_util.DEFAULT_JSON_OPTIONS.with_options(document_class=document_class)
    hook = _query_pairs_hook(options)

    def _decode(text: str) -> Any:
        return json.loads(text, object_pairs_hook=hook)

    return _decode


def _json_scalar(value: Any) -> Any:
    """Write bool and None placeholders as JSON literals."""
    if value is None or isinstance(value, bool):
        return _JSON_LITERALS[value]
    return value


class TemplateEngine:
    """
    Renders query templates and decodes them.

    The underlying jinja2 environment is configured once and never mutated
    afterwards, so one engine may be shared freely between callers.
    """

    def __init__(
        self,
        variable_start_string: str = "{{",
        variable_end_string: str = "}}",
        block_start_string: str = "{%%",
        block_end_string: str = "%%}",
        comment_start_string: str = "{##",
        comment_end_string: str = "##}",
    ):
        self.environment = jinja2.Environment(
            variable_start_string=variable_start_string,
            variable_end_string=variable_end_string,
            block_start_string=block_start_string,
            block_end_string=block_end_string,
            comment_start_string=comment_start_string,
            comment_end_string=comment_end_string,
            undefined=jinja2.StrictUndefined,
            finalize=_json_scalar,
            autoescape=False,
            keep_trailing_newline=True,
        )
        self.environment.policies["json.dumps_function"] = json_util.dumps
        self.environment.policies["json.dumps_kwargs"] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> "TemplateEngine":
        return cls(
            variable_start_string=settings.variable_start_string,
            variable_end_string=settings.variable_end_string,
            block_start_string=settings.block_start_string,
            block_end_string=settings.block_end_string,
            comment_start_string=settings.comment_start_string,
            comment_end_string=settings.comment_end_string,
        )

    def variables(self, template: str) -> set[str]:
        """Names referenced by template that must be supplied by the caller."""
        return meta.find_undeclared_variables(self._parse(template))

    def render(self, template: str, variables: Mapping[str, Any]) -> str:
        """
        Substitute variables into template text.

        Raises:
            TemplateSyntaxError: Template text is malformed
            UndefinedVariable: Template references a name not in variables
        """
        ast = self._parse(template)

        missing = sorted(
            name
            for name in meta.find_undeclared_variables(ast)
            if name not in variables and name not in self.environment.globals
        )
        if missing:
            raise UndefinedVariable(missing[0])

        try:
            text = self.environment.from_string(ast).render(dict(variables))
        except jinja2.UndefinedError as e:
            raise UndefinedVariable(_undefined_name(e), detail=e.message) from e

        logger.debug(f"Rendered template ({len(text)} chars) with variables {sorted(variables)}")
        return text

    def build(
        self,
        template: str,
        variables: Mapping[str, Any],
        decoder: Callable[[str], T] = decode_extended_json,
    ) -> T:
        """
        Render template and decode the result with decoder.

        Args:
            template: Template text with {{ name }} placeholders
            variables: Values for the placeholders
            decoder: Callable converting the rendered text into the target type

        Returns:
            Decoded document

        Raises:
            TemplateSyntaxError: Template text is malformed
            UndefinedVariable: Template references a name not in variables
            TemplateRenderError: Rendered text could not be decoded
        """
        text = self.render(template, variables)
        try:
            return decoder(text)
        except Exception as e:
            raise TemplateRenderError(text, e) from e

    def build_file(
        self,
        path: str | Path,
        variables: Mapping[str, Any],
        decoder: Callable[[str], T] = decode_extended_json,
    ) -> T:
        """Like build() with the template read from a UTF-8 file."""
        template = Path(path).read_text(encoding="utf-8")
        return self.build(template, variables, decoder)

    def _parse(self, template: str):
        try:
            return self.environment.parse(template)
        except jinja2.TemplateSyntaxError as e:
            raise TemplateSyntaxError(e.message or str(e), lineno=e.lineno) from e


def _undefined_name(error: jinja2.UndefinedError) -> str:
    message = error.message or ""
    for pattern in _UNDEFINED_NAME_PATTERNS:
        found = pattern.search(message)
        if found:
            return found.group(1)
    return message


def render(template: str, variables: Mapping[str, Any], *, engine: TemplateEngine | None = None) -> str:
    """Render template text with a default (or given) engine."""
    return (engine or TemplateEngine()).render(template, variables)


def build(
    template: str,
    variables: Mapping[str, Any],
    decoder: Callable[[str], T] = decode_extended_json,
    *,
    engine: TemplateEngine | None = None,
) -> T:
    """Render template against variables and decode it with decoder."""
    return (engine or TemplateEngine()).build(template, variables, decoder)
