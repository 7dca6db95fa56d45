#!/usr/bin/env python3
"""
mongoqb CLI - Typer-based command-line interface.

Provides commands for:
- Rendering query/pipeline templates into Extended JSON
- Checking ObjectId strings
- Previewing escaped prefix-match fragments
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import typer
from bson import json_util
from bson.errors import BSONError
from rich.console import Console
from rich.markup import escape

from ..builders import conditions
from ..config.settings import get_settings
from ..exceptions import QueryBuilderError
from ..formatting import ExtendedJsonFormatter, print_document
from ..identifiers import is_object_id, string_to_object_id
from ..templating import TemplateEngine, decode_extended_json, decode_json

# Initialize Typer app
app = typer.Typer(
    name="mongoqb",
    help="mongoqb - Declarative MongoDB query and pipeline builder",
    add_completion=False,
)

# Rich console
console = Console()


def version_callback(value: bool):
    """Show version and exit."""
    if value:
        from .. import __version__

        console.print(f"mongoqb version: {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Enable debug logging",
    ),
):
    """
    mongoqb CLI - build MongoDB filters and pipelines from templates.

    Use 'mongoqb COMMAND --help' for command-specific help.
    """
    settings = get_settings()
    logging.basicConfig(
        level=logging.DEBUG if verbose else settings.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def parse_var_options(options: list[str]) -> dict[str, str]:
    """Parse repeated key=value options into a mapping."""
    variables: dict[str, str] = {}
    for option in options:
        key, sep, value = option.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected key=value, got '{option}'", param_hint="--var")
        variables[key] = value
    return variables


def _fail(error: Exception) -> None:
    console.print(f"[red]Error: {escape(str(error))}[/red]")
    raise typer.Exit(1)


@app.command()
def render(
    template: Path = typer.Argument(
        ...,
        help="Template file with {{ name }} placeholders",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    var: list[str] | None = typer.Option(
        None,
        "--var",
        "-V",
        help="Template variable as key=value (repeatable)",
    ),
    vars_file: Path | None = typer.Option(
        None,
        "--vars-file",
        "-f",
        help="Extended JSON file with template variables",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    plain_json: bool = typer.Option(
        False,
        "--plain-json",
        help="Decode as plain JSON instead of MongoDB Extended JSON",
    ),
    indent: int | None = typer.Option(
        None,
        "--indent",
        "-i",
        min=0,
        max=16,
        help="Indentation of printed output (default from settings)",
    ),
):
    """
    Render a template and print the decoded document.
    """
    settings = get_settings()

    variables: dict[str, Any] = {}
    if vars_file is not None:
        try:
            loaded = json_util.loads(vars_file.read_text(encoding="utf-8"))
        except (ValueError, TypeError, BSONError) as e:
            _fail(e)
        if not isinstance(loaded, dict):
            _fail(ValueError(f"{vars_file} must contain a JSON object"))
        variables.update(loaded)
    variables.update(parse_var_options(var or []))

    engine = TemplateEngine.from_settings(settings)
    decoder = decode_json if plain_json else decode_extended_json
    try:
        document = engine.build_file(template, variables, decoder)
    except QueryBuilderError as e:
        _fail(e)

    formatter = ExtendedJsonFormatter.from_settings(settings)
    if indent is not None:
        formatter = ExtendedJsonFormatter(indent=indent, mode=settings.json_mode)
    print_document(document, formatter, console)


@app.command(name="check-id")
def check_id(
    value: str = typer.Argument(..., help="Candidate ObjectId hex string"),
):
    """
    Check whether VALUE is a valid ObjectId.
    """
    if not is_object_id(value):
        console.print(f"[red]✗ '{escape(value)}' is not a valid ObjectId[/red]")
        raise typer.Exit(1)

    oid = string_to_object_id(value)
    console.print(f"[green]✓ {oid} is a valid ObjectId[/green]")
    console.print(f"  Generated: {oid.generation_time.isoformat()}")


@app.command(name="id-filter")
def id_filter(
    key: str = typer.Argument(..., help="Field name, usually _id"),
    values: list[str] = typer.Argument(..., help="One or more ObjectId hex strings"),
):
    """
    Print an ObjectId filter for KEY: $eq for one value, $in for several.

    Invalid ids fail unless MONGOQB_ALLOW_IDENTIFIER_FALLBACK is set.
    """
    settings = get_settings()
    fallback = settings.allow_identifier_fallback
    try:
        if len(values) == 1:
            fragment = conditions.object_id_match(key, values[0], allow_fallback=fallback)
        else:
            fragment = conditions.object_id_in(key, values, allow_fallback=fallback)
    except QueryBuilderError as e:
        _fail(e)

    print_document(fragment, ExtendedJsonFormatter.from_settings(settings), console, highlight=False)


@app.command(name="starts-with")
def starts_with(
    key: str = typer.Argument(..., help="Field name"),
    value: str = typer.Argument(..., help="Literal prefix to match"),
):
    """
    Print the anchored, escaped prefix-match filter for KEY and VALUE.
    """
    try:
        fragment = conditions.string_starts_with(key, value)
    except QueryBuilderError as e:
        _fail(e)

    formatter = ExtendedJsonFormatter.from_settings(get_settings())
    print_document(fragment, formatter, console, highlight=False)


def run_cli():
    """Entry point for the mongoqb console script."""
    app()


if __name__ == "__main__":
    run_cli()
