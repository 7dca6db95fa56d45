"""
mongoqb CLI Module.

Provides a Typer command-line interface for rendering query templates and
inspecting identifiers.
"""

from .app import app, run_cli

__all__ = ["app", "run_cli"]
