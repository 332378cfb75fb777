"""Utilities used by the ps1 CLI."""

from ._app import DUMP_TIME_COMMAND, create_app, main, parse_elapsed_ms

__all__ = ["DUMP_TIME_COMMAND", "create_app", "main", "parse_elapsed_ms"]
