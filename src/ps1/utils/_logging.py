"""Logging utilities for ps1.

This module provides standalone structlog logger factories. Each logger is
self-contained and does not modify global structlog configuration. Loggers
only ever write to files: stdout carries the prompt and stderr is shown to
the user on every redraw.
"""

from __future__ import annotations

import atexit
import logging
from os import getenv
from pathlib import Path
from typing import TYPE_CHECKING, Literal, cast

import structlog

if TYPE_CHECKING:
    from structlog.typing import FilteringBoundLogger

LogFormatType = Literal["json", "text"]

# ReturnLogger discards whatever gets past the CRITICAL filter
_DISABLED_LEVEL = logging.CRITICAL


def _log_level_from_string(level: str, *, respect_env: bool = True) -> int:
    """Convert a log level string to a logging level integer.

    Args:
        level: Log level string (debug, info, warning, error).
        respect_env: If True, PS1_DEBUG overrides to DEBUG level.

    Returns:
        The logging level as an integer, INFO for unknown names.
    """
    if respect_env and getenv("PS1_DEBUG", None):
        return logging.DEBUG

    log_levels = logging.getLevelNamesMapping()
    return log_levels.get(level.upper(), logging.INFO)


def create_null_logger() -> FilteringBoundLogger:
    """Create a logger that drops every event."""
    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            structlog.ReturnLogger(),
            wrapper_class=structlog.make_filtering_bound_logger(_DISABLED_LEVEL),
            context_class=dict,
        ),
    )


def create_logger(
    log_file: str = "",
    *,
    level: str = "warning",
    log_format: LogFormatType = "json",
) -> FilteringBoundLogger:
    """Create a standalone structlog logger appending to ``log_file``.

    The log level can be overridden by the PS1_DEBUG environment variable,
    which enables DEBUG level regardless of ``level``.

    Args:
        log_file: Path to the log file. Empty disables logging entirely.
        level: Log level threshold (debug, info, warning, error).
        log_format: Output format, either "json" or "text".

    Returns:
        A configured FilteringBoundLogger instance.

    Raises:
        OSError: If the log file or its directory cannot be created.
    """
    if not log_file:
        return create_null_logger()

    log_path = Path(log_file).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)

    effective_level = _log_level_from_string(level)

    processors: list[structlog.typing.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if log_format == "json":
        # Add dict_tracebacks for structured exception logging in JSON
        processors.append(structlog.processors.dict_tracebacks)
        processors.append(structlog.processors.JSONRenderer())
    else:
        # Text format: "timestamp [level] event key=value ..."
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    log_stream = log_path.open("a")
    _ = atexit.register(log_stream.close)
    logger_factory = structlog.WriteLoggerFactory(file=log_stream)

    return cast(
        "FilteringBoundLogger",
        structlog.wrap_logger(
            logger_factory(),
            processors=processors,
            wrapper_class=structlog.make_filtering_bound_logger(effective_level),
            context_class=dict,
        ),
    )
