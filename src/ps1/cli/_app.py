"""The command-line interface for ps1."""
# ruff: noqa: TC003  # Path needed at runtime for cyclopts parameter parsing

import os
import time
from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from rich.console import Console

from ps1._duration import format_duration_ms
from ps1._prompt import render_git_status, render_prompt
from ps1._styled import Shell
from ps1.config import safe_load_config
from ps1.git import status as git_status
from ps1.utils import (
    create_logger,
    create_null_logger,
    is_privileged_user,
    shorten_path,
)

DUMP_TIME_COMMAND = "dump_time"

_HELP = "A fast, git-aware shell prompt."


def parse_elapsed_ms(value: str | None) -> int | None:
    """Parse the elapsed-milliseconds argument.

    Returns:
        The value as an int, or None if absent or not an unsigned integer.
    """
    if value is None or not (value.isascii() and value.isdigit()):
        return None
    return int(value)


def _current_dir() -> Path:
    try:
        return Path.cwd()
    except OSError:
        # The working directory was removed under the shell
        return Path(os.environ.get("PWD", "/"))


def _home_dir() -> Path | None:
    try:
        return Path.home()
    except RuntimeError:
        return None


def create_app(
    console: Console | None = None,
    error_console: Console | None = None,
    *,
    exit_on_error: bool = True,
) -> App:
    if console is None:
        console = Console()
    if error_console is None:
        error_console = Console(stderr=True)
    app = App(
        name="ps1",
        help=_HELP,
        help_on_error=True,
        console=console,
        error_console=error_console,
        exit_on_error=exit_on_error,
    )

    @app.default
    def _prompt(  # pyright: ignore[reportUnusedFunction]
        last_exit_code: Annotated[
            str, Parameter(help="Exit code of the previous command.")
        ],
        hostname: Annotated[str, Parameter(help="Host name to display.")],
        elapsed_ms: Annotated[
            str | None,
            Parameter(help="Duration of the previous command in milliseconds."),
        ] = None,
        /,
        *,
        shell: Annotated[
            Shell | None, Parameter(help="Shell to render zero-width markers for.")
        ] = None,
        config: Annotated[
            Path | None, Parameter(name="--config", help="Path to config file.")
        ] = None,
    ) -> None:
        """Print the prompt.

        Args:
            last_exit_code: Exit code of the previous command.
            hostname: Host name to display.
            elapsed_ms: Duration of the previous command in milliseconds.
            shell: Shell to render zero-width markers for.
            config: Explicit path to config file.
        """
        started = time.perf_counter_ns()

        cli_overrides = {"shell": shell.value} if shell is not None else None
        loaded_config, config_error = safe_load_config(
            config_path=config, cli_overrides=cli_overrides
        )
        try:
            logger = create_logger(
                loaded_config.logging.file,
                level=loaded_config.logging.level.value,
                log_format=loaded_config.logging.format.value,  # type: ignore[arg-type]
            )
        except OSError:
            # Unwritable log file: render without logging
            logger = create_null_logger()
        if config_error is not None:
            logger.warning("config_load_failed", error=config_error)

        target_shell = loaded_config.shell
        cwd = _current_dir()

        elapsed = parse_elapsed_ms(elapsed_ms)
        if elapsed_ms is not None and elapsed is None:
            logger.debug("elapsed_ms_ignored", value=elapsed_ms)

        repo_status = git_status(cwd, logger=logger)

        prompt = render_prompt(
            hostname=hostname,
            cwd=shorten_path(cwd, _home_dir()),
            last_exit_code=last_exit_code,
            duration=format_duration_ms(elapsed) if elapsed is not None else None,
            git_status=(
                render_git_status(repo_status, target_shell)
                if repo_status is not None
                else None
            ),
            privileged=is_privileged_user(),
            shell=target_shell,
        )
        console.out(prompt, end="", highlight=False)

        logger.debug(
            "prompt_rendered",
            shell=target_shell.value,
            in_repository=repo_status is not None,
            render_ns=time.perf_counter_ns() - started,
        )

    @app.command(name=DUMP_TIME_COMMAND)
    def _dump_time() -> None:  # pyright: ignore[reportUnusedFunction]
        """Print the current epoch time in milliseconds."""
        console.out(str(time.time_ns() // 1_000_000), highlight=False)

    return app


def main() -> None:
    """Default entrypoint for the `ps1` CLI."""
    app = create_app()
    app()
