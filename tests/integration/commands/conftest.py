import os
from collections.abc import Callable
from pathlib import Path

import pytest
from pytest_mock import MockerFixture
from rich.console import Console

from ps1.cli import create_app


@pytest.fixture(autouse=True)
def isolated_env(
    monkeypatch: pytest.MonkeyPatch, mocker: MockerFixture, tmp_path: Path
) -> Path:
    """Isolate the CLI from the user's home, config file and privileges.

    Returns the fake home directory.
    """
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("PS1_"):
            monkeypatch.delenv(key)
    _ = mocker.patch(
        "ps1.config._loader.get_user_config_path",
        return_value=home / ".config" / "ps1" / "config.toml",
    )
    _ = mocker.patch("ps1.cli._app.is_privileged_user", return_value=False)
    return home


@pytest.fixture
def ps1_cli(console: Console) -> Callable[..., None]:
    """Create CLI app for testing.

    Returns a callable that runs the CLI and suppresses SystemExit.
    Use ps1_cli_with_exit_code when you need to check the exit code.
    """

    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> None:
        """Run CLI app and suppress SystemExit from cyclopts."""

        try:
            app(args)
        except SystemExit:
            pass

    return _run


@pytest.fixture
def ps1_cli_with_exit_code(console: Console) -> Callable[..., int]:
    """Create CLI app for testing that returns the exit code."""

    app = create_app(console=console, error_console=console)

    def _run(*args: str) -> int:
        """Run CLI app and return exit code (0 if no SystemExit)."""

        try:
            app(args)
        except SystemExit as e:
            if e.code is None:
                return 0
            return e.code if isinstance(e.code, int) else 1
        else:
            return 0

    return _run
