"""ps1 exceptions."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path


class PS1Error(Exception):
    """Base exception for ps1 errors."""


# =============================================================================
# VCS Exceptions
# =============================================================================


class VCSError(PS1Error):
    """Base exception for version-control backend failures.

    Raised by backends for anything that should make a piece of repository
    state absent from the prompt rather than abort it.
    """


class RepositoryNotFoundError(VCSError):
    """No repository exists at or above the requested path."""

    def __init__(self, message: str, *, path: Path | str | None = None) -> None:
        """Initialize with error message and the path that was searched."""
        super().__init__(message)
        self.path: Path | str | None = path


class RefResolutionError(VCSError):
    """A reference (HEAD, a branch, an upstream) could not be resolved."""

    def __init__(self, message: str, *, ref: str | None = None) -> None:
        """Initialize with error message and the offending reference."""
        super().__init__(message)
        self.ref: str | None = ref


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigError(PS1Error):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when configuration cannot be loaded or parsed."""

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        line: int | None = None,
        column: int | None = None,
    ) -> None:
        """Initialize with error message and optional location context."""
        super().__init__(message)
        self.path: Path | None = path
        self.line: int | None = line
        self.column: int | None = column
