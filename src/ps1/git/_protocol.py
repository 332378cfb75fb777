# ruff: noqa: TC003  # Path needed at runtime for Protocol method bodies
"""VCS backend protocol for type-safe dependency injection.

The repository state collector only needs a handful of operations from a
version-control system. This module defines them as runtime-checkable
Protocols so the dulwich backend and the in-memory fake are interchangeable.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ps1.git._models import HeadInfo, StatusEntry


@runtime_checkable
class RepositoryHandle(Protocol):
    """An open repository.

    Every method raises VCSError (or a subclass) when the underlying store
    cannot answer. Handles are context managers and must be closed.
    """

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...

    def close(self) -> None:
        """Release file handles held by the repository."""
        ...

    def head(self) -> HeadInfo:
        """Resolve HEAD.

        Returns:
            HeadInfo with the branch name (None when detached) and the commit
            HEAD peels to (None for an unborn branch).

        Raises:
            RefResolutionError: If HEAD is missing or dangling.
        """
        ...

    def statuses(self) -> Iterable[StatusEntry]:
        """Enumerate working-tree and index status, one entry per path."""
        ...

    def upstream_target(self, branch: str) -> str | None:
        """Get the commit id of the configured upstream of ``branch``.

        Returns:
            Hex commit id, or None if no upstream is configured.

        Raises:
            RefResolutionError: If an upstream is configured but missing.
        """
        ...

    def ahead_behind(self, local: str, upstream: str) -> tuple[int, int]:
        """Count commits unique to each side.

        Returns:
            (ahead, behind): commits reachable from ``local`` but not
            ``upstream``, and the reverse.
        """
        ...


@runtime_checkable
class VCSBackend(Protocol):
    """Factory for repository handles."""

    def open(self, path: Path) -> RepositoryHandle:
        """Open the repository containing ``path``.

        Searches ``path`` and its ancestors.

        Raises:
            RepositoryNotFoundError: If no repository is found.
        """
        ...
