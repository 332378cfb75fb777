# ruff: noqa: TC003  # Path needed at runtime for dataclass fields
"""Fake VCS backend for testing.

This module provides FakeBackend and FakeRepository, which implement the
VCSBackend and RepositoryHandle protocols without requiring an actual git
repository.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType
from typing import Self

from ps1.exceptions import RefResolutionError, RepositoryNotFoundError, VCSError
from ps1.git._models import FileStatus, HeadInfo, StatusEntry


@dataclass(slots=True)
class FakeRepository:
    """In-memory repository state.

    Set fields directly to describe the scenario under test. Setting one of
    the ``*_error`` fields makes the corresponding operation raise it.

    Example:
        >>> repo = FakeRepository(branch="main", commit_id="a" * 40)
        >>> repo.entries["notes.txt"] = FileStatus.WT_NEW
        >>> backend = FakeBackend(repositories={Path("/work"): repo})
    """

    branch: str | None = None
    commit_id: str | None = None
    entries: dict[str, FileStatus] = field(default_factory=dict)
    upstreams: dict[str, str] = field(default_factory=dict)
    graph: dict[tuple[str, str], tuple[int, int]] = field(default_factory=dict)
    head_error: VCSError | None = None
    status_error: VCSError | None = None
    closed: bool = False

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self.closed = True

    def head(self) -> HeadInfo:
        if self.head_error is not None:
            raise self.head_error
        return HeadInfo(branch=self.branch, commit_id=self.commit_id)

    def statuses(self) -> Iterable[StatusEntry]:
        if self.status_error is not None:
            raise self.status_error
        return [StatusEntry(path=p, flags=f) for p, f in self.entries.items()]

    def upstream_target(self, branch: str) -> str | None:
        return self.upstreams.get(branch)

    def ahead_behind(self, local: str, upstream: str) -> tuple[int, int]:
        try:
            return self.graph[local, upstream]
        except KeyError as e:
            msg = f"No history between {local} and {upstream}"
            raise RefResolutionError(msg) from e


@dataclass(slots=True)
class FakeBackend:
    """Backend that serves FakeRepository instances by path.

    A path opens the repository registered at it or at its nearest ancestor,
    mirroring repository discovery.
    """

    repositories: dict[Path, FakeRepository] = field(default_factory=dict)
    opened: list[Path] = field(default_factory=list)

    def open(self, path: Path) -> FakeRepository:
        self.opened.append(path)
        for candidate in (path, *path.parents):
            if candidate in self.repositories:
                return self.repositories[candidate]
        msg = f"Not inside a Git repository: {path}"
        raise RepositoryNotFoundError(msg, path=path)
