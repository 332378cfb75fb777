# ruff: noqa: TC003  # Path needed at runtime
"""Repository state collection.

Collects a Status snapshot from three independently failing sources: HEAD,
the working tree/index status, and the upstream comparison. HEAD and status
are mandatory; the upstream is best effort.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ps1.exceptions import VCSError
from ps1.git._dulwich import DulwichBackend
from ps1.git._models import (
    UNCOMMITTED_FLAGS,
    Branch,
    FilesStatus,
    FileStatus,
    Hash,
    RefName,
    Status,
    UpstreamStatus,
)
from ps1.utils import create_null_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from structlog.typing import FilteringBoundLogger

    from ps1.git._models import HeadInfo, StatusEntry
    from ps1.git._protocol import RepositoryHandle, VCSBackend


def _ref_name(head: HeadInfo) -> RefName | None:
    """Pick the ref name to display, or None for an unborn branch."""
    if head.commit_id is None:
        return None
    if head.branch is not None:
        return Branch(head.branch)
    return Hash(head.commit_id)


def count_files(entries: Iterable[StatusEntry]) -> FilesStatus:
    """Classify status entries into untracked and uncommitted counts.

    An entry that is exactly WT_NEW is untracked. Any other entry carrying an
    index or working-tree change is uncommitted. Unchanged entries
    are not counted.
    """
    uncommitted = 0
    untracked = 0
    for entry in entries:
        if entry.flags == FileStatus.WT_NEW:
            untracked += 1
        elif entry.flags & UNCOMMITTED_FLAGS:
            uncommitted += 1
    return FilesStatus(uncommitted_files=uncommitted, untracked_files=untracked)


def _upstream_status(
    repo: RepositoryHandle, head: HeadInfo, logger: FilteringBoundLogger
) -> UpstreamStatus | None:
    if head.branch is None or head.commit_id is None:
        return None
    try:
        upstream = repo.upstream_target(head.branch)
        if upstream is None:
            return None
        ahead, behind = repo.ahead_behind(head.commit_id, upstream)
    except (VCSError, OSError) as e:
        logger.debug("upstream_unavailable", branch=head.branch, error=str(e))
        return None
    return UpstreamStatus(commits_ahead=ahead, commits_behind=behind)


def status(
    path: Path,
    *,
    backend: VCSBackend | None = None,
    logger: FilteringBoundLogger | None = None,
) -> Status | None:
    """Collect the repository state for the repository containing ``path``.

    Args:
        path: Any path inside the working tree; ancestors are searched.
        backend: VCS backend to use. Defaults to DulwichBackend.
        logger: Logger for soft failures. Defaults to a logger that drops
            everything.

    Returns:
        The Status snapshot, or None if ``path`` is not inside a repository,
        HEAD cannot be resolved, or the status cannot be enumerated.
    """
    if backend is None:
        backend = DulwichBackend()
    if logger is None:
        logger = create_null_logger()

    try:
        repo = backend.open(path)
    except (VCSError, OSError) as e:
        logger.debug("repository_unavailable", path=str(path), error=str(e))
        return None

    with repo:
        try:
            head = repo.head()
        except (VCSError, OSError) as e:
            logger.debug("head_unavailable", path=str(path), error=str(e))
            return None

        ref_name = _ref_name(head)
        if ref_name is None:
            logger.debug("head_unborn", path=str(path), branch=head.branch)
            return None

        try:
            files = count_files(repo.statuses())
        except (VCSError, OSError) as e:
            logger.debug("status_unavailable", path=str(path), error=str(e))
            return None

        upstream = _upstream_status(repo, head, logger)

    result = Status(ref_name=ref_name, files=files, upstream=upstream)
    logger.debug(
        "repository_state_collected",
        path=str(path),
        ref_name=str(ref_name),
        detached=head.is_detached,
        uncommitted_files=files.uncommitted_files,
        untracked_files=files.untracked_files,
        has_upstream=upstream is not None,
    )
    return result
