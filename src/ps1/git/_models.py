"""Repository state models.

This module defines the snapshot of repository state rendered in the prompt,
and the per-file status flags that backends report.
"""

from dataclasses import dataclass, field
from enum import Flag, auto
from typing import Final


@dataclass(frozen=True, slots=True)
class Branch:
    """HEAD points at a named local branch.

    Attributes:
        name: Short branch name, without the refs/heads/ prefix.
    """

    name: str


@dataclass(frozen=True, slots=True)
class Hash:
    """HEAD is detached.

    Attributes:
        commit_id: Full hex id of the commit HEAD resolves to.
    """

    commit_id: str


type RefName = Branch | Hash


@dataclass(frozen=True, slots=True)
class FilesStatus:
    """Dirty-file counts. Each file is counted in at most one bucket.

    Attributes:
        uncommitted_files: Tracked files with staged or unstaged changes.
        untracked_files: Files new in the working tree and unknown to the index.
    """

    uncommitted_files: int = 0
    untracked_files: int = 0


@dataclass(frozen=True, slots=True)
class UpstreamStatus:
    """Divergence between HEAD and its upstream branch.

    Attributes:
        commits_ahead: Commits reachable only from HEAD.
        commits_behind: Commits reachable only from the upstream.
    """

    commits_ahead: int = 0
    commits_behind: int = 0


@dataclass(frozen=True, slots=True)
class Status:
    """Snapshot of repository state for one prompt render.

    Attributes:
        ref_name: The checked-out branch or detached commit.
        files: Dirty-file counts.
        upstream: Divergence from the upstream branch, or None if HEAD has no
            resolvable upstream.
    """

    ref_name: RefName
    files: FilesStatus = field(default_factory=FilesStatus)
    upstream: UpstreamStatus | None = None


class FileStatus(Flag):
    """Status flags for a single path, split by index and working tree."""

    CURRENT = 0
    INDEX_NEW = auto()
    INDEX_MODIFIED = auto()
    INDEX_DELETED = auto()
    INDEX_RENAMED = auto()
    INDEX_TYPECHANGE = auto()
    WT_NEW = auto()
    WT_MODIFIED = auto()
    WT_DELETED = auto()
    WT_RENAMED = auto()
    WT_TYPECHANGE = auto()


UNCOMMITTED_FLAGS: Final = (
    FileStatus.WT_MODIFIED
    | FileStatus.WT_DELETED
    | FileStatus.WT_RENAMED
    | FileStatus.WT_TYPECHANGE
    | FileStatus.INDEX_NEW
    | FileStatus.INDEX_MODIFIED
    | FileStatus.INDEX_DELETED
    | FileStatus.INDEX_RENAMED
    | FileStatus.INDEX_TYPECHANGE
)


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A path with its combined status flags.

    Attributes:
        path: Repository-relative path.
        flags: Union of every index and working-tree flag for the path.
    """

    path: str
    flags: FileStatus


@dataclass(frozen=True, slots=True)
class HeadInfo:
    """What HEAD resolves to.

    Attributes:
        branch: Short branch name if HEAD is a symbolic ref to a local branch.
        commit_id: Hex id of the commit HEAD peels to, or None for an unborn
            branch.
    """

    branch: str | None
    commit_id: str | None

    @property
    def is_detached(self) -> bool:
        """Whether HEAD points at a commit rather than a local branch."""
        return self.branch is None
