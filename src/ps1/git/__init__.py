"""Git repository state for the prompt.

This package collects a Status snapshot (ref name, dirty-file counts and
upstream divergence) through a pluggable VCS backend.
"""

from ps1.git._dulwich import DulwichBackend, DulwichRepository
from ps1.git._fake import FakeBackend, FakeRepository
from ps1.git._models import (
    UNCOMMITTED_FLAGS,
    Branch,
    FilesStatus,
    FileStatus,
    Hash,
    HeadInfo,
    RefName,
    Status,
    StatusEntry,
    UpstreamStatus,
)
from ps1.git._protocol import RepositoryHandle, VCSBackend
from ps1.git._status import count_files, status

__all__ = [
    "UNCOMMITTED_FLAGS",
    "Branch",
    "DulwichBackend",
    "DulwichRepository",
    "FakeBackend",
    "FakeRepository",
    "FileStatus",
    "FilesStatus",
    "Hash",
    "HeadInfo",
    "RefName",
    "RepositoryHandle",
    "Status",
    "StatusEntry",
    "UpstreamStatus",
    "VCSBackend",
    "count_files",
    "status",
]
