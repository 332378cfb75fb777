# ruff: noqa: TC002, TC003  # Path and Repo needed at runtime
"""Dulwich-backed implementation of the VCS backend protocol.

All operations go through dulwich's pure-Python object store, so no git
executable is required. Dulwich failures are translated into VCSError
subclasses at this boundary.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import TYPE_CHECKING, Self

from dulwich import porcelain
from dulwich.objects import Commit, Tag
from dulwich.repo import Repo

from ps1.exceptions import RefResolutionError, VCSError
from ps1.git._common import (
    REMOTES_PREFIX,
    decode_bytes,
    decode_path,
    discover_repo,
    get_worktree_dir,
    strip_refs_heads,
)
from ps1.git._models import FileStatus, HeadInfo, StatusEntry

if TYPE_CHECKING:
    from collections.abc import Iterable

_STAGED_FLAGS: dict[str, FileStatus] = {
    "add": FileStatus.INDEX_NEW,
    "delete": FileStatus.INDEX_DELETED,
    "modify": FileStatus.INDEX_MODIFIED,
}

_MAX_TAG_DEPTH = 16


class DulwichRepository:
    """An open dulwich repository satisfying RepositoryHandle."""

    def __init__(self, repo: Repo) -> None:
        self._repo: Repo = repo

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
        self._repo.close()

    @property
    def worktree_dir(self) -> Path:
        return get_worktree_dir(self._repo)

    def head(self) -> HeadInfo:
        try:
            refnames, sha = self._repo.refs.follow(b"HEAD")
        except Exception as e:  # noqa: BLE001 - symref loops and corrupt refs
            msg = "Failed to read HEAD"
            raise RefResolutionError(msg, ref="HEAD") from e

        # refnames is the chain HEAD -> ... -> final ref
        branch = strip_refs_heads(refnames[-1]) if len(refnames) > 1 else None
        if sha is None:
            return HeadInfo(branch=branch, commit_id=None)
        return HeadInfo(branch=branch, commit_id=self._peel_to_commit(sha))

    def _peel_to_commit(self, sha: bytes) -> str:
        """Follow annotated tags until a commit is reached.

        Raises:
            RefResolutionError: If the object is missing or not a commit.
        """
        for _ in range(_MAX_TAG_DEPTH):
            try:
                obj = self._repo[sha]
            except Exception as e:  # noqa: BLE001 - missing or corrupt objects
                msg = f"Object not found: {decode_bytes(sha)}"
                raise RefResolutionError(msg, ref=decode_bytes(sha)) from e
            if isinstance(obj, Commit):
                return decode_bytes(obj.id)
            if not isinstance(obj, Tag):
                break
            _, sha = obj.object
        msg = f"Does not resolve to a commit: {decode_bytes(sha)}"
        raise RefResolutionError(msg, ref=decode_bytes(sha))

    def statuses(self) -> Iterable[StatusEntry]:
        try:
            raw = porcelain.status(self._repo, untracked_files="all")
        except Exception as e:  # noqa: BLE001 - dulwich raises many unrelated types
            msg = f"Failed to read status: {e}"
            raise VCSError(msg) from e

        flags: dict[str, FileStatus] = {}

        # raw.staged is a dict with keys: 'add', 'delete', 'modify'
        staged_dict = raw.staged  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
        for change_type, flag in _STAGED_FLAGS.items():
            for f in staged_dict.get(change_type, []):  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
                path = decode_path(f)  # pyright: ignore[reportUnknownArgumentType]
                flags[path] = flags.get(path, FileStatus.CURRENT) | flag

        worktree_dir = self.worktree_dir
        for f in raw.unstaged:  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
            path = decode_path(f)  # pyright: ignore[reportUnknownArgumentType]
            flag = (
                FileStatus.WT_MODIFIED
                if (worktree_dir / path).exists()
                else FileStatus.WT_DELETED
            )
            flags[path] = flags.get(path, FileStatus.CURRENT) | flag

        for f in raw.untracked:  # pyright: ignore[reportUnknownMemberType,reportUnknownVariableType]
            path = decode_path(f)  # pyright: ignore[reportUnknownArgumentType]
            flags[path] = flags.get(path, FileStatus.CURRENT) | FileStatus.WT_NEW

        return [StatusEntry(path=path, flags=flag) for path, flag in flags.items()]

    def _upstream_ref(self, branch: str) -> bytes | None:
        """Get the ref name of the configured upstream of ``branch``."""
        try:
            config = self._repo.get_config()
        except Exception as e:  # noqa: BLE001 - malformed config files
            msg = f"Failed to read config for branch {branch}: {e}"
            raise VCSError(msg) from e
        section = (b"branch", branch.encode())
        try:
            remote = config.get(section, b"remote")
            merge = config.get(section, b"merge")
        except KeyError:
            return None

        if remote == b".":
            return merge
        merge_branch = strip_refs_heads(merge)
        if merge_branch is None:
            return None
        remote_name = decode_bytes(remote)
        return f"{REMOTES_PREFIX}{remote_name}/{merge_branch}".encode()

    def upstream_target(self, branch: str) -> str | None:
        upstream_ref = self._upstream_ref(branch)
        if upstream_ref is None:
            return None
        try:
            sha = self._repo.refs[upstream_ref]
        except Exception as e:  # noqa: BLE001 - missing or unreadable ref files
            msg = f"Upstream not found: {decode_bytes(upstream_ref)}"
            raise RefResolutionError(msg, ref=decode_bytes(upstream_ref)) from e
        return self._peel_to_commit(sha)

    def ahead_behind(self, local: str, upstream: str) -> tuple[int, int]:
        local_sha = local.encode()
        upstream_sha = upstream.encode()
        try:
            ahead = sum(
                1
                for _ in self._repo.get_walker(
                    include=[local_sha], exclude=[upstream_sha]
                )
            )
            behind = sum(
                1
                for _ in self._repo.get_walker(
                    include=[upstream_sha], exclude=[local_sha]
                )
            )
        except Exception as e:  # noqa: BLE001 - missing or corrupt objects
            msg = f"Failed to walk history between {local} and {upstream}"
            raise RefResolutionError(msg) from e
        return ahead, behind


class DulwichBackend:
    """VCS backend that opens repositories with dulwich."""

    def open(self, path: Path) -> DulwichRepository:
        return DulwichRepository(discover_repo(path))
