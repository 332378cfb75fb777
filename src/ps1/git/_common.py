"""Common git helper functions.

This module provides shared helpers used by the dulwich backend, including
repository discovery and byte/string conversion of dulwich values.
"""

import os
from pathlib import Path

from dulwich.errors import NotGitRepository
from dulwich.repo import Repo

from ps1.exceptions import RepositoryNotFoundError, VCSError

HEADS_PREFIX = "refs/heads/"
REMOTES_PREFIX = "refs/remotes/"


def decode_bytes(value: bytes | str) -> str:
    """Decode bytes to str if needed.

    Invalid UTF-8 is replaced rather than raised, so ref names read from a
    repository always decode to something printable.

    Args:
        value: A bytes or str value.

    Returns:
        The value as a string.
    """
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value


def decode_path(value: bytes | str) -> str:
    """Decode a worktree path the way the filesystem encodes it.

    Undecodable bytes survive as surrogate escapes, so the result can be
    joined onto the worktree directory and still name the same file.
    """
    return os.fsdecode(value)


def discover_repo(path: Path | str) -> Repo:
    """Discover the git repository containing ``path``.

    Args:
        path: Directory to start the search from. Ancestors are searched too.

    Returns:
        The discovered Repo instance.

    Raises:
        RepositoryNotFoundError: If no repository is found.
        VCSError: If a repository is found but cannot be opened.
    """
    try:
        return Repo.discover(str(path))
    except NotGitRepository as e:
        msg = f"Not inside a Git repository: {path}"
        raise RepositoryNotFoundError(msg, path=path) from e
    except Exception as e:  # noqa: BLE001 - malformed config or unreadable files
        msg = f"Failed to open repository at {path}: {e}"
        raise VCSError(msg) from e


def get_worktree_dir(repo: Repo) -> Path:
    """Get the working tree directory for a repository.

    Args:
        repo: The repository instance.

    Returns:
        Path to the working tree directory.
    """
    path = Path(decode_path(repo.path))
    # If path is .git directory, return parent
    if path.name == ".git":
        return path.parent
    return path


def strip_refs_heads(ref: bytes | str | None) -> str | None:
    """Strip the refs/heads/ prefix from a branch reference.

    Args:
        ref: Reference name (bytes or str).

    Returns:
        Branch name without prefix, or None if ``ref`` is None or not a local
        branch reference.
    """
    if ref is None:
        return None
    ref_str = decode_bytes(ref)
    if ref_str.startswith(HEADS_PREFIX):
        return ref_str[len(HEADS_PREFIX) :]
    return None
