"""Shared test fixtures for ps1 tests."""

import time
from dataclasses import dataclass
from pathlib import Path

import pytest
from dulwich import porcelain
from dulwich.objects import Commit
from dulwich.repo import Repo
from rich.console import Console

AUTHOR = b"Test <test@test.com>"


@dataclass(frozen=True, slots=True)
class GitRepo:
    """A real git repository created for a test."""

    path: Path
    repo: Repo

    def write(self, name: str, content: str) -> Path:
        file_path = self.path / name
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)
        return file_path

    def stage(self, *names: str) -> None:
        porcelain.add(str(self.path), paths=[str(self.path / n) for n in names])

    def commit(self, message: str = "commit") -> bytes:
        return porcelain.commit(
            str(self.path),
            message=message.encode(),
            author=AUTHOR,
            committer=AUTHOR,
            sign=False,
        )

    def commit_file(self, name: str, content: str, message: str = "commit") -> bytes:
        """Write, stage and commit a single file."""
        self.write(name, content)
        self.stage(name)
        return self.commit(message)

    def make_commit(self, parent: bytes, message: str) -> bytes:
        """Create a commit object on top of ``parent`` without touching HEAD.

        The new commit reuses the parent's tree, so neither the index nor
        the working tree changes.
        """
        parent_commit = self.repo[parent]
        assert isinstance(parent_commit, Commit)
        commit = Commit()
        commit.tree = parent_commit.tree
        commit.parents = [parent]
        commit.author = commit.committer = AUTHOR
        commit.author_time = commit.commit_time = int(time.time())
        commit.author_timezone = commit.commit_timezone = 0
        commit.encoding = b"UTF-8"
        commit.message = message.encode()
        self.repo.object_store.add_object(commit)
        return commit.id

    def set_upstream(self, branch: str, remote: str, target: bytes) -> None:
        """Point refs/remotes/<remote>/<branch> at ``target`` and track it."""
        self.repo.refs[f"refs/remotes/{remote}/{branch}".encode()] = target
        config = self.repo.get_config()
        section = (b"branch", branch.encode())
        config.set(section, b"remote", remote.encode())
        config.set(section, b"merge", f"refs/heads/{branch}".encode())
        config.write_to_path()

    def detach(self, sha: bytes) -> None:
        (self.path / ".git" / "HEAD").write_text(sha.decode() + "\n")


@pytest.fixture
def empty_repo(tmp_path: Path) -> GitRepo:
    """Create a git repository on branch main with no commits."""
    repo_path = tmp_path / "repo"
    repo_path.mkdir()
    repo = Repo.init(str(repo_path))
    repo.refs.set_symbolic_ref(b"HEAD", b"refs/heads/main")
    return GitRepo(path=repo_path, repo=repo)


@pytest.fixture
def git_repo(empty_repo: GitRepo) -> GitRepo:
    """Create a git repository on branch main with one commit."""
    empty_repo.commit_file("README.md", "# Test Repository\n", "Initial commit")
    return empty_repo


@pytest.fixture
def console() -> Console:
    return Console(
        width=70,
        force_terminal=True,
        highlight=False,
        color_system=None,
        legacy_windows=False,
    )
