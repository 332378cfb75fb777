"""Unit tests for the dulwich backend with a mocked repository."""

import os
import zlib
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from dulwich.objects import Commit, Tag
from pytest_mock import MockerFixture

from ps1.exceptions import RefResolutionError, VCSError
from ps1.git import DulwichRepository, FileStatus, HeadInfo, RepositoryHandle

SHA = b"a" * 40


def _mock_repo(path: Path) -> MagicMock:
    repo = MagicMock()
    repo.path = str(path)
    return repo


def _commit(sha: bytes = SHA) -> MagicMock:
    commit = MagicMock(spec=Commit)
    commit.id = sha
    return commit


class TestDulwichRepositoryProtocol:
    def test_is_repository_handle(self, tmp_path: Path) -> None:
        assert isinstance(DulwichRepository(_mock_repo(tmp_path)), RepositoryHandle)

    def test_context_manager_closes(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        with DulwichRepository(repo) as handle:
            assert isinstance(handle, DulwichRepository)
        repo.close.assert_called_once_with()


class TestHead:
    def test_branch(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.refs.follow.return_value = ([b"HEAD", b"refs/heads/main"], SHA)
        repo.__getitem__.return_value = _commit()

        assert DulwichRepository(repo).head() == HeadInfo("main", SHA.decode())

    def test_detached(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.refs.follow.return_value = ([b"HEAD"], SHA)
        repo.__getitem__.return_value = _commit()

        head = DulwichRepository(repo).head()

        assert head.is_detached is True
        assert head.commit_id == SHA.decode()

    def test_unborn(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.refs.follow.return_value = ([b"HEAD", b"refs/heads/main"], None)

        assert DulwichRepository(repo).head() == HeadInfo("main", None)

    def test_symbolic_ref_outside_heads_is_detached(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.refs.follow.return_value = ([b"HEAD", b"refs/remotes/origin/x"], SHA)
        repo.__getitem__.return_value = _commit()

        assert DulwichRepository(repo).head().branch is None

    def test_follow_failure_raises(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.refs.follow.side_effect = ValueError("symref loop")

        with pytest.raises(RefResolutionError) as exc_info:
            _ = DulwichRepository(repo).head()
        assert exc_info.value.ref == "HEAD"

    def test_missing_object_raises(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.refs.follow.return_value = ([b"HEAD", b"refs/heads/main"], SHA)
        repo.__getitem__.side_effect = KeyError(SHA)

        with pytest.raises(RefResolutionError):
            _ = DulwichRepository(repo).head()

    def test_corrupt_object_raises(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.refs.follow.return_value = ([b"HEAD", b"refs/heads/main"], SHA)
        repo.__getitem__.side_effect = zlib.error("incorrect header check")

        with pytest.raises(RefResolutionError):
            _ = DulwichRepository(repo).head()

    def test_non_utf8_branch_name_is_replaced(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.refs.follow.return_value = ([b"HEAD", b"refs/heads/caf\xe9"], SHA)
        repo.__getitem__.return_value = _commit()

        assert DulwichRepository(repo).head().branch == "caf\ufffd"

    def test_annotated_tag_is_peeled(self, tmp_path: Path) -> None:
        tag_sha = b"c" * 40
        tag = MagicMock(spec=Tag)
        tag.object = (Commit, SHA)
        objects = {tag_sha: tag, SHA: _commit()}
        repo = _mock_repo(tmp_path)
        repo.refs.follow.return_value = ([b"HEAD"], tag_sha)
        repo.__getitem__.side_effect = objects.__getitem__

        assert DulwichRepository(repo).head().commit_id == SHA.decode()


class TestStatuses:
    def test_maps_porcelain_status(
        self, tmp_path: Path, mocker: MockerFixture
    ) -> None:
        (tmp_path / "edited.py").write_text("x")
        raw = SimpleNamespace(
            staged={"add": [b"new.py"], "delete": [b"gone.py"], "modify": [b"m.py"]},
            unstaged=[b"edited.py", b"removed.py"],
            untracked=["notes.txt"],
        )
        _ = mocker.patch("ps1.git._dulwich.porcelain.status", return_value=raw)

        entries = DulwichRepository(_mock_repo(tmp_path)).statuses()
        flags = {entry.path: entry.flags for entry in entries}

        assert flags == {
            "new.py": FileStatus.INDEX_NEW,
            "gone.py": FileStatus.INDEX_DELETED,
            "m.py": FileStatus.INDEX_MODIFIED,
            "edited.py": FileStatus.WT_MODIFIED,
            "removed.py": FileStatus.WT_DELETED,
            "notes.txt": FileStatus.WT_NEW,
        }

    def test_staged_and_unstaged_flags_combine(
        self, tmp_path: Path, mocker: MockerFixture
    ) -> None:
        (tmp_path / "a.py").write_text("x")
        raw = SimpleNamespace(
            staged={"add": [b"a.py"], "delete": [], "modify": []},
            unstaged=[b"a.py"],
            untracked=[],
        )
        _ = mocker.patch("ps1.git._dulwich.porcelain.status", return_value=raw)

        entries = list(DulwichRepository(_mock_repo(tmp_path)).statuses())

        assert len(entries) == 1
        assert entries[0].flags == FileStatus.INDEX_NEW | FileStatus.WT_MODIFIED

    def test_failure_raises_vcs_error(
        self, tmp_path: Path, mocker: MockerFixture
    ) -> None:
        _ = mocker.patch(
            "ps1.git._dulwich.porcelain.status", side_effect=OSError("bad index")
        )

        with pytest.raises(VCSError, match="bad index"):
            _ = DulwichRepository(_mock_repo(tmp_path)).statuses()

    def test_non_utf8_paths_are_kept(
        self, tmp_path: Path, mocker: MockerFixture
    ) -> None:
        raw = SimpleNamespace(
            staged={"add": [], "delete": [], "modify": []},
            unstaged=[b"r\xe9sum\xe9.md"],
            untracked=[b"caf\xe9.txt"],
        )
        _ = mocker.patch("ps1.git._dulwich.porcelain.status", return_value=raw)

        entries = DulwichRepository(_mock_repo(tmp_path)).statuses()
        flags = {entry.path: entry.flags for entry in entries}

        assert flags == {
            os.fsdecode(b"r\xe9sum\xe9.md"): FileStatus.WT_DELETED,
            os.fsdecode(b"caf\xe9.txt"): FileStatus.WT_NEW,
        }


class TestUpstreamTarget:
    def _repo_with_config(
        self, tmp_path: Path, values: dict[bytes, bytes]
    ) -> MagicMock:
        repo = _mock_repo(tmp_path)

        def get(section: tuple[bytes, bytes], name: bytes) -> bytes:
            return values[name]

        repo.get_config.return_value.get.side_effect = get
        return repo

    def test_no_tracking_config(self, tmp_path: Path) -> None:
        repo = self._repo_with_config(tmp_path, {})
        assert DulwichRepository(repo).upstream_target("main") is None

    def test_remote_tracking_ref(self, tmp_path: Path) -> None:
        repo = self._repo_with_config(
            tmp_path, {b"remote": b"origin", b"merge": b"refs/heads/main"}
        )
        repo.refs.__getitem__.return_value = SHA
        repo.__getitem__.return_value = _commit()

        assert DulwichRepository(repo).upstream_target("main") == SHA.decode()
        repo.refs.__getitem__.assert_called_once_with(b"refs/remotes/origin/main")

    def test_local_upstream(self, tmp_path: Path) -> None:
        repo = self._repo_with_config(
            tmp_path, {b"remote": b".", b"merge": b"refs/heads/develop"}
        )
        repo.refs.__getitem__.return_value = SHA
        repo.__getitem__.return_value = _commit()

        _ = DulwichRepository(repo).upstream_target("feature")

        repo.refs.__getitem__.assert_called_once_with(b"refs/heads/develop")

    def test_missing_upstream_ref_raises(self, tmp_path: Path) -> None:
        repo = self._repo_with_config(
            tmp_path, {b"remote": b"origin", b"merge": b"refs/heads/main"}
        )
        repo.refs.__getitem__.side_effect = KeyError(b"refs/remotes/origin/main")

        with pytest.raises(RefResolutionError) as exc_info:
            _ = DulwichRepository(repo).upstream_target("main")
        assert exc_info.value.ref == "refs/remotes/origin/main"

    def test_unreadable_config_raises(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.get_config.side_effect = ValueError("invalid section header")

        with pytest.raises(VCSError, match="invalid section header"):
            _ = DulwichRepository(repo).upstream_target("main")


class TestAheadBehind:
    def test_counts_both_walks(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.get_walker.side_effect = [iter([1, 2]), iter([1])]

        assert DulwichRepository(repo).ahead_behind("a" * 40, "b" * 40) == (2, 1)

    def test_unknown_commit_raises(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.get_walker.side_effect = KeyError(b"a" * 40)

        with pytest.raises(RefResolutionError):
            _ = DulwichRepository(repo).ahead_behind("a" * 40, "b" * 40)

    def test_corrupt_object_raises(self, tmp_path: Path) -> None:
        repo = _mock_repo(tmp_path)
        repo.get_walker.side_effect = zlib.error("incorrect header check")

        with pytest.raises(RefResolutionError):
            _ = DulwichRepository(repo).ahead_behind("a" * 40, "b" * 40)
