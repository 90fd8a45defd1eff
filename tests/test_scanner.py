"""Tests for status resolution against fake and real git engines."""

from pathlib import Path

import pytest

from conftest import FakeGit, FakeRepoState, commit, git, init_repo, requires_git
from exceptions import GitCommandError
from git_client import GitClient
from models import Status, StatusKind
from scanner import DETACHED_BRANCH, scan_all, scan_repo


def _scan(tmp_path: Path, **fields):
    path = tmp_path / "repo"
    path.mkdir(exist_ok=True)
    engine = FakeGit({path: FakeRepoState(**fields)})
    return scan_repo(path, engine)


def test_clean_when_even_with_origin(tmp_path) -> None:
    repo = _scan(tmp_path)
    assert repo.status == Status(kind=StatusKind.CLEAN)
    assert repo.branch == "main"
    assert repo.name == "repo"
    assert repo.alias is None
    assert repo.tags == []


def test_diverged_carries_ahead_then_behind(tmp_path) -> None:
    repo = _scan(tmp_path, ahead_behind=(2, 1))
    assert repo.status.kind is StatusKind.DIVERGED
    assert (repo.status.ahead, repo.status.behind) == (2, 1)


@pytest.mark.parametrize("counts", [(3, 0), (0, 4)])
def test_any_nonzero_count_is_diverged(tmp_path, counts) -> None:
    assert _scan(tmp_path, ahead_behind=counts).status == Status.diverged(*counts)


def test_dirty_working_tree_skips_remote_comparison(tmp_path) -> None:
    repo = _scan(tmp_path, dirty=[" M README.md"], ahead_behind=(5, 5))
    assert repo.status == Status(kind=StatusKind.DIRTY)


def test_bare_repository(tmp_path) -> None:
    assert _scan(tmp_path, bare=True).status == Status(kind=StatusKind.BARE)


def test_other_status_error_is_unknown(tmp_path) -> None:
    repo = _scan(tmp_path, status_error=True)
    assert repo.status is None
    assert repo.display_status.kind is StatusKind.OTHER


def test_missing_origin_branch_is_unknown(tmp_path) -> None:
    assert _scan(tmp_path, remote_refs={}).status is None


def test_detached_head(tmp_path) -> None:
    repo = _scan(tmp_path, branch=None, dirty=["?? new.txt"])
    assert repo.branch == DETACHED_BRANCH
    assert repo.status == Status(kind=StatusKind.DETACHED)


def test_remote_listing_failure_yields_empty_list(tmp_path) -> None:
    repo = _scan(tmp_path, remotes_error=True)
    assert repo.remotes == []
    assert repo.status == Status(kind=StatusKind.CLEAN)


def test_remotes_keep_engine_order_and_duplicates(tmp_path) -> None:
    assert _scan(tmp_path, remotes=["upstream", "origin", "origin"]).remotes == [
        "upstream",
        "origin",
        "origin",
    ]


def test_open_failure_propagates(tmp_path) -> None:
    with pytest.raises(GitCommandError):
        scan_repo(tmp_path, FakeGit())


def test_scan_all_drops_unopenable_paths(tmp_path) -> None:
    good = tmp_path / "good"
    bad = tmp_path / "bad"
    good.mkdir()
    bad.mkdir()
    engine = FakeGit({good: FakeRepoState(), bad: FakeRepoState(open_error=True)})

    repos, errors, duration_ms = scan_all([good, bad], engine)

    assert [repo.path for repo in repos] == [good.resolve()]
    assert len(errors) == 1 and "bad" in errors[0]
    assert duration_ms >= 0


@requires_git
def test_real_repository_two_ahead_one_behind(tmp_path) -> None:
    path = init_repo(tmp_path / "project")
    commit(path, "base")
    git(path, "branch", "upstream-state")
    commit(path, "local one")
    commit(path, "local two")
    git(path, "checkout", "-q", "upstream-state")
    commit(path, "remote one")
    git(path, "checkout", "-q", "main")
    git(path, "update-ref", "refs/remotes/origin/main", "upstream-state")
    git(path, "remote", "add", "origin", str(tmp_path / "nowhere.git"))

    repo = scan_repo(path, GitClient())

    assert repo.branch == "main"
    assert repo.status == Status.diverged(ahead=2, behind=1)
    assert repo.remotes == ["origin"]


@requires_git
def test_real_repository_clean_dirty_and_detached(tmp_path) -> None:
    path = init_repo(tmp_path / "project")
    first = commit(path, "base")
    git(path, "update-ref", "refs/remotes/origin/main", "HEAD")
    client = GitClient()

    assert scan_repo(path, client).status == Status(kind=StatusKind.CLEAN)

    (path / "scratch.txt").write_text("wip")
    assert scan_repo(path, client).status == Status(kind=StatusKind.DIRTY)

    (path / "scratch.txt").unlink()
    git(path, "checkout", "-q", first)
    repo = scan_repo(path, client)
    assert repo.branch == DETACHED_BRANCH
    assert repo.status == Status(kind=StatusKind.DETACHED)


@requires_git
def test_real_repository_without_remote_is_unknown(tmp_path) -> None:
    path = init_repo(tmp_path / "solo")
    commit(path, "base")

    repo = scan_repo(path, GitClient())

    assert repo.status is None
    assert repo.remotes == []
