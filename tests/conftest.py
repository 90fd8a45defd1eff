"""Shared fixtures: a scriptable git engine and small index builders."""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from exceptions import BareRepositoryError, GitCommandError
from index import RepoIndex
from models import Repo

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


@dataclass
class FakeRepoState:
    branch: str | None = "main"
    head: str | None = "local-sha"
    dirty: list[str] = field(default_factory=list)
    bare: bool = False
    status_error: bool = False
    remote_refs: dict[str, str] = field(default_factory=lambda: {"origin/main": "remote-sha"})
    ahead_behind: tuple[int, int] = (0, 0)
    remotes: list[str] = field(default_factory=lambda: ["origin"])
    remotes_error: bool = False
    open_error: bool = False


class FakeGit:
    """In-memory stand-in for GitClient keyed by resolved path."""

    def __init__(self, repos: dict[Path, FakeRepoState] | None = None) -> None:
        self.repos = {Path(p).resolve(): state for p, state in (repos or {}).items()}
        self.calls: list[tuple[str, Path]] = []

    def _state(self, path: Path) -> FakeRepoState:
        return self.repos[Path(path).resolve()]

    def open(self, path: Path) -> Path:
        self.calls.append(("open", Path(path)))
        resolved = Path(path).resolve()
        state = self.repos.get(resolved)
        if state is None or state.open_error:
            raise GitCommandError(["git", "rev-parse"], 128, "not a git repository")
        return resolved

    def current_branch(self, path: Path) -> str | None:
        return self._state(path).branch

    def head_commit(self, path: Path) -> str | None:
        return self._state(path).head

    def status_entries(self, path: Path) -> list[str]:
        state = self._state(path)
        if state.bare:
            raise BareRepositoryError(["git", "status"], 128, "bare repository")
        if state.status_error:
            raise GitCommandError(["git", "status"], 128, "index corrupt")
        return list(state.dirty)

    def resolve_ref(self, path: Path, name: str) -> str:
        state = self._state(path)
        if name == "HEAD" and state.head:
            return state.head
        if name in state.remote_refs:
            return state.remote_refs[name]
        raise GitCommandError(["git", "rev-parse", name], 128, "unknown revision")

    def ahead_behind(self, path: Path, local: str, upstream: str) -> tuple[int, int]:
        return self._state(path).ahead_behind

    def remotes(self, path: Path) -> list[str]:
        state = self._state(path)
        if state.remotes_error:
            raise GitCommandError(["git", "remote"], 128, "bad config")
        return list(state.remotes)


def make_repo(path: Path | str, **fields) -> Repo:
    fields.setdefault("branch", "main")
    return Repo(path=Path(path), **fields)


@pytest.fixture
def cache_file(tmp_path: Path) -> Path:
    return tmp_path / "home" / "rgm.json"


@pytest.fixture
def make_index(tmp_path: Path, cache_file: Path):
    """Build an index of records named after ``names`` under tmp_path/work."""

    def _make(names: list[str]) -> RepoIndex:
        repos = [make_repo(tmp_path / "work" / name) for name in names]
        return RepoIndex(cache_file, repos)

    return _make


def git(cwd: Path, *args: str) -> str:
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=rgm",
            "-c", "user.email=rgm@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        cwd=str(cwd),
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout.strip()


def init_repo(path: Path, branch: str = "main") -> Path:
    path.mkdir(parents=True, exist_ok=True)
    git(path, "init", "-q")
    git(path, "symbolic-ref", "HEAD", f"refs/heads/{branch}")
    return path


def commit(path: Path, message: str) -> str:
    git(path, "commit", "-q", "--allow-empty", "-m", message)
    return git(path, "rev-parse", "HEAD")
