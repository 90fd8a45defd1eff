"""Git repo scanner: resolves branch, remotes and sync status for each working copy."""

from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Protocol

from exceptions import BareRepositoryError, GitCommandError
from models import Repo, Status, StatusKind

logger = logging.getLogger(__name__)

DEFAULT_REMOTE = "origin"
DETACHED_BRANCH = "HEAD"


class GitEngine(Protocol):
    def open(self, path: Path) -> Path: ...

    def current_branch(self, path: Path) -> str | None: ...

    def head_commit(self, path: Path) -> str | None: ...

    def status_entries(self, path: Path) -> list[str]: ...

    def resolve_ref(self, path: Path, name: str) -> str: ...

    def ahead_behind(self, path: Path, local: str, upstream: str) -> tuple[int, int]: ...

    def remotes(self, path: Path) -> list[str]: ...


def scan_repo(path: Path, git: GitEngine) -> Repo:
    """Resolve a single working copy into a fresh Repo record.

    Raises GitCommandError when the path cannot be opened; every other
    failure degrades to an unknown status or an empty remote list.
    """
    repo_path = git.open(path)
    branch, status = resolve_status(repo_path, git)
    return Repo(
        path=repo_path,
        branch=branch,
        status=status,
        remotes=_list_remotes(repo_path, git),
        alias=None,
        tags=[],
    )


def refresh_repo(repo: Repo, git: GitEngine) -> None:
    """Re-resolve branch, status and remotes in place, keeping alias and tags."""
    repo_path = git.open(repo.path)
    repo.branch, repo.status = resolve_status(repo_path, git)
    repo.remotes = _list_remotes(repo_path, git)


def resolve_status(path: Path, git: GitEngine) -> tuple[str, Status | None]:
    """Return (branch, status) for an opened working copy."""
    branch = git.current_branch(path)
    if branch is None and git.head_commit(path) is not None:
        return DETACHED_BRANCH, Status(kind=StatusKind.DETACHED)
    branch = branch or DETACHED_BRANCH

    try:
        dirty = git.status_entries(path)
    except BareRepositoryError:
        return branch, Status(kind=StatusKind.BARE)
    except GitCommandError as exc:
        logger.warning("Unable to read status of %s: %s", path, exc)
        return branch, None

    if dirty:
        return branch, Status(kind=StatusKind.DIRTY)
    return branch, _compare_with_remote(path, branch, git)


def _compare_with_remote(path: Path, branch: str, git: GitEngine) -> Status | None:
    upstream = f"{DEFAULT_REMOTE}/{branch}"
    try:
        local_id = git.resolve_ref(path, "HEAD")
        remote_id = git.resolve_ref(path, upstream)
        ahead, behind = git.ahead_behind(path, local_id, remote_id)
    except GitCommandError:
        # No origin remote or no tracking branch: status stays unknown
        logger.debug("No comparable %s for %s", upstream, path)
        return None
    if (ahead, behind) == (0, 0):
        return Status(kind=StatusKind.CLEAN)
    return Status.diverged(ahead=ahead, behind=behind)


def _list_remotes(path: Path, git: GitEngine) -> list[str]:
    try:
        return git.remotes(path)
    except GitCommandError as exc:
        logger.warning("Unable to list remotes of %s: %s", path, exc)
        return []


def scan_all(paths: list[Path], git: GitEngine) -> tuple[list[Repo], list[str], int]:
    """Scan all discovered working copies. Returns (repos, errors, duration_ms)."""
    start = time.monotonic()
    repos: list[Repo] = []
    errors: list[str] = []

    for path in paths:
        try:
            repos.append(scan_repo(path, git))
        except GitCommandError as e:
            logger.warning("Couldn't get repo info at path %s: %s", path, e)
            errors.append(f"{path}: {type(e).__name__}: {e}")

    duration_ms = int((time.monotonic() - start) * 1000)
    return repos, errors, duration_ms
