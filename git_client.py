"""Thin wrapper around the git CLI used to inspect working copies."""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import Iterable

from config import GIT_TIMEOUT_SECONDS
from exceptions import BareRepositoryError, GitCommandError

logger = logging.getLogger(__name__)


def run_git(repo_path: Path, args: Iterable[str], timeout: float = GIT_TIMEOUT_SECONDS) -> str:
    """Run a git command in a repo directory, returning stripped stdout.

    Raises GitCommandError on a non-zero exit, a timeout, or a missing git binary.
    """
    cmd = ["git", "-C", str(repo_path), *args]
    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        logger.debug("git timed out after %ss: %s", timeout, " ".join(cmd))
        raise GitCommandError(cmd, -1, "timed out") from exc
    except FileNotFoundError as exc:
        raise GitCommandError(cmd, -1, "git executable not found") from exc
    if result.returncode != 0:
        logger.debug("git exited %s: %s: %s", result.returncode, " ".join(cmd), result.stderr.strip())
        raise GitCommandError(cmd, result.returncode, result.stderr)
    return result.stdout.strip()


class GitClient:
    """Read-only queries against a single working copy.

    Never mutates the repository's history or working tree.
    """

    def __init__(self, timeout: float = GIT_TIMEOUT_SECONDS) -> None:
        self.timeout = timeout

    def _git(self, path: Path, args: list[str]) -> str:
        return run_git(path, args, timeout=self.timeout)

    def open(self, path: Path) -> Path:
        """Verify ``path`` is a repository and return its canonical location."""
        self._git(path, ["rev-parse", "--git-dir"])
        return Path(path).resolve()

    def is_bare(self, path: Path) -> bool:
        return self._git(path, ["rev-parse", "--is-bare-repository"]) == "true"

    def current_branch(self, path: Path) -> str | None:
        """Short name of the checked-out branch, or None when HEAD is detached."""
        try:
            return self._git(path, ["symbolic-ref", "--short", "-q", "HEAD"]) or None
        except GitCommandError:
            return None

    def head_commit(self, path: Path) -> str | None:
        try:
            return self._git(path, ["rev-parse", "--verify", "-q", "HEAD"]) or None
        except GitCommandError:
            return None

    def status_entries(self, path: Path) -> list[str]:
        """Porcelain lines for modified and untracked files."""
        if self.is_bare(path):
            raise BareRepositoryError(["git", "status"], 128, "bare repository")
        output = self._git(path, ["status", "--porcelain"])
        return [line for line in output.splitlines() if line.strip()]

    def resolve_ref(self, path: Path, name: str) -> str:
        """Commit id a short ref name points to."""
        return self._git(path, ["rev-parse", "--verify", "-q", f"{name}^{{commit}}"])

    def ahead_behind(self, path: Path, local: str, upstream: str) -> tuple[int, int]:
        """Return (ahead, behind) of ``local`` relative to ``upstream``.

        ahead: commits reachable from local but not upstream.
        behind: commits reachable from upstream but not local.
        """
        output = self._git(path, ["rev-list", "--left-right", "--count", f"{local}...{upstream}"])
        parts = output.split()
        if len(parts) != 2:
            raise GitCommandError(["git", "rev-list"], 0, f"unexpected output: {output!r}")
        return int(parts[0]), int(parts[1])

    def remotes(self, path: Path) -> list[str]:
        output = self._git(path, ["remote"])
        return [line.strip() for line in output.splitlines() if line.strip()]
