"""Persistent index of discovered repositories."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from pydantic import ValidationError

from discovery import discover_repos
from exceptions import CacheError, GitCommandError
from models import IndexDocument, Meta, Repo
from scanner import GitEngine, refresh_repo, scan_all

logger = logging.getLogger(__name__)


def _canonical(path: str | Path) -> Path:
    return Path(path).expanduser().resolve()


class RepoIndex:
    """Ordered collection of Repo records backed by a single cache file.

    Records keep scan order unless ``sort_by_name`` is applied. Paths are
    canonical and unique within an index.
    """

    def __init__(self, cache_file: Path, repos: Iterable[Repo] = ()) -> None:
        self.cache_file = cache_file
        self.repos: list[Repo] = []
        self._append_unique(repos)

    @property
    def size(self) -> int:
        return len(self.repos)

    def __len__(self) -> int:
        return len(self.repos)

    def __iter__(self):
        return iter(self.repos)

    def _append_unique(self, repos: Iterable[Repo]) -> int:
        known = {repo.path for repo in self.repos}
        added = 0
        for repo in repos:
            if repo.path in known:
                logger.debug("Ignoring duplicate record for %s", repo.path)
                continue
            known.add(repo.path)
            self.repos.append(repo)
            added += 1
        return added

    @classmethod
    def from_directory(cls, root: str | Path, cache_file: Path, git: GitEngine) -> RepoIndex:
        """Discover and resolve every working copy under ``root``."""
        paths = discover_repos(_canonical(root))
        repos, errors, duration_ms = scan_all(paths, git)
        logger.info(
            "Resolved %d of %d repos in %dms (%d errors)",
            len(repos),
            len(paths),
            duration_ms,
            len(errors),
        )
        return cls(cache_file, repos)

    @classmethod
    def load(cls, cache_file: Path) -> RepoIndex:
        try:
            contents = cache_file.read_bytes()
        except OSError as exc:
            raise CacheError(f"Unable to read {cache_file}: {exc}") from exc
        try:
            document = IndexDocument.model_validate_json(contents)
        except (ValidationError, UnicodeDecodeError) as exc:
            raise CacheError(f"Malformed cache file {cache_file}: {exc}") from exc
        if document.meta.size != len(document.repos):
            logger.warning(
                "Cache %s declares %d repos but holds %d",
                cache_file,
                document.meta.size,
                len(document.repos),
            )
        return cls(cache_file, document.repos)

    def to_document(self) -> IndexDocument:
        return IndexDocument(repos=self.repos, meta=Meta(size=self.size))

    def save(self) -> Path:
        """Overwrite the cache file with the whole index and return its path."""
        try:
            payload = self.to_document().model_dump_json(indent=2)
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            self.cache_file.write_text(payload, encoding="utf-8")
        except (OSError, ValueError) as exc:
            raise CacheError(f"Unable to write {self.cache_file}: {exc}") from exc
        logger.info("Saved %d repos to %s", self.size, self.cache_file)
        return self.cache_file

    def merge(self, other: RepoIndex) -> int:
        """Append records from ``other`` whose path is not indexed yet."""
        return self._append_unique(other.repos)

    def find(self, path: str | Path) -> Repo | None:
        target = _canonical(path)
        for repo in self.repos:
            if repo.path == target:
                return repo
        return None

    def update(self, git: GitEngine, under: str | Path | None = None) -> int:
        """Refresh every record (or those at/under ``under``) sequentially, then save.

        A record that cannot be opened keeps its previous values.
        Returns the number of records refreshed.
        """
        scope = _canonical(under) if under is not None else None
        refreshed = 0
        for repo in self.repos:
            if scope is not None and not repo.path.is_relative_to(scope):
                continue
            try:
                refresh_repo(repo, git)
            except GitCommandError as exc:
                logger.warning("Leaving %s stale: %s", repo.path, exc)
                continue
            refreshed += 1
        logger.info("Updated %d repos", refreshed)
        self.save()
        return refreshed

    def add_tags(self, repo: Repo, tags: Iterable[str]) -> bool:
        return repo.add_tags(tags)

    def add_alias(self, repo: Repo, alias: str) -> None:
        repo.add_alias(alias)

    def sort_by_name(self) -> None:
        self.repos.sort(key=lambda repo: repo.name)

    def longest_name_width(self) -> int:
        return max((len(repo.name) for repo in self.repos), default=0)
