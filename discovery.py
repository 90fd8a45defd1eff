"""Repo discovery: walks a root directory for git working copies."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Marker subdirectory identifying a working-copy root
GIT_MARKER = ".git"


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _log_walk_error(err: OSError) -> None:
    logger.warning("Skipping %s: %s", err.filename, err.strerror or err)


def discover_repos(root: Path) -> list[Path]:
    """Walk ``root`` depth-first and return every working-copy root found.

    Hidden directories below ``root`` are not descended into; ``root`` itself is
    always examined. Once a directory containing a ``.git`` subdirectory is found
    it is recorded and its subtree is skipped, so results never nest.
    Unreadable entries are logged and skipped.
    """
    root = Path(root).expanduser().resolve()
    found: list[Path] = []

    for dirpath, dirnames, _filenames in os.walk(root, topdown=True, onerror=_log_walk_error):
        if GIT_MARKER in dirnames and os.path.isdir(os.path.join(dirpath, GIT_MARKER)):
            found.append(Path(dirpath))
            dirnames.clear()
            continue
        # Prune in place so os.walk does not descend; keep listing order
        dirnames[:] = [name for name in dirnames if not _is_hidden(name)]

    logger.info("Discovered %d repos under %s", len(found), root)
    return found
