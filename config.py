"""Runtime paths and logging for rgm."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from exceptions import ConfigError

DEFAULT_HOME = Path.home() / ".rgm"

CACHE_FILE_NAME = "rgm.json"
SHELL_FILE_NAME = "rgm.sh"
LOG_FILE_NAME = "rgm.log"

# Seconds before a single git invocation is abandoned
GIT_TIMEOUT_SECONDS = 5

# Input poll interval of the interactive view
TICK_MS = 250

LOG_FORMAT = "%(levelname)s - %(message)s"


def get_home_dir(override: str | Path | None = None) -> Path:
    """Get the directory holding the cache, shell and log files.

    Priority: override > RGM_HOME env var > ~/.rgm
    """
    if override:
        return Path(override).expanduser()
    env_home = os.getenv("RGM_HOME")
    if env_home:
        return Path(env_home).expanduser()
    return DEFAULT_HOME


@dataclass(frozen=True)
class AppPaths:
    """Well-known files used by one rgm process."""

    home: Path
    cache_file: Path
    shell_file: Path
    log_file: Path

    @classmethod
    def from_home(cls, home: Path) -> AppPaths:
        return cls(
            home=home,
            cache_file=home / CACHE_FILE_NAME,
            shell_file=home / SHELL_FILE_NAME,
            log_file=home / LOG_FILE_NAME,
        )

    def ensure_home(self) -> None:
        """Create the home directory, refusing to reuse a non-directory path."""
        if self.home.exists() and not self.home.is_dir():
            raise ConfigError(f"{self.home} exists but is not a directory.")
        try:
            self.home.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"Unable to create {self.home}: {exc}") from exc


def load_paths(override: str | Path | None = None) -> AppPaths:
    paths = AppPaths.from_home(get_home_dir(override))
    paths.ensure_home()
    return paths


def setup_logging(paths: AppPaths, verbose: bool = False) -> None:
    """Route all log records to the rgm log file.

    The interactive view owns the terminal, so nothing is logged to stderr.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        filename=str(paths.log_file),
        format=LOG_FORMAT,
        level=level,
        force=True,
    )
