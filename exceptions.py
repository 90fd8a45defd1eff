"""Custom exception hierarchy for rgm."""


class RgmError(Exception):
    """Base error for all custom exceptions."""


class ConfigError(RgmError):
    """Raised when the rgm home directory cannot be used."""


class GitCommandError(RgmError):
    """Raised when a git invocation fails."""

    def __init__(self, command: list[str], returncode: int, stderr: str | None = None):
        message = "Git command failed"
        if command:
            message = f"Git command failed: {' '.join(command)}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr or ""


class BareRepositoryError(GitCommandError):
    """Raised when a work-tree operation is attempted on a bare repository."""


class CacheError(RgmError):
    """Raised when the repository cache file cannot be read or written."""


class TerminalError(RgmError):
    """Raised when the interactive view cannot use the terminal."""
