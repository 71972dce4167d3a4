"""Core custom exceptions for the application."""

from pathlib import Path


class CleanupError(Exception):
    """Base exception for temp-file cleanup failures.

    These never leave the tick that produced them; the reaper logs them and
    reports them in its CleanupReport.
    """

    action = "clean up"

    def __init__(self, path: Path, cause: OSError | None = None) -> None:
        self.path = path
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not {self.action} {path}{detail}")


class DirectoryAccessError(CleanupError):
    """The temp directory is missing or cannot be listed."""

    action = "list directory"


class StatError(CleanupError):
    """The modification time of an entry could not be read."""

    action = "read modification time of"


class DeleteError(CleanupError):
    """A stale entry could not be removed."""

    action = "delete"
