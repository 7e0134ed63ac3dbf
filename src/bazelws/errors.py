"""Exception taxonomy for workspace writing.

All errors are raised synchronously and are never retried: they indicate
a bug in the calling test rather than a transient condition.
"""


class WorkspaceError(Exception):
    """Base class for every error raised by bazelws."""


class ContainmentViolation(WorkspaceError, ValueError):
    """A relative path resolved outside the workspace root."""

    def __init__(self, path: str, root: object) -> None:
        super().__init__(f"{path} is invalid. Only paths under {root} are allowed.")
        self.path = path
        self.root = root


class AlreadyExists(WorkspaceError, FileExistsError):
    """A create-mode write targeted a file that is already on disk."""


class InvalidOperation(WorkspaceError):
    """The operation is not permitted for this writer."""


class WriterClosed(InvalidOperation):
    """The writer session has already been closed."""
