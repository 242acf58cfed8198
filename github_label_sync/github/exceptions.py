"""Errors raised by label directory operations."""


class LabelSyncError(Exception):
    """Base class for errors raised while reading or writing labels."""

    def __init__(self, message: str, repository: str | None = None, cause: Exception | None = None) -> None:
        """Initialize the error with the affected repository and the original exception."""
        super().__init__(message)
        self.repository = repository
        self.cause = cause


class NotFoundError(LabelSyncError):
    """Raised when an edit or rename references a label that does not exist."""

    def __init__(self, name: str, repository: str | None = None, cause: Exception | None = None) -> None:
        """Initialize the error with the missing label name."""
        super().__init__(f"Label '{name}' not found in {repository}", repository=repository, cause=cause)
        self.name = name


class ConflictError(LabelSyncError):
    """Raised when a create or rename targets a label name that already exists."""

    def __init__(self, name: str, repository: str | None = None, cause: Exception | None = None) -> None:
        """Initialize the error with the conflicting label name."""
        super().__init__(f"Label '{name}' already exists in {repository}", repository=repository, cause=cause)
        self.name = name


class TransportError(LabelSyncError):
    """Raised on authentication failures, network faults, and rate limits."""

    pass
