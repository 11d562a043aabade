"""Domain-specific exceptions for indent and issue services."""


class IndentServiceError(Exception):
    """Base exception for indent services."""
    pass


class IndentNotFoundError(IndentServiceError):
    """Raised when an indent does not exist."""
    pass


class EmptyIndentError(IndentServiceError):
    """Raised when an indent or issue has no lines."""
    pass


class IndentStateError(IndentServiceError):
    """Raised when an indent is not in the status an action requires."""
    pass


class IndentPermissionError(IndentServiceError):
    """Raised when a user may not modify an indent."""
    pass


class OverIssueError(IndentServiceError):
    """Raised when issuing more than an indent line still needs."""
    pass
