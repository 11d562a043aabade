"""Services for indent business logic."""

from .exceptions import (
    IndentServiceError,
    IndentNotFoundError,
    EmptyIndentError,
    IndentStateError,
    IndentPermissionError,
    OverIssueError,
)
from .indents import create_indent, update_indent, approve_indent, reject_indent
from .issues import create_issue

__all__ = [
    # Exceptions
    'IndentServiceError',
    'IndentNotFoundError',
    'EmptyIndentError',
    'IndentStateError',
    'IndentPermissionError',
    'OverIssueError',
    # Services
    'create_indent',
    'update_indent',
    'approve_indent',
    'reject_indent',
    'create_issue',
]
