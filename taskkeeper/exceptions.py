"""Custom exceptions for TaskKeeper.

Every exception carries a human-readable message and an optional details
dict. The Flask error handlers in main.py map each class to an HTTP status:

- ValidationError      -> 400
- AuthenticationError  -> 401
- ResourceNotFound     -> 404
- ConflictError        -> 409
- DatabaseError        -> 500
"""


class TaskKeeperError(Exception):
    """Base exception for all TaskKeeper errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ResourceNotFound(TaskKeeperError):
    """Requested resource does not exist (or is not visible to the caller)."""


class ValidationError(TaskKeeperError):
    """Request data failed validation."""


class AuthenticationError(TaskKeeperError):
    """Credentials or bearer token were missing, wrong, or expired."""


class ConflictError(TaskKeeperError):
    """Resource conflicts with an existing one (e.g. duplicate username)."""


class DatabaseError(TaskKeeperError):
    """Unexpected persistence failure."""
