"""Domain failures raised by the forum services.

Anything that is not a :class:`ForumError` is treated as unexpected by the
HTTP layer.
"""


class ForumError(Exception):
    """Base class for failures the caller can act upon."""

    status_code = 400

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ForumError, LookupError):
    """Referenced row does not exist or has been soft-deleted."""

    status_code = 404


class ConflictError(ForumError):
    """Uniqueness or state violation (taken name, locked topic, nesting depth)."""

    status_code = 409


class InvalidInputError(ForumError, ValueError):
    """Malformed or out-of-range input."""

    status_code = 422


class PermissionDeniedError(ForumError):
    """Acting identity lacks the role required for the action."""

    status_code = 403
