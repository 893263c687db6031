"""Domain error taxonomy.

Services raise these; the HTTP layer turns them into response envelopes with
the matching status code. ``message`` is always safe to show to clients.
"""

from typing import Any


class BookHubError(Exception):
    """Base class for errors that map onto a client-facing status code."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, *, errors: list[Any] | None = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class ValidationFailedError(BookHubError):
    """Malformed identifier, bad query input or an out-of-range value."""

    status_code = 400
    default_message = "Validation error"


class NotFoundError(BookHubError):
    """A referenced entity does not exist."""

    status_code = 404
    default_message = "Resource not found"


class ConflictError(BookHubError):
    """The request duplicates state that already exists."""

    status_code = 400
    default_message = "Resource already exists"


class ConcurrentUpdateError(BookHubError):
    """A version-checked write kept losing to concurrent writers."""

    status_code = 409
    default_message = "The resource was modified concurrently, please retry"


class AuthenticationError(BookHubError):
    status_code = 401
    default_message = "Not authorized"
