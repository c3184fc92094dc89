"""Domain errors raised by the notes services.

Each error carries a machine-readable ``kind`` that the API layer renders
into an ``ErrorResponse``. None of them are retried: they are deterministic
rejections, not transient faults.
"""


class NotesError(Exception):
    """Base class for rejections surfaced to the caller."""

    kind = "error"


class NotFoundError(NotesError):
    """Raised when the requested note or comment does not exist."""

    kind = "not_found"


class ForbiddenError(NotesError):
    """Raised when the entity exists but the requester lacks the right."""

    kind = "forbidden"


class InvalidInputError(NotesError):
    """Raised for malformed or missing required input."""

    kind = "validation_error"


class QuotaExceededError(NotesError):
    """Raised when a user has hit the daily upload limit."""

    kind = "quota_exceeded"

    def __init__(self, limit: int) -> None:
        super().__init__(f"Daily upload limit reached ({limit})")
        self.limit = limit
