"""Error types surfaced by the ContextCoach services."""
from __future__ import annotations


class ContextCoachError(Exception):
    """Base class for errors the HTTP layer knows how to report."""

    status_code: int = 500
    error: str = "Internal Server Error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(ContextCoachError):
    """A referenced entity does not exist."""

    status_code = 404
    error = "Not Found"


class InvalidArgumentError(ContextCoachError):
    """Input was missing or malformed."""

    status_code = 400
    error = "Bad Request"


class ServiceError(ContextCoachError):
    """A service failed for a reason the caller cannot fix."""

    def __init__(self, message: str, *, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error = "Bad Request" if status_code == 400 else "Service Error"
