"""
Domain errors.

Services raise these; app.main maps them to HTTP responses:
- ValidationError       -> 400
- NotFoundError         -> 404
- StoreUnavailableError -> never surfaced, the store provider falls back
                           to the in-memory store instead
"""


class InternHubError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InternHubError):
    """A required field is missing or blank."""


class NotFoundError(InternHubError):
    """A referenced record does not exist."""


class StoreUnavailableError(InternHubError):
    """The durable store could not be reached."""
