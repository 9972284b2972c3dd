"""
Error taxonomy for the records API.

Every error carries the HTTP status it maps to; the API layer turns
them into JSON responses without retrying or swallowing them.
"""


class RecordsError(Exception):
    """Base exception for record operations."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RecordsError):
    """Payload carries nothing to save."""

    status_code = 400


class NotFound(RecordsError):
    """No record matches the (id, owner) pair."""

    status_code = 404


class AuthError(RecordsError):
    """Caller is not logged in (401) or sent a bad API key (403)."""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


class StoreError(RecordsError):
    """Underlying persistence failure."""

    status_code = 500
