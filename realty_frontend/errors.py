"""
realty_frontend/errors.py
Error taxonomy shared by the session store, API client and services.

Local validation failures and remote failures use the same hierarchy so
callers can catch RealtyError at a view boundary and keep the user's input.
"""

from typing import Dict, Optional


class RealtyError(Exception):
    """Base class for every error raised by the frontend core."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ValidationError(RealtyError):
    """Field-scoped validation failure.

    Raised locally before any network call, or from a 400/422 response
    that carries field errors.
    """

    def __init__(
        self,
        errors: Dict[str, str],
        message: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        self.errors = dict(errors)
        if message is None:
            message = next(iter(self.errors.values()), "Invalid input")
        super().__init__(message, status_code)

    def error_for(self, field: str) -> Optional[str]:
        return self.errors.get(field)


class AuthenticationError(RealtyError):
    """Invalid credentials or missing session (HTTP 401)."""


class ForbiddenError(RealtyError):
    """Authenticated but not allowed (HTTP 403, or a non-landlord posting a listing)."""


class NotFoundError(RealtyError):
    """Referenced record does not exist (HTTP 404)."""


class ConflictError(RealtyError):
    """Duplicate username/email or similar uniqueness failure (HTTP 409)."""


class RequestFailed(RealtyError):
    """Any other non-success response from the backend."""


class NetworkUnreachable(RealtyError):
    """The request never got a response (connection error or timeout)."""
