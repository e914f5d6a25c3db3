"""
core/errors.py -- Domain error kinds shared by every layer.

Each error carries the HTTP status and the stable machine-readable code the API
layer puts into the ErrorResponse envelope. Errors are raised where the problem
is detected; api/main.py translates them into exactly one response.

Authentication and authorization errors deliberately carry fixed, low-detail
messages: a client must not be able to tell "no such account" from "wrong
password", or "expired token" from "forged token".
"""

from __future__ import annotations


class ContactListError(Exception):
    """Base class for errors that map onto a client-facing response."""

    status_code: int = 500
    code: str = "internal_error"
    message: str = "An unexpected error occurred."

    def __init__(self, message: str | None = None, detail: str | None = None) -> None:
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(ContactListError):
    """Missing or malformed input fields."""

    status_code = 422
    code = "validation_error"
    message = "Request validation failed."


class ConflictError(ContactListError):
    """A unique field (e.g. registration email) is already taken."""

    status_code = 409
    code = "conflict"
    message = "Resource already exists."


class UnauthenticatedError(ContactListError):
    """Missing, invalid or expired bearer token."""

    status_code = 401
    code = "unauthorized"
    message = "Not authorized."


class InvalidCredentialsError(UnauthenticatedError):
    """Login failed. Same message for unknown email and wrong password."""

    code = "invalid_credentials"
    message = "Invalid email or password."


class ForbiddenError(ContactListError):
    """Authenticated, but not the owner of the resource."""

    status_code = 403
    code = "forbidden"
    message = "Not authorized to access this resource."


class NotFoundError(ContactListError):
    status_code = 404
    code = "not_found"
    message = "Resource not found."


class RateLimitedError(ContactListError):
    """Too many login attempts from one address within the window."""

    status_code = 429
    code = "rate_limited"
    message = "Too many login attempts. Please try again later."

    def __init__(self, retry_after: int = 60, message: str | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(message)
