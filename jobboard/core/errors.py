"""API exception taxonomy.

Every error a handler can raise maps to one envelope code and HTTP status.
The FastAPI exception handlers in ``jobboard.core.http`` render them.
"""
from typing import Any, Optional


class ApiError(Exception):
    """Base exception for the job board API."""

    code = "INTERNAL_SERVER_ERROR"
    status_code = 500
    default_message = "Something went wrong. Please try again later."

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class BadRequestError(ApiError):
    """Raised when a payload or request state is invalid."""

    code = "BAD_REQUEST"
    status_code = 400
    default_message = "Bad request"


class UnauthorizedError(ApiError):
    """Raised on missing/invalid identity or an ownership mismatch."""

    code = "UNAUTHORIZED"
    status_code = 401
    default_message = "Unauthorized access"


class ForbiddenError(ApiError):
    """Raised when the caller's role may not perform the action."""

    code = "FORBIDDEN"
    status_code = 403
    default_message = "You do not have permission to perform this action"


class NotFoundError(ApiError):
    """Raised when a resource is not found."""

    code = "NOT_FOUND"
    status_code = 404
    default_message = "Resource not found"


class ConflictError(ApiError):
    """Raised on a uniqueness violation."""

    code = "CONFLICT"
    status_code = 409
    default_message = "Unique constraint violation"


class EmailDeliveryError(Exception):
    """Raised by the mailer when the provider rejects a message."""
