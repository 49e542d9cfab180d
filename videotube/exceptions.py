"""API error taxonomy.

Every failure raised by a handler or a CRUD helper is one of these. The
exception handlers in ``videotube.main`` render them into the uniform error
envelope ``{statusCode, data: null, message, success: false, errors}``.
"""

from typing import Any


class ApiError(Exception):
    """Base class for errors surfaced verbatim at the request boundary."""

    status_code: int = 500
    default_message: str = "Something went wrong"

    def __init__(
        self,
        message: str | None = None,
        errors: list[Any] | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.errors = errors or []
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Render the error envelope."""
        return {
            "statusCode": self.status_code,
            "data": None,
            "message": self.message,
            "success": False,
            "errors": self.errors,
        }


class ValidationError(ApiError):
    """Missing or malformed input."""

    status_code = 400
    default_message = "Invalid request"


class Unauthorized(ApiError):
    """Missing/invalid credentials or a failed ownership check."""

    status_code = 401
    default_message = "Unauthorized request"


class NotFound(ApiError):
    """Resource absent."""

    status_code = 404
    default_message = "Resource not found"


class Conflict(ApiError):
    """Duplicate unique key."""

    status_code = 409
    default_message = "Resource already exists"


class InternalFailure(ApiError):
    """Store write had no effect or an upstream collaborator failed."""

    status_code = 500
