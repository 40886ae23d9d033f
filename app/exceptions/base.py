# ruff: noqa: D107
"""Base exception classes.

Each class fixes an HTTP status; subclasses in the domain modules only pick
a message and an ``error_code``. The global handler in ``app.main`` renders
``detail`` into the error envelope.
"""

from typing import Any

from fastapi import HTTPException


class BaseAppException(HTTPException):
    """Base application exception."""

    status: int = 500
    default_message: str = "Internal server error"
    default_error_code: str = "INTERNAL_ERROR"

    def __init__(
        self,
        message: str | None = None,
        status_code: int | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.message = message or self.default_message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}

        super().__init__(
            status_code=status_code or self.status,
            detail={"message": self.message, "error_code": self.error_code, "details": details},
            headers=headers,
        )


class ValidationError(BaseAppException):
    """Request content is malformed or breaks a business rule."""

    status = 400
    default_message = "Validation failed"
    default_error_code = "VALIDATION_ERROR"


class ConflictError(BaseAppException):
    """Request conflicts with current state (duplicates, self-demotion).

    Reported as 400 like any other client error.
    """

    status = 400
    default_message = "Request conflicts with current state"
    default_error_code = "CONFLICT"


class AuthenticationError(BaseAppException):
    """The caller cannot be authenticated."""

    status = 401
    default_message = "Not authorized"
    default_error_code = "NOT_AUTHENTICATED"

    def __init__(
        self,
        message: str | None = None,
        details: dict[str, Any] | None = None,
        error_code: str | None = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AppPermissionError(BaseAppException):
    """The caller may not act on the resource."""

    status = 403
    default_message = "Permission denied"
    default_error_code = "PERMISSION_DENIED"


class NotFoundError(BaseAppException):
    """The resource is absent or its identifier is malformed."""

    status = 404
    default_message = "Resource not found"
    default_error_code = "NOT_FOUND"


class UpstreamUnavailableError(BaseAppException):
    """An external collaborator (storage, email) is unusable."""

    status = 503
    default_message = "Upstream service unavailable"
    default_error_code = "UPSTREAM_UNAVAILABLE"
