"""
Global exception handling for the application.
Standardizes error responses as {"error": {code, message, details, path}}.
"""

from typing import Any, Dict, List, Optional

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = structlog.get_logger(__name__)


class AppError(Exception):
    """Base class for all application exceptions."""

    # Session/token errors ask the HTTP layer to drop the client credential.
    clear_credential = False

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class EntityNotFoundException(AppError):
    """Resource not found error."""
    def __init__(self, message: str = "Entity not found", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_404_NOT_FOUND, details)


class ConflictException(AppError):
    """Unique key already taken."""
    def __init__(self, message: str = "Entity already exists", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_409_CONFLICT, details)


class RecordValidationException(AppError):
    """One or more fields failed validation. Always lists every offending field."""

    def __init__(self, errors: List[Dict[str, str]], message: str = "Validation failed"):
        self.errors = errors
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY, {"errors": errors})

    @property
    def fields(self) -> List[str]:
        return [e["field"] for e in self.errors]

    @classmethod
    def from_pydantic(cls, exc) -> "RecordValidationException":
        """Build from a pydantic ValidationError, one entry per offending field."""
        errors = []
        seen = set()
        for err in exc.errors():
            loc = [str(part) for part in err.get("loc", ()) if part != "__root__"]
            field = ".".join(loc) or "__all__"
            if field in seen:
                continue
            seen.add(field)
            errors.append({"field": field, "message": err.get("msg", "Invalid value")})
        return cls(errors)


class UnauthorizedException(AppError):
    """Authentication failure error."""
    def __init__(self, message: str = "Unauthorized", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_401_UNAUTHORIZED, details)


class InvalidOrExpiredTokenException(UnauthorizedException):
    """Magic link token absent, already used, or expired."""
    clear_credential = True

    def __init__(self, message: str = "Invalid or expired magic link token"):
        super().__init__(message)


class NoSessionException(UnauthorizedException):
    """No session credential presented."""
    clear_credential = True

    def __init__(self, message: str = "No session"):
        super().__init__(message)


class InvalidSessionException(UnauthorizedException):
    """Session credential unknown or expired."""
    clear_credential = True

    def __init__(self, message: str = "Invalid session"):
        super().__init__(message)


class ForbiddenException(AppError):
    """Authorization failure error."""
    def __init__(self, message: str = "Forbidden", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_403_FORBIDDEN, details)


class UnsupportedMediaTypeException(AppError):
    """Request body is not in a format the endpoint accepts."""
    def __init__(self, message: str = "Unsupported media type", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_415_UNSUPPORTED_MEDIA_TYPE, details)


class NotificationDeliveryException(AppError):
    """The notifier could not deliver a message."""
    def __init__(self, message: str = "Failed to deliver notification", details: Optional[Dict[str, Any]] = None):
        super().__init__(message, status.HTTP_502_BAD_GATEWAY, details)


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle all uncaught exceptions globally."""

    if isinstance(exc, AppError):
        response = JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.__class__.__name__,
                    "message": exc.message,
                    "details": exc.details,
                    "path": request.url.path,
                }
            },
        )
        if exc.clear_credential:
            settings = request.app.state.settings
            response.delete_cookie(settings.SESSION_COOKIE_NAME)
        return response

    logger.exception("Unexpected error occurred", path=request.url.path)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": {
                "code": "InternalServerError",
                "message": "An unexpected error occurred. Please try again later.",
                "path": request.url.path,
            }
        },
    )
