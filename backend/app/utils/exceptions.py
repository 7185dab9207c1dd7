"""Custom exceptions and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.constants import LOGIN_REDIRECT, SESSION_COOKIE_NAME
from app.utils.logger import logger


class AppException(Exception):
    """Base exception for application errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "An unexpected error occurred"
    redirect: Optional[str] = None
    clear_session_cookie: bool = False

    def __init__(self, message: Optional[str] = None, details: Optional[str] = None):
        self.message = message or self.message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"error": self.message}
        if self.details:
            body["details"] = self.details
        if self.redirect:
            body["redirect"] = self.redirect
        return body


class InvalidInputError(AppException):
    """Raised when a request field is missing or outside its allowed values."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid input"

    def __init__(self, message: Optional[str] = None, field: Optional[str] = None, details: Optional[str] = None):
        self.field = field
        super().__init__(message or (f"Invalid {field}" if field else None), details)


class DuplicateEmailError(AppException):
    """Raised when signing up with an email that already has an account."""

    status_code = status.HTTP_400_BAD_REQUEST
    message = "An account with this email already exists"


class InvalidCredentialsError(AppException):
    """Raised for unknown email or wrong password alike."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Invalid email or password"


class UnauthenticatedError(AppException):
    """Raised when a protected request carries no session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Authentication required"
    redirect = LOGIN_REDIRECT


class MissingKeyError(AppException):
    """Raised when an integration endpoint is called without its key header."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "API key is required"


class SessionExpiredError(AppException):
    """Raised when the session cookie no longer resolves to a live session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Session expired"
    redirect = LOGIN_REDIRECT
    clear_session_cookie = True


class ForbiddenError(AppException):
    """Raised when a caller is authenticated but not allowed."""

    status_code = status.HTTP_403_FORBIDDEN
    message = "Access denied"


class NotFoundError(AppException):
    """Raised when a resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class StorageError(AppException):
    """Raised when the database rejects or fails an operation."""

    message = "Storage error"


class ExternalServiceError(AppException):
    """Raised when an outbound integration fails."""

    message = "External service error"


def handle_database_error(error: Exception, operation: str) -> AppException:
    """
    Convert unexpected errors raised inside a route to application exceptions.

    The original error text is logged by the caller, not returned.

    Args:
        error: The database error
        operation: Description of the operation that failed

    Returns:
        AppException with appropriate status code
    """
    if isinstance(error, AppException):
        return error

    error_message = str(error).lower()
    if "duplicate" in error_message or "unique" in error_message:
        return StorageError(f"Resource already exists: {operation}")

    return StorageError(f"Database error during {operation}")


def not_found_error(resource: str, identifier: Optional[str] = None) -> NotFoundError:
    """
    Create a standardized 404 error.

    Args:
        resource: Name of the resource (e.g., "Profile", "Update")
        identifier: Optional identifier that was not found

    Returns:
        NotFoundError
    """
    message = f"{resource} not found"
    if identifier:
        message += f": {identifier}"
    return NotFoundError(message)


def _format_validation_errors(exc: RequestValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(p) for p in error.get("loc", ()) if p != "body")
        parts.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return "; ".join(parts)


def register_exception_handlers(app: FastAPI) -> None:
    """Map application, HTTP and validation errors onto {error, details?} bodies."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        response = JSONResponse(status_code=exc.status_code, content=exc.to_dict())
        if exc.clear_session_cookie:
            response.delete_cookie(SESSION_COOKIE_NAME, path="/")
        return response

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "details": _format_validation_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=True)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
