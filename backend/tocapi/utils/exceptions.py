"""Custom exceptions and error handling utilities."""
from fastapi import HTTPException, status

from tocapi.utils.logger import logger


class AppException(Exception):
    """Base exception for expected, user-facing application errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(AppException):
    """Raised when input is missing or malformed."""
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or [message]


class NotFoundError(AppException):
    """Raised when a resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(AppException):
    """Raised when a uniqueness constraint would be violated."""
    status_code = status.HTTP_409_CONFLICT


class RenameConfirmationRequired(AppException):
    """Raised when a project title changes without explicit confirmation."""
    status_code = status.HTTP_409_CONFLICT


class InvalidTokenError(AppException):
    """Raised when a password reset token is wrong or expired."""
    status_code = status.HTTP_400_BAD_REQUEST


def to_http_exception(error: Exception, operation: str) -> HTTPException:
    """
    Convert an error raised by a service into an HTTP exception.

    Application errors keep their status code and message. Anything else is
    treated as an internal failure and reported without details.

    Args:
        error: The raised exception
        operation: Description of the operation that failed

    Returns:
        HTTPException with appropriate status code
    """
    if isinstance(error, AppException):
        return HTTPException(status_code=error.status_code, detail=error.message)

    logger.error(f"Unexpected error during {operation}: {error}", exc_info=error)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"Internal error during {operation}",
    )


def not_found_error(resource: str, identifier: str | None = None) -> NotFoundError:
    """
    Create a standardized not-found error.

    Args:
        resource: Name of the resource (e.g., "Project")
        identifier: Optional identifier that was not found

    Returns:
        NotFoundError with a formatted message
    """
    message = f"{resource} not found"
    if identifier:
        message += f": {identifier}"
    return NotFoundError(message)
