"""
Error taxonomy shared by services and API handlers.

Services raise these exceptions; the handlers registered in ``app.main``
turn them into JSON responses with the matching status code.
"""

from typing import Dict, Optional

from fastapi import status


class AppError(Exception):
    """Base exception for all expected request failures."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return None


class ValidationError(AppError):
    """Raised when input is missing, malformed or out of range."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFoundError(AppError):
    """Raised when a targeted or referenced entity does not exist."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, kind: str, message: Optional[str] = None):
        self.kind = kind
        super().__init__(message or f"{kind} not found.")


class ConflictError(AppError):
    """Raised when a write collides with existing data."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class AuthenticationError(AppError):
    """Raised when no credential is supplied or login fails."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"

    @property
    def headers(self) -> Optional[Dict[str, str]]:
        return {"WWW-Authenticate": "Bearer"}


class AuthorizationError(AppError):
    """Raised when a credential is present but invalid or expired."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Invalid or expired token"


class UnsupportedMediaError(AppError):
    """Raised when an upload is not an accepted image."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Only image files are allowed!"


class PayloadTooLargeError(AppError):
    """Raised when an upload exceeds the configured size limit."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "File too large"


class InternalError(AppError):
    """Raised for unexpected failures. The message is never sent to clients."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Something went wrong!"
