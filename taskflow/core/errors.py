"""
Application error taxonomy.

Services raise these exceptions; the HTTP layer maps them to responses in one
place (see ``taskflow.main.register_exception_handlers``).
"""

from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Machine-readable error codes returned to clients."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    EMAIL_NOT_VERIFIED = "EMAIL_NOT_VERIFIED"
    INVALID_OR_EXPIRED_TOKEN = "INVALID_OR_EXPIRED_TOKEN"
    INCORRECT_PASSWORD = "INCORRECT_PASSWORD"
    NO_PASSWORD_SET = "NO_PASSWORD_SET"
    NO_TOKEN = "NO_TOKEN"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    USER_NOT_FOUND = "USER_NOT_FOUND"
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"
    FORBIDDEN = "FORBIDDEN"
    EMAIL_DELIVERY_FAILED = "EMAIL_DELIVERY_FAILED"


class AppError(Exception):
    """Base class for expected, client-facing failures."""

    kind: ErrorKind = ErrorKind.VALIDATION_ERROR
    status_code: int = 400
    message: str = "Request could not be processed"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.message, "code": self.kind.value}


class AuthenticationError(AppError):
    """Failures of the bearer-token gate; always answered with a Bearer challenge."""

    status_code = 401


class ValidationError(AppError):
    kind = ErrorKind.VALIDATION_ERROR
    message = "Validation failed"


class DuplicateEmailError(AppError):
    kind = ErrorKind.DUPLICATE_EMAIL
    message = "User with this email already exists"


class InvalidCredentialsError(AppError):
    kind = ErrorKind.INVALID_CREDENTIALS
    status_code = 401
    message = "Invalid email or password"


class EmailNotVerifiedError(AppError):
    kind = ErrorKind.EMAIL_NOT_VERIFIED
    status_code = 403
    message = "Please verify your email before logging in. Check your inbox for the verification link."

    def to_payload(self) -> Dict[str, Any]:
        payload = super().to_payload()
        payload["requiresVerification"] = True
        return payload


class InvalidOrExpiredTokenError(AppError):
    kind = ErrorKind.INVALID_OR_EXPIRED_TOKEN
    message = "Invalid or expired token"


class IncorrectPasswordError(AppError):
    kind = ErrorKind.INCORRECT_PASSWORD
    status_code = 401
    message = "Current password is incorrect"


class NoPasswordSetError(AppError):
    kind = ErrorKind.NO_PASSWORD_SET
    message = "This account uses external sign-in and has no password"


class NoTokenError(AuthenticationError):
    kind = ErrorKind.NO_TOKEN
    message = "No token provided. Please login first."


class InvalidTokenError(AuthenticationError):
    kind = ErrorKind.INVALID_TOKEN
    message = "Invalid token"


class TokenExpiredError(AuthenticationError):
    kind = ErrorKind.TOKEN_EXPIRED
    message = "Token expired. Please login again."


class UserNotFoundError(AuthenticationError):
    """Token subject no longer exists."""

    kind = ErrorKind.USER_NOT_FOUND
    message = "User not found. Token may be invalid."


class NotAuthenticatedError(AppError):
    kind = ErrorKind.NOT_AUTHENTICATED
    status_code = 401
    message = "Not authenticated"


class ForbiddenError(AppError):
    kind = ErrorKind.FORBIDDEN
    status_code = 403
    message = "Forbidden. You do not have permission to access this resource."


class ResourceNotFoundError(AppError):
    """A looked-up user does not exist (directory routes, not the auth gate)."""

    kind = ErrorKind.USER_NOT_FOUND
    status_code = 404
    message = "User not found"


class EmailDeliveryError(AppError):
    """Raised by notifiers; services catch it and never surface it to clients."""

    kind = ErrorKind.EMAIL_DELIVERY_FAILED
    status_code = 502
    message = "Email delivery failed"
