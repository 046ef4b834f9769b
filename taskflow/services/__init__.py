"""Business logic services."""

from taskflow.services.auth_service import AuthService
from taskflow.services.password_reset_service import PasswordResetService
from taskflow.services.user_service import UserService

__all__ = [
    "AuthService",
    "PasswordResetService",
    "UserService",
]
