"""SQLModel database models."""

from taskflow.models.user import User, UserRole

__all__ = [
    "User",
    "UserRole",
]
