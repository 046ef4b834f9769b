"""Database repositories."""

from taskflow.db.repositories.user import UserRepository

__all__ = [
    "UserRepository",
]
