"""
User database model.

Defines the User table for authentication, verification and password reset.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class UserRole(str, Enum):
    """Roles used by the authorization guard."""

    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    MEMBER = "MEMBER"


class User(SQLModel, table=True):
    """
    User model for authentication.

    Stores credentials, verification/reset state and profile information.
    Single-use token columns are always written together with their expiry.
    """
    __tablename__ = "users"

    id: Optional[int] = Field(default=None, primary_key=True)
    email: str = Field(unique=True, index=True, max_length=255, nullable=False)
    name: str = Field(max_length=255, nullable=False)
    avatar: Optional[str] = Field(default=None, max_length=2048)

    # Credentials
    hashed_password: Optional[str] = Field(default=None)
    provider: Optional[str] = Field(default=None, max_length=50)
    role: UserRole = Field(default=UserRole.MEMBER)

    # Email verification
    email_verified: bool = Field(default=False)
    verification_token: Optional[str] = Field(default=None, index=True, max_length=128)
    verification_token_expiry: Optional[datetime] = Field(default=None)

    # Password reset
    reset_password_token: Optional[str] = Field(default=None, index=True, max_length=128)
    reset_password_expiry: Optional[datetime] = Field(default=None)

    # Timestamps
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_oauth_account(self) -> bool:
        return self.provider is not None

    @property
    def requires_verification(self) -> bool:
        """Local accounts must verify their email before logging in."""
        return not self.email_verified and not self.is_oauth_account
