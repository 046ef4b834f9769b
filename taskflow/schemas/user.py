"""
User API schemas.

Pydantic models for auth and user request/response validation. JSON keys are
camelCase; request bodies also accept the snake_case field names.
"""

from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, EmailStr, Field, StringConstraints
from pydantic.alias_generators import to_camel

from taskflow.models.user import UserRole


class CamelModel(BaseModel):
    """Base schema serialized with camelCase keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


def _normalize_email(value: str) -> str:
    return value.strip().lower()


NormalizedEmail = Annotated[EmailStr, AfterValidator(_normalize_email)]


def _strip_required_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name is required")
    return value


RequiredName = Annotated[str, StringConstraints(max_length=255), AfterValidator(_strip_required_name)]


# Request schemas
class UserCreate(CamelModel):
    """Schema for user registration."""
    email: NormalizedEmail
    password: str = Field(..., description="Password (policy minimum enforced by the auth service)")
    name: RequiredName


class UserLogin(CamelModel):
    """Schema for user login."""
    email: NormalizedEmail
    password: str = Field(..., min_length=1)


class ProfileUpdate(CamelModel):
    """
    Partial profile update.

    Only fields present in the request body are applied; email is not
    updatable through this schema.
    """
    name: Optional[RequiredName] = None
    avatar: Optional[str] = Field(None, max_length=2048)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str


class EmailRequest(CamelModel):
    """Body of forgot-password and resend-verification requests."""
    email: NormalizedEmail


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1)
    password: str


class RoleUpdate(CamelModel):
    role: UserRole


# Response schemas
class UserPublic(CamelModel):
    """Public user projection (no password hash, no token fields)."""
    id: int
    email: str
    name: str
    avatar: Optional[str] = None
    role: UserRole
    email_verified: bool
    provider: Optional[str] = None
    created_at: datetime
    updated_at: datetime


class UserEnvelope(CamelModel):
    user: UserPublic


class MessageResponse(CamelModel):
    message: str


class ProfileResponse(MessageResponse):
    user: UserPublic


class RegisterResponse(MessageResponse):
    user: UserPublic
    requires_verification: bool = True


class AuthResponse(MessageResponse):
    """Successful login or verification: profile plus session token."""
    user: UserPublic
    token: str


class UserListResponse(CamelModel):
    users: list[UserPublic]
    count: int
