"""Pydantic schemas for request/response validation."""

from taskflow.schemas.user import (
    AuthResponse,
    ChangePasswordRequest,
    EmailRequest,
    MessageResponse,
    ProfileResponse,
    ProfileUpdate,
    RegisterResponse,
    ResetPasswordRequest,
    RoleUpdate,
    UserCreate,
    UserEnvelope,
    UserListResponse,
    UserLogin,
    UserPublic,
)

__all__ = [
    "AuthResponse",
    "ChangePasswordRequest",
    "EmailRequest",
    "MessageResponse",
    "ProfileResponse",
    "ProfileUpdate",
    "RegisterResponse",
    "ResetPasswordRequest",
    "RoleUpdate",
    "UserCreate",
    "UserEnvelope",
    "UserListResponse",
    "UserLogin",
    "UserPublic",
]
