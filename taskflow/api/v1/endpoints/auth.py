"""
Authentication endpoints.

Handles registration, login, email verification, profile and password flows.
"""

from fastapi import APIRouter, Depends, status

from taskflow.api.dependencies import get_auth_service, get_current_user, get_password_reset_service
from taskflow.models.user import User
from taskflow.schemas.user import (
    AuthResponse,
    ChangePasswordRequest,
    EmailRequest,
    MessageResponse,
    ProfileResponse,
    ProfileUpdate,
    RegisterResponse,
    ResetPasswordRequest,
    UserCreate,
    UserEnvelope,
    UserLogin,
)
from taskflow.services.auth_service import AuthService
from taskflow.services.password_reset_service import PasswordResetService

router = APIRouter()

RESET_REQUESTED_MESSAGE = "If an account with that email exists, a password reset link has been sent."
RESEND_REQUESTED_MESSAGE = "If an unverified account with that email exists, a new verification link has been sent."


@router.post("/register",
             summary="User registration endpoint.",
             response_model=RegisterResponse,
             status_code=status.HTTP_201_CREATED)
def register(user_data: UserCreate, service: AuthService = Depends(get_auth_service)):
    """
    Register a new user.

    No session token is issued; the account must be verified by email first.

    Raises:
        400: Validation failure or email already registered
    """
    user, requires_verification = service.register(user_data)
    return RegisterResponse(message="Registration successful! Please check your email to verify your account.",
                            user=user, requires_verification=requires_verification)


@router.post("/login",
             summary="User login endpoint.",
             response_model=AuthResponse)
def login(login_data: UserLogin, service: AuthService = Depends(get_auth_service)):
    """
    Authenticate user via JSON body.

    Returns:
        Public user data and a bearer session token
    """
    user, token = service.login(login_data)
    return AuthResponse(message="Login successful", user=user, token=token)


@router.get("/me",
            summary="Current user profile.",
            response_model=UserEnvelope)
def me(current_user: User = Depends(get_current_user), service: AuthService = Depends(get_auth_service)):
    return UserEnvelope(user=service.get_profile(current_user.id))


@router.put("/profile",
            summary="Update name and avatar.",
            response_model=ProfileResponse)
def update_profile(data: ProfileUpdate, current_user: User = Depends(get_current_user),
                   service: AuthService = Depends(get_auth_service)):
    user = service.update_profile(current_user.id, data)
    return ProfileResponse(message="Profile updated successfully", user=user)


@router.put("/change-password",
            summary="Change password of the current user.",
            response_model=MessageResponse)
def change_password(data: ChangePasswordRequest, current_user: User = Depends(get_current_user),
                    service: AuthService = Depends(get_auth_service)):
    service.change_password(current_user.id, data.current_password, data.new_password)
    return MessageResponse(message="Password changed successfully")


@router.get("/verify-email/{token}",
            summary="Verify email address and log in.",
            response_model=AuthResponse)
def verify_email(token: str, service: AuthService = Depends(get_auth_service)):
    user, session_token = service.verify_email(token)
    return AuthResponse(message="Email verified successfully! You can now login.", user=user, token=session_token)


@router.post("/resend-verification",
             summary="Send a new verification email.",
             response_model=MessageResponse)
def resend_verification(data: EmailRequest, service: AuthService = Depends(get_auth_service)):
    service.resend_verification(data.email)
    return MessageResponse(message=RESEND_REQUESTED_MESSAGE)


@router.post("/forgot-password",
             summary="Request a password reset email.",
             response_model=MessageResponse)
def forgot_password(data: EmailRequest, service: PasswordResetService = Depends(get_password_reset_service)):
    """Always answers the same way, whether or not the email is registered."""
    service.request_password_reset(data.email)
    return MessageResponse(message=RESET_REQUESTED_MESSAGE)


@router.post("/reset-password",
             summary="Set a new password with a reset token.",
             response_model=MessageResponse)
def reset_password(data: ResetPasswordRequest, service: PasswordResetService = Depends(get_password_reset_service)):
    service.reset_password(data.token, data.password)
    return MessageResponse(message="Password reset successful. You can now login with your new password.")
