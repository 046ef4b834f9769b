"""
Authentication service.

Business logic for registration, login, email verification, profile and
password changes. All identity state transitions go through here.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from sqlmodel import Session

from taskflow.core.config import Settings
from taskflow.core.errors import (
    EmailNotVerifiedError,
    IncorrectPasswordError,
    InvalidCredentialsError,
    InvalidOrExpiredTokenError,
    NoPasswordSetError,
    ResourceNotFoundError,
)
from taskflow.core.security import (
    TokenIssuer,
    build_token_issuer,
    generate_single_use_token,
    hash_password,
    validate_password_policy,
    verify_password,
)
from taskflow.db.repositories.user import UserRepository
from taskflow.models.user import User, UserRole, utc_now
from taskflow.schemas.user import ProfileUpdate, UserCreate, UserLogin, UserPublic
from taskflow.services.email_service import EmailNotifier, send_best_effort

logger = logging.getLogger(__name__)


class AuthService:
    """Service for authentication and account lifecycle."""

    def __init__(self, session: Session, notifier: EmailNotifier, settings: Settings,
                 token_issuer: Optional[TokenIssuer] = None):
        """
        Initialize service with its collaborators.

        Args:
            session: SQLModel database session
            notifier: Email notifier used for verification and welcome mail
            settings: Application settings (policy constants, TTLs, hashing cost)
            token_issuer: Session token issuer, built from settings if omitted
        """
        self.repository = UserRepository(session)
        self.notifier = notifier
        self.settings = settings
        self.token_issuer = token_issuer or build_token_issuer(settings)

    # ------------------------------------------------------------------
    # Registration and login
    # ------------------------------------------------------------------

    def register(self, user_data: UserCreate) -> tuple[UserPublic, bool]:
        """
        Register a new local account pending email verification.

        Args:
            user_data: User registration data

        Returns:
            Tuple of (public user, requires_verification)

        Raises:
            ValidationError: If the password violates the length policy
            DuplicateEmailError: If the email is already registered
        """
        validate_password_policy(user_data.password, self.settings.PASSWORD_MIN_LENGTH)

        verification_token = generate_single_use_token()
        user = User(
            email=user_data.email,
            name=user_data.name,
            hashed_password=hash_password(user_data.password, self.settings.BCRYPT_ROUNDS),
            role=UserRole.MEMBER,
            email_verified=False,
            verification_token=verification_token,
            verification_token_expiry=self._expiry(hours=self.settings.VERIFICATION_TOKEN_TTL_HOURS),
        )
        # Uniqueness is decided by the database constraint, not a pre-check.
        user = self.repository.create(user)

        if send_best_effort(self.notifier.send_verification_email, user.email, user.name, verification_token):
            logger.info("Verification email sent to %s", user.email)

        logger.info("New user registered: %s (email verification required)", user.email)
        return UserPublic.model_validate(user), True

    def login(self, login_data: UserLogin) -> tuple[UserPublic, str]:
        """
        Authenticate with email and password.

        Returns:
            Tuple of (public user, session token)

        Raises:
            InvalidCredentialsError: Unknown email, no password set, or wrong password
            EmailNotVerifiedError: Correct password on an unverified local account
        """
        user = self.repository.get_by_email(login_data.email)

        if not user or not verify_password(login_data.password, user.hashed_password):
            raise InvalidCredentialsError()

        if user.requires_verification:
            raise EmailNotVerifiedError()

        logger.info("User logged in: %s", user.email)
        return UserPublic.model_validate(user), self.issue_token(user)

    def login_oauth(self, email: str, name: str, provider: str, avatar: Optional[str] = None) -> tuple[UserPublic, str]:
        """
        Sign in with an external identity provider, creating the account on first use.

        The provider has already vouched for the email, so the account is
        provisioned as verified. An existing local account is linked to the
        provider and marked verified.
        """
        email = email.strip().lower()
        user = self.repository.get_by_email(email)

        if user is None:
            user = self.repository.create(User(email=email, name=name, avatar=avatar, provider=provider,
                                               email_verified=True, role=UserRole.MEMBER))
            logger.info("New user provisioned via %s: %s", provider, email)
        elif not user.email_verified or user.provider is None:
            user.provider = user.provider or provider
            user.email_verified = True
            user.verification_token = None
            user.verification_token_expiry = None
            if avatar and not user.avatar:
                user.avatar = avatar
            user = self.repository.update(user)

        logger.info("User logged in via %s: %s", provider, email)
        return UserPublic.model_validate(user), self.issue_token(user)

    def issue_token(self, user: User) -> str:
        return self.token_issuer.issue(user.id, user.email)

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    def get_profile(self, user_id: int) -> UserPublic:
        return UserPublic.model_validate(self._get_user(user_id))

    def update_profile(self, user_id: int, data: ProfileUpdate) -> UserPublic:
        """Apply only the profile fields present in the request."""
        user = self._get_user(user_id)
        for key, value in data.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(user, key, value)
        user = self.repository.update(user)
        logger.info("User profile updated: %s", user.email)
        return UserPublic.model_validate(user)

    # ------------------------------------------------------------------
    # Email verification
    # ------------------------------------------------------------------

    def verify_email(self, token: str) -> tuple[UserPublic, str]:
        """
        Consume a verification token and log the user in.

        Unknown and expired tokens fail identically.

        Raises:
            InvalidOrExpiredTokenError: No user holds this unexpired token
        """
        user = self.repository.get_by_verification_token(token, utc_now())
        if not user:
            raise InvalidOrExpiredTokenError(
                "Invalid or expired verification token. Please request a new verification email.")

        user.email_verified = True
        user.verification_token = None
        user.verification_token_expiry = None
        user = self.repository.update(user)

        send_best_effort(self.notifier.send_welcome_email, user.email, user.name)

        logger.info("Email verified for user: %s", user.email)
        return UserPublic.model_validate(user), self.issue_token(user)

    def resend_verification(self, email: str) -> None:
        """
        Issue a fresh verification token for an unverified local account.

        Returns nothing either way so callers cannot tell which emails exist.
        The previous token stops working.
        """
        user = self.repository.get_by_email(email)
        if not user or not user.requires_verification:
            logger.info("Verification resend skipped for %s", email)
            return

        token = generate_single_use_token()
        user.verification_token = token
        user.verification_token_expiry = self._expiry(hours=self.settings.VERIFICATION_TOKEN_TTL_HOURS)
        user = self.repository.update(user)

        send_best_effort(self.notifier.send_verification_email, user.email, user.name, token)
        logger.info("Verification token regenerated for %s", user.email)

    # ------------------------------------------------------------------
    # Password change
    # ------------------------------------------------------------------

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        """
        Change the password of an authenticated user.

        Raises:
            NoPasswordSetError: Account signs in through an external provider only
            IncorrectPasswordError: current_password does not match; hash unchanged
            ValidationError: new_password violates the length policy
        """
        user = self._get_user(user_id)
        if not user.hashed_password:
            raise NoPasswordSetError()

        if not verify_password(current_password, user.hashed_password):
            raise IncorrectPasswordError()

        validate_password_policy(new_password, self.settings.PASSWORD_MIN_LENGTH)

        user.hashed_password = hash_password(new_password, self.settings.BCRYPT_ROUNDS)
        self.repository.update(user)
        logger.info("Password changed for user: %s", user.email)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_user(self, user_id: int) -> User:
        user = self.repository.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundError()
        return user

    @staticmethod
    def _expiry(hours: int) -> datetime:
        return utc_now() + timedelta(hours=hours)
