"""
Password reset service.

Request/complete flow for forgotten passwords using single-use tokens.
"""

import logging
from datetime import timedelta

from sqlmodel import Session

from taskflow.core.config import Settings
from taskflow.core.errors import InvalidOrExpiredTokenError
from taskflow.core.security import generate_single_use_token, hash_password, validate_password_policy
from taskflow.db.repositories.user import UserRepository
from taskflow.models.user import utc_now
from taskflow.services.email_service import EmailNotifier, send_best_effort

logger = logging.getLogger(__name__)


class PasswordResetService:
    """Service for the password reset token lifecycle."""

    def __init__(self, session: Session, notifier: EmailNotifier, settings: Settings):
        self.repository = UserRepository(session)
        self.notifier = notifier
        self.settings = settings

    def request_password_reset(self, email: str) -> None:
        """
        Start a password reset.

        Behaves identically for known and unknown emails; only a known
        account gets a token and an email.
        """
        user = self.repository.get_by_email(email)
        if not user:
            logger.info("Password reset requested for non-existent email: %s", email)
            return

        token = generate_single_use_token()
        user.reset_password_token = token
        user.reset_password_expiry = utc_now() + timedelta(hours=self.settings.RESET_TOKEN_TTL_HOURS)
        user = self.repository.update(user)

        if send_best_effort(self.notifier.send_password_reset_email, user.email, user.name, token):
            logger.info("Password reset email sent to: %s", user.email)

    def reset_password(self, token: str, new_password: str) -> None:
        """
        Complete a password reset.

        The token is consumed in the same commit that stores the new hash, so
        it cannot be replayed.

        Raises:
            ValidationError: new_password violates the length policy
            InvalidOrExpiredTokenError: No user holds this unexpired token
        """
        validate_password_policy(new_password, self.settings.PASSWORD_MIN_LENGTH)

        user = self.repository.get_by_reset_token(token, utc_now())
        if not user:
            raise InvalidOrExpiredTokenError("Invalid or expired reset token")

        user.hashed_password = hash_password(new_password, self.settings.BCRYPT_ROUNDS)
        user.reset_password_token = None
        user.reset_password_expiry = None
        self.repository.update(user)

        logger.info("Password reset successful for user: %s", user.email)
