"""
User repository.

Handles database operations for User model.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from taskflow.core.errors import DuplicateEmailError
from taskflow.models.user import User, utc_now


class UserRepository:
    """Repository for User database operations."""

    def __init__(self, session: Session):
        """
        Initialize repository with database session.

        Args:
            session: SQLModel database session
        """
        self.session = session

    def create(self, user: User) -> User:
        """
        Create a new user in the database.

        Args:
            user: User instance to create

        Returns:
            Created user with generated id

        Raises:
            DuplicateEmailError: If the unique email constraint rejects the row
        """
        self.session.add(user)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateEmailError() from exc
        self.session.refresh(user)
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User instance if found, None otherwise
        """
        return self.session.get(User, user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        """
        Get user by email address.

        Args:
            email: Normalized (lower-cased) user email

        Returns:
            User instance if found, None otherwise
        """
        statement = select(User).where(User.email == email)
        return self.session.exec(statement).first()

    def get_by_verification_token(self, token: str, now: datetime) -> Optional[User]:
        """Get the user holding an unexpired verification token."""
        statement = select(User).where(User.verification_token == token,
                                       col(User.verification_token_expiry) > now)
        return self.session.exec(statement).first()

    def get_by_reset_token(self, token: str, now: datetime) -> Optional[User]:
        """Get the user holding an unexpired password reset token."""
        statement = select(User).where(User.reset_password_token == token,
                                       col(User.reset_password_expiry) > now)
        return self.session.exec(statement).first()

    def get_all(self, skip: int = 0, limit: int = 100) -> list[User]:
        """
        Get all users with pagination, newest first.

        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return

        Returns:
            List of users
        """
        statement = select(User).order_by(col(User.created_at).desc(), col(User.id).desc()).offset(skip).limit(limit)
        return list(self.session.exec(statement).all())

    def update(self, user: User) -> User:
        """
        Persist changes to an existing user in a single commit.

        Args:
            user: User instance with updated data

        Returns:
            Updated user
        """
        user.updated_at = utc_now()
        self.session.add(user)
        self.session.commit()
        self.session.refresh(user)
        return user

    def delete(self, user_id: int) -> bool:
        """
        Delete a user by ID.

        Args:
            user_id: User ID to delete

        Returns:
            True if deleted, False if not found
        """
        user = self.get_by_id(user_id)
        if user:
            self.session.delete(user)
            self.session.commit()
            return True
        return False
