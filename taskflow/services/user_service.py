"""
User service.

Business logic for the privileged user directory.
"""

import logging

from sqlmodel import Session

from taskflow.core.errors import ResourceNotFoundError
from taskflow.db.repositories.user import UserRepository
from taskflow.models.user import UserRole
from taskflow.schemas.user import UserPublic

logger = logging.getLogger(__name__)


class UserService:
    """Service for user-related business logic."""

    def __init__(self, session: Session):
        """
        Initialize service with database session.

        Args:
            session: SQLModel database session
        """
        self.repository = UserRepository(session)

    def list_users(self, skip: int = 0, limit: int = 100) -> list[UserPublic]:
        return [UserPublic.model_validate(user) for user in self.repository.get_all(skip, limit)]

    def get_user(self, user_id: int) -> UserPublic:
        """
        Get user by ID.

        Raises:
            ResourceNotFoundError: If no such user exists
        """
        user = self.repository.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundError()
        return UserPublic.model_validate(user)

    def change_role(self, user_id: int, role: UserRole, changed_by: int) -> UserPublic:
        user = self.repository.get_by_id(user_id)
        if not user:
            raise ResourceNotFoundError()

        previous = user.role
        user.role = role
        user = self.repository.update(user)
        logger.info("Role of user %s changed from %s to %s by user %s", user.id, previous.value, role.value,
                    changed_by)
        return UserPublic.model_validate(user)
