"""
Shared API dependencies.

Reusable FastAPI dependencies for settings, services, authentication and
role-based authorization.
"""

import logging
from typing import Callable, Iterable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlmodel import Session

from taskflow.core.config import Settings
from taskflow.core.errors import ForbiddenError, NoTokenError, NotAuthenticatedError, UserNotFoundError
from taskflow.core.security import TokenIssuer
from taskflow.db.repositories.user import UserRepository
from taskflow.db.session import get_db
from taskflow.models.user import User, UserRole
from taskflow.schemas.user import UserPublic
from taskflow.services.auth_service import AuthService
from taskflow.services.email_service import EmailNotifier
from taskflow.services.password_reset_service import PasswordResetService

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False, description="Session token from /auth/login")


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_notifier(request: Request) -> EmailNotifier:
    return request.app.state.notifier


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


def get_auth_service(db: Session = Depends(get_db), notifier: EmailNotifier = Depends(get_notifier),
                     settings: Settings = Depends(get_settings),
                     token_issuer: TokenIssuer = Depends(get_token_issuer)) -> AuthService:
    return AuthService(db, notifier, settings, token_issuer)


def get_password_reset_service(db: Session = Depends(get_db), notifier: EmailNotifier = Depends(get_notifier),
                               settings: Settings = Depends(get_settings)) -> PasswordResetService:
    return PasswordResetService(db, notifier, settings)


def get_current_user(request: Request,
                     credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
                     db: Session = Depends(get_db),
                     token_issuer: TokenIssuer = Depends(get_token_issuer), ) -> User:
    """
    Authenticate the request from its bearer token.

    On success the caller's public profile is also stored on
    ``request.state.user``.

    Raises:
        NoTokenError: Authorization header missing or not a Bearer credential
        InvalidTokenError: Signature or format check failed
        TokenExpiredError: Token is past its expiry
        UserNotFoundError: Token subject no longer exists
    """
    if credentials is None or not credentials.credentials:
        raise NoTokenError()

    payload = token_issuer.verify(credentials.credentials)

    user = UserRepository(db).get_by_id(payload.user_id)
    if not user:
        raise UserNotFoundError()

    request.state.user = UserPublic.model_validate(user)
    return user


def authorize(user: Optional[User], allowed_roles: Iterable[UserRole]) -> User:
    """
    Role gate for privileged operations.

    Raises:
        NotAuthenticatedError: No identity has been established
        ForbiddenError: The caller's role is not in allowed_roles
    """
    if user is None:
        raise NotAuthenticatedError()
    allowed = set(allowed_roles)
    if user.role not in allowed:
        logger.warning("Access denied: user_id=%s role=%s allowed=%s", user.id, user.role.value,
                       sorted(role.value for role in allowed))
        raise ForbiddenError()
    return user


def require_roles(*roles: UserRole) -> Callable[..., User]:
    """
    Build a dependency that authenticates the caller and then checks its role.

    Example:
        @router.get("/users", dependencies=[Depends(require_roles(UserRole.ADMIN))])
    """
    allowed = frozenset(roles)

    def dependency(user: User = Depends(get_current_user)) -> User:
        return authorize(user, allowed)

    return dependency
