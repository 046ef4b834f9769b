from types import SimpleNamespace

import pytest

from taskflow.api.dependencies import authorize, require_roles
from taskflow.core.errors import ForbiddenError, NotAuthenticatedError
from taskflow.models.user import UserRole


def _user(role: UserRole) -> SimpleNamespace:
    return SimpleNamespace(id=7, role=role)


def test_authorize_without_identity_is_not_authenticated():
    with pytest.raises(NotAuthenticatedError):
        authorize(None, {UserRole.ADMIN})


def test_member_calling_admin_operation_is_forbidden():
    with pytest.raises(ForbiddenError):
        authorize(_user(UserRole.MEMBER), {UserRole.ADMIN})


@pytest.mark.parametrize("role", [UserRole.ADMIN, UserRole.MANAGER])
def test_listed_roles_pass_through(role):
    user = _user(role)
    assert authorize(user, [UserRole.ADMIN, UserRole.MANAGER]) is user


def test_require_roles_dependency_applies_guard():
    dependency = require_roles(UserRole.ADMIN)

    assert dependency(user=_user(UserRole.ADMIN)).role is UserRole.ADMIN
    with pytest.raises(ForbiddenError):
        dependency(user=_user(UserRole.MANAGER))
