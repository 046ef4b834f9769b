from datetime import timedelta

import pytest

from taskflow.core.errors import InvalidOrExpiredTokenError, ValidationError
from taskflow.core.security import verify_password
from taskflow.db.repositories.user import UserRepository
from taskflow.models.user import utc_now
from taskflow.services.password_reset_service import PasswordResetService

from conftest import FailingNotifier


@pytest.fixture
def service(session, notifier, settings) -> PasswordResetService:
    return PasswordResetService(session, notifier, settings)


@pytest.fixture
def ann(create_user):
    return create_user("ann@x.com", password="secret1", name="Ann")


def test_request_for_known_email_stores_token_with_one_hour_expiry(service, notifier, session, ann):
    service.request_password_reset("ann@x.com")

    stored = UserRepository(session).get_by_id(ann.id)
    assert stored.reset_password_token == notifier.last_token("reset", "ann@x.com")
    assert utc_now() + timedelta(minutes=59) < stored.reset_password_expiry
    assert stored.reset_password_expiry <= utc_now() + timedelta(hours=1)


def test_request_for_unknown_email_returns_quietly(service, notifier):
    assert service.request_password_reset("nobody@x.com") is None
    assert notifier.sent == []


def test_request_survives_email_failure(session, settings, ann):
    failing = FailingNotifier()
    PasswordResetService(session, failing, settings).request_password_reset("ann@x.com")

    assert failing.attempts == 1
    assert UserRepository(session).get_by_id(ann.id).reset_password_token is not None


def test_reset_rehashes_and_consumes_token(service, notifier, session, ann):
    service.request_password_reset("ann@x.com")
    token = notifier.last_token("reset", "ann@x.com")

    service.reset_password(token, "brand-new-pass")

    stored = UserRepository(session).get_by_id(ann.id)
    assert verify_password("brand-new-pass", stored.hashed_password)
    assert stored.reset_password_token is None
    assert stored.reset_password_expiry is None

    with pytest.raises(InvalidOrExpiredTokenError):
        service.reset_password(token, "another-pass")


def test_expired_token_is_rejected(service, notifier, session, ann):
    service.request_password_reset("ann@x.com")
    stored = UserRepository(session).get_by_id(ann.id)
    stored.reset_password_expiry = utc_now() - timedelta(seconds=1)
    session.add(stored)
    session.commit()

    with pytest.raises(InvalidOrExpiredTokenError):
        service.reset_password(notifier.last_token("reset", "ann@x.com"), "brand-new-pass")

    assert verify_password("secret1", UserRepository(session).get_by_id(ann.id).hashed_password)


def test_short_new_password_is_rejected(service, notifier, ann):
    service.request_password_reset("ann@x.com")
    with pytest.raises(ValidationError):
        service.reset_password(notifier.last_token("reset", "ann@x.com"), "123")
