from datetime import timedelta, timezone

import pytest

from taskflow.core.errors import DuplicateEmailError
from taskflow.db.repositories.user import UserRepository
from taskflow.models.user import User, utc_now


@pytest.fixture
def repository(session) -> UserRepository:
    return UserRepository(session)


def test_timestamps_are_stored_and_loaded_as_utc(repository):
    user = repository.create(User(email="ann@x.com", name="Ann"))

    loaded = repository.get_by_id(user.id)

    assert loaded.created_at.utcoffset() == timedelta(0)
    assert loaded.updated_at.tzinfo is not None
    assert abs(utc_now() - loaded.created_at) < timedelta(minutes=1)


def test_update_refreshes_updated_at(repository):
    user = repository.create(User(email="ann@x.com", name="Ann"))
    before = user.updated_at

    user.name = "Ann B"
    updated = repository.update(user)

    assert updated.updated_at >= before
    assert updated.updated_at.tzinfo is not None


def test_token_lookup_ignores_expired_tokens(repository):
    now = utc_now()
    repository.create(User(email="live@x.com", name="Live", verification_token="live",
                           verification_token_expiry=now + timedelta(hours=1)))
    repository.create(User(email="old@x.com", name="Old", reset_password_token="old",
                           reset_password_expiry=now - timedelta(seconds=1)))

    assert repository.get_by_verification_token("live", now).email == "live@x.com"
    assert repository.get_by_reset_token("old", now) is None


def test_token_lookup_compares_across_offsets(repository):
    now = utc_now()
    repository.create(User(email="ann@x.com", name="Ann", reset_password_token="tok",
                           reset_password_expiry=now + timedelta(minutes=30)))

    later_elsewhere = (now + timedelta(hours=1)).astimezone(timezone(timedelta(hours=5)))

    assert repository.get_by_reset_token("tok", now) is not None
    assert repository.get_by_reset_token("tok", later_elsewhere) is None


def test_duplicate_email_maps_to_domain_error(repository):
    repository.create(User(email="ann@x.com", name="Ann"))
    with pytest.raises(DuplicateEmailError):
        repository.create(User(email="ann@x.com", name="Ann again"))
