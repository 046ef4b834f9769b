"""
Shared fixtures.

Every test gets its own in-memory SQLite database, a recording email
notifier and settings with a cheap bcrypt cost.
"""

from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from taskflow.core.config import Settings
from taskflow.core.errors import EmailDeliveryError
from taskflow.core.security import hash_password
from taskflow.db.init_db import init_db
from taskflow.db.session import create_db_engine
from taskflow.main import create_app
from taskflow.models.user import User, UserRole

TEST_SECRET = "test-secret-key-with-at-least-32-bytes!!"
API = "/api"


class RecordingNotifier:
    """Collects outgoing emails instead of sending them."""

    def __init__(self):
        self.sent: list[tuple[str, str, Optional[str]]] = []

    def send_verification_email(self, email: str, name: str, token: str) -> None:
        self.sent.append(("verification", email, token))

    def send_welcome_email(self, email: str, name: str) -> None:
        self.sent.append(("welcome", email, None))

    def send_password_reset_email(self, email: str, name: str, token: str) -> None:
        self.sent.append(("reset", email, token))

    def of_kind(self, kind: str) -> list[tuple[str, str, Optional[str]]]:
        return [message for message in self.sent if message[0] == kind]

    def last_token(self, kind: str, email: str) -> str:
        tokens = [token for sent_kind, to, token in self.sent if sent_kind == kind and to == email]
        assert tokens, f"no {kind} email sent to {email}"
        return tokens[-1]


class FailingNotifier:
    """Simulates an unavailable email provider."""

    def __init__(self):
        self.attempts = 0

    def _fail(self, *args) -> None:
        self.attempts += 1
        raise EmailDeliveryError("provider unavailable")

    send_verification_email = _fail
    send_welcome_email = _fail
    send_password_reset_email = _fail


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, SECRET_KEY=TEST_SECRET, DATABASE_URL="sqlite://", BCRYPT_ROUNDS=4,
                    LOG_LEVEL="WARNING")


@pytest.fixture
def engine(settings):
    engine = create_db_engine(settings)
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def app(settings, notifier, engine):
    return create_app(settings=settings, notifier=notifier, engine=engine, configure_logs=False)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def create_user(engine, settings) -> Callable[..., User]:
    """Insert a verified user directly into the store."""

    def _create(email: str, password: str = "secret1", name: str = "Test User",
                role: UserRole = UserRole.MEMBER, verified: bool = True) -> User:
        with Session(engine) as session:
            user = User(email=email, name=name, role=role, email_verified=verified,
                        hashed_password=hash_password(password, settings.BCRYPT_ROUNDS))
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    return _create


@pytest.fixture
def login(client) -> Callable[[str, str], str]:
    """Log in through the API and return the bearer token."""

    def _login(email: str, password: str = "secret1") -> str:
        response = client.post(f"{API}/auth/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return response.json()["token"]

    return _login