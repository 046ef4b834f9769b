"""
Unit tests for the email notifier.

SMTP connections are replaced with a recording fake; nothing leaves the
process.
"""

import smtplib

import pytest

from taskflow.core.config import Settings
from taskflow.core.errors import EmailDeliveryError
from taskflow.services import email_service
from taskflow.services.email_service import (
    LoggingEmailNotifier,
    SmtpEmailNotifier,
    build_email_notifier,
    password_reset_email,
    send_best_effort,
    verification_email,
    welcome_email,
)

from conftest import TEST_SECRET


class FakeSMTP:
    """Stands in for smtplib.SMTP / SMTP_SSL and records the conversation."""

    instances: list = []

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.calls = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.calls.append("quit")
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user))

    def send_message(self, msg):
        self.calls.append("send")
        self.messages.append(msg)


@pytest.fixture
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(smtplib, "SMTP_SSL", FakeSMTP)
    return FakeSMTP


def _smtp_settings(**overrides) -> Settings:
    values = dict(_env_file=None, SECRET_KEY=TEST_SECRET, FRONTEND_URL="http://f/", FROM_EMAIL="noreply@x.com",
                  SMTP_HOST="smtp.x.com", SMTP_PORT=465, SMTP_USER="mailer", SMTP_PASSWORD="pw")
    values.update(overrides)
    return Settings(**values)


# ======================================================================
# Templates
# ======================================================================


def test_verification_email_links_to_frontend_and_states_ttl():
    message = verification_email("http://f/", "ann@x.com", "Ann", "tok", 24)

    assert message.to == "ann@x.com"
    assert "http://f/verify-email?token=tok" in message.body
    assert "24 hours" in message.body
    assert "Ann" in message.body


def test_password_reset_email_links_to_frontend_and_states_ttl():
    message = password_reset_email("http://f", "ann@x.com", "Ann", "tok", 1)

    assert "http://f/reset-password?token=tok" in message.body
    assert "1 hour(s)" in message.body


def test_welcome_email_has_no_token():
    message = welcome_email("http://f", "ann@x.com", "Ann")
    assert "token" not in message.body
    assert "http://f/dashboard" in message.body


# ======================================================================
# Delivery
# ======================================================================


def test_delivery_failures_become_email_delivery_error(settings):
    class BrokenNotifier(LoggingEmailNotifier):
        def deliver(self, message):
            raise ConnectionRefusedError("relay down")

    with pytest.raises(EmailDeliveryError) as exc_info:
        BrokenNotifier(settings).send_verification_email("ann@x.com", "Ann", "tok")

    assert isinstance(exc_info.value.__cause__, ConnectionRefusedError)


def test_smtp_ssl_sends_rendered_message(fake_smtp):
    notifier = SmtpEmailNotifier(_smtp_settings(SMTP_USE_SSL=True))

    notifier.send_password_reset_email("ann@x.com", "Ann", "tok")

    (smtp,) = fake_smtp.instances
    assert (smtp.host, smtp.port) == ("smtp.x.com", 465)
    assert smtp.calls == [("login", "mailer"), "send", "quit"]
    sent = smtp.messages[0]
    assert sent["To"] == "ann@x.com"
    assert sent["From"] == "noreply@x.com"
    assert "http://f/reset-password?token=tok" in sent.get_content()


def test_plain_smtp_upgrades_with_starttls_before_login(fake_smtp):
    notifier = SmtpEmailNotifier(_smtp_settings(SMTP_USE_SSL=False, SMTP_PORT=587))

    notifier.send_welcome_email("ann@x.com", "Ann")

    (smtp,) = fake_smtp.instances
    assert smtp.calls == ["starttls", ("login", "mailer"), "send", "quit"]


def test_smtp_errors_are_wrapped(monkeypatch):
    def refuse(*args, **kwargs):
        raise smtplib.SMTPConnectError(421, "busy")

    monkeypatch.setattr(smtplib, "SMTP_SSL", refuse)

    with pytest.raises(EmailDeliveryError):
        SmtpEmailNotifier(_smtp_settings()).send_verification_email("ann@x.com", "Ann", "tok")


# ======================================================================
# Wiring helpers
# ======================================================================


def test_build_email_notifier_picks_smtp_when_host_is_set(settings):
    assert isinstance(build_email_notifier(_smtp_settings()), SmtpEmailNotifier)
    assert isinstance(build_email_notifier(settings), LoggingEmailNotifier)


def test_send_best_effort_reports_failures_without_raising(caplog):
    def fail(*args):
        raise EmailDeliveryError("down")

    with caplog.at_level("ERROR", logger=email_service.logger.name):
        assert send_best_effort(fail, "ann@x.com") is False
    assert "Email delivery failed" in caplog.text
    assert send_best_effort(lambda *args: None, "ann@x.com") is True
