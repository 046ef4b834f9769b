"""
Email notifier.

Delivers verification, welcome and password reset emails. Delivery is an
external concern: callers treat every failure as non-fatal.
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Protocol

from taskflow.core.config import Settings
from taskflow.core.errors import EmailDeliveryError

logger = logging.getLogger(__name__)


class EmailNotifier(Protocol):
    def send_verification_email(self, email: str, name: str, token: str) -> None: ...

    def send_welcome_email(self, email: str, name: str) -> None: ...

    def send_password_reset_email(self, email: str, name: str, token: str) -> None: ...


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    body: str


def verification_email(frontend_url: str, email: str, name: str, token: str, ttl_hours: int) -> OutgoingEmail:
    link = f"{frontend_url.rstrip('/')}/verify-email?token={token}"
    body = (
        f"Hi {name},\n\n"
        "Thanks for signing up for TaskFlow! Please verify your email address by opening the link below:\n\n"
        f"{link}\n\n"
        f"This link will expire in {ttl_hours} hours.\n"
        "If you didn't create an account with TaskFlow, you can safely ignore this email.\n"
    )
    return OutgoingEmail(to=email, subject="Verify your TaskFlow account", body=body)


def welcome_email(frontend_url: str, email: str, name: str) -> OutgoingEmail:
    body = (
        f"Welcome aboard, {name}!\n\n"
        "Your email has been verified. You're all set to start using TaskFlow:\n"
        f"{frontend_url.rstrip('/')}/dashboard\n"
    )
    return OutgoingEmail(to=email, subject="Welcome to TaskFlow!", body=body)


def password_reset_email(frontend_url: str, email: str, name: str, token: str, ttl_hours: int) -> OutgoingEmail:
    link = f"{frontend_url.rstrip('/')}/reset-password?token={token}"
    body = (
        f"Hi {name},\n\n"
        "We received a request to reset your TaskFlow password. Open the link below to choose a new one:\n\n"
        f"{link}\n\n"
        f"This link will expire in {ttl_hours} hour(s) and can only be used once.\n"
        "If you didn't request this reset, ignore this email and your password will remain unchanged.\n"
    )
    return OutgoingEmail(to=email, subject="Reset your TaskFlow password", body=body)


class _TemplateNotifier:
    """Renders the three messages and hands them to ``deliver``."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def deliver(self, message: OutgoingEmail) -> None:
        raise NotImplementedError

    def _send(self, message: OutgoingEmail) -> None:
        try:
            self.deliver(message)
        except EmailDeliveryError:
            raise
        except Exception as exc:
            raise EmailDeliveryError(f"Failed to send '{message.subject}' to {message.to}") from exc
        logger.info("Email '%s' sent to %s", message.subject, message.to)

    def send_verification_email(self, email: str, name: str, token: str) -> None:
        self._send(verification_email(self.settings.FRONTEND_URL, email, name, token,
                                      self.settings.VERIFICATION_TOKEN_TTL_HOURS))

    def send_welcome_email(self, email: str, name: str) -> None:
        self._send(welcome_email(self.settings.FRONTEND_URL, email, name))

    def send_password_reset_email(self, email: str, name: str, token: str) -> None:
        self._send(password_reset_email(self.settings.FRONTEND_URL, email, name, token,
                                        self.settings.RESET_TOKEN_TTL_HOURS))


class SmtpEmailNotifier(_TemplateNotifier):
    """Sends mail through an SMTP relay."""

    def deliver(self, message: OutgoingEmail) -> None:
        msg = EmailMessage()
        msg["Subject"] = message.subject
        msg["From"] = self.settings.FROM_EMAIL
        msg["To"] = message.to
        msg.set_content(message.body)

        smtp_class = smtplib.SMTP_SSL if self.settings.SMTP_USE_SSL else smtplib.SMTP
        with smtp_class(self.settings.SMTP_HOST, self.settings.SMTP_PORT, timeout=10) as smtp:
            if not self.settings.SMTP_USE_SSL:
                # Plain relays must be upgraded before credentials are sent
                smtp.starttls()
            if self.settings.SMTP_USER:
                smtp.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD)
            smtp.send_message(msg)


class LoggingEmailNotifier(_TemplateNotifier):
    """Development notifier: records outgoing mail in the log instead of sending it."""

    def deliver(self, message: OutgoingEmail) -> None:
        logger.info("Email delivery disabled; would send '%s' to %s", message.subject, message.to)


def build_email_notifier(settings: Settings) -> EmailNotifier:
    if settings.SMTP_HOST:
        return SmtpEmailNotifier(settings)
    logger.warning("SMTP_HOST is not configured; emails will only be logged")
    return LoggingEmailNotifier(settings)


def send_best_effort(send, *args) -> bool:
    """
    Call a notifier method, logging instead of raising on failure.

    Returns:
        True if the notifier accepted the message, False otherwise
    """
    try:
        send(*args)
    except Exception:
        logger.exception("Email delivery failed (%s); continuing", getattr(send, "__name__", "send"))
        return False
    return True
