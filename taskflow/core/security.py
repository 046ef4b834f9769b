"""
Security primitives.

Password hashing (bcrypt), session token signing (JWT) and single-use
verification/reset token generation.
"""

import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
import jwt

from taskflow.core.errors import InvalidTokenError, TokenExpiredError, ValidationError

BCRYPT_MAX_BYTES = 72
SINGLE_USE_TOKEN_BYTES = 32


# ----------------------------------------------------------------------
# Passwords
# ----------------------------------------------------------------------


def validate_password_policy(password: str, min_length: int) -> None:
    """Raise ValidationError unless the password satisfies the length policy."""
    if len(password or "") < min_length:
        raise ValidationError(f"Password must be at least {min_length} characters")


def _normalize_password_for_bcrypt(password: str) -> bytes:
    """bcrypt only considers the first 72 bytes; longer inputs are truncated."""
    return (password or "").encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    """
    Hash a password with a per-password random salt.

    Args:
        password: Plaintext password
        rounds: bcrypt cost factor

    Returns:
        bcrypt hash string
    """
    hashed = bcrypt.hashpw(_normalize_password_for_bcrypt(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(plain_password: str, password_hash: Optional[str]) -> bool:
    """Check a plaintext password against a stored hash. Missing or malformed hashes never match."""
    if not password_hash:
        return False
    try:
        return bcrypt.checkpw(_normalize_password_for_bcrypt(plain_password), password_hash.encode("utf-8"))
    except ValueError:
        return False


# ----------------------------------------------------------------------
# Single-use tokens
# ----------------------------------------------------------------------


def generate_single_use_token() -> str:
    """Random 64-character hex token for email verification and password reset."""
    return secrets.token_hex(SINGLE_USE_TOKEN_BYTES)


# ----------------------------------------------------------------------
# Session tokens
# ----------------------------------------------------------------------


@dataclass(frozen=True)
class TokenPayload:
    """Verified claims of a session token."""

    user_id: int
    email: str
    issued_at: datetime


class TokenIssuer:
    """Signs and verifies time-limited bearer tokens."""

    def __init__(self, secret: str, algorithm: str = "HS256", ttl: timedelta = timedelta(days=7)):
        if not secret:
            raise ValueError("A signing secret must be configured")
        self._secret = secret
        self._algorithm = algorithm
        self.ttl = ttl

    def issue(self, user_id: int, email: str) -> str:
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "email": email,
            "iat": int(now.timestamp()),
            "exp": int((now + self.ttl).timestamp()),
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenPayload:
        """
        Verify signature and expiry of a session token.

        Raises:
            TokenExpiredError: Signature is valid but the token has expired
            InvalidTokenError: Token is malformed, tampered with or lacks claims
        """
        try:
            claims = jwt.decode(token, self._secret, algorithms=[self._algorithm],
                                options={"require": ["sub", "exp", "iat"]})
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpiredError() from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError() from exc

        subject = str(claims["sub"]).strip()
        if not subject.isdigit():
            raise InvalidTokenError()

        return TokenPayload(user_id=int(subject), email=claims.get("email", ""),
                            issued_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc))


def build_token_issuer(settings) -> TokenIssuer:
    """Token issuer configured from application settings."""
    return TokenIssuer(settings.SECRET_KEY, settings.ALGORITHM,
                       timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
