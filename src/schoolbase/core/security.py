"""
Security Utilities

Password hashing (bcrypt) and JWT signing/verification (python-jose).
These are thin primitives; role and tenant checks live in core/auth.py.
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt

from schoolbase.core.config import settings

logger = logging.getLogger(__name__)


class TokenError(Exception):
    """Base class for token verification failures."""


class TokenExpiredError(TokenError):
    """Raised when a token's ``exp`` claim is in the past."""


class TokenInvalidError(TokenError):
    """Raised when a token's signature or structure is invalid."""


def hash_password(password: str) -> str:
    """
    Hash a password with bcrypt.

    Args:
        password: Plain text password

    Returns:
        Bcrypt hash string with the salt embedded

    Raises:
        ValueError: If the password is empty
    """
    if not password:
        raise ValueError("Password cannot be empty")

    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str | None) -> bool:
    """Return True if ``password`` matches ``password_hash``."""
    if not password or not password_hash:
        return False

    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError as e:
        logger.warning(f"Password verification failed: {e}")
        return False


def create_access_token(
    claims: dict[str, Any],
    expires_minutes: int | None = None,
) -> str:
    """
    Sign a JWT carrying ``claims``.

    Args:
        claims: Payload claims (role, schoolId, ...)
        expires_minutes: Lifetime in minutes, defaults to settings.jwt_expires_minutes

    Returns:
        Encoded JWT string
    """
    now = datetime.now(UTC)
    lifetime = expires_minutes if expires_minutes is not None else settings.jwt_expires_minutes

    payload = dict(claims)
    payload["iat"] = int(now.timestamp())
    payload["exp"] = int((now + timedelta(minutes=lifetime)).timestamp())

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """
    Verify a JWT and return its claims.

    Raises:
        TokenExpiredError: If the token has expired
        TokenInvalidError: If the signature or format is invalid
    """
    try:
        return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token expired") from e
    except JWTError as e:
        raise TokenInvalidError("Invalid token") from e
