"""Password hashing and bearer token helpers."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from cinequeue.exceptions import InvalidTokenError, TokenExpiredError

__all__ = ["decode_token", "encode_token", "hash_password", "verify_password"]


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a plain text password with a fresh bcrypt salt.

    Args:
        password (str): Plain text password
        rounds (int): bcrypt cost factor

    Returns:
        str: The encoded bcrypt hash
    """
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode(
        "utf-8"
    )


def verify_password(password: str, password_hash: str) -> bool:
    """Check a plain text password against a stored bcrypt hash.

    Malformed hashes never match.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def encode_token(
    claims: dict[str, Any],
    secret: str,
    *,
    expires_in: int,
    algorithm: str = "HS256",
    now: datetime | None = None,
) -> str:
    """Sign a JWT carrying ``claims`` plus ``iat``/``exp``.

    Args:
        claims (dict[str, Any]): Payload claims, e.g. ``sub`` and ``username``
        secret (str): Signing secret
        expires_in (int): Lifetime in seconds
        algorithm (str): JWS algorithm
        now (datetime | None): Issue time, defaults to the current UTC time

    Returns:
        str: The encoded token
    """
    issued_at = now or datetime.now(UTC)
    payload = {
        **claims,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=expires_in),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> dict[str, Any]:
    """Verify and decode a JWT.

    Raises:
        TokenExpiredError: If the token's ``exp`` has passed
        InvalidTokenError: For any other verification failure
    """
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["exp", "sub"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise TokenExpiredError("Access denied. Token has expired.") from e
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError("Access denied. Invalid token.") from e
