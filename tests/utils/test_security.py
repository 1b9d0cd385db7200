"""Tests for password hashing and token helpers."""

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from cinequeue.exceptions import InvalidTokenError, TokenExpiredError
from cinequeue.utils.security import (
    decode_token,
    encode_token,
    hash_password,
    verify_password,
)

SECRET = "unit-test-secret-with-enough-length-for-hs256"


def test_password_hash_verifies_and_is_salted():
    """Hashes verify the original password and differ between calls."""
    first = hash_password("hunter22", rounds=4)
    second = hash_password("hunter22", rounds=4)

    assert first != second
    assert first != "hunter22"
    assert verify_password("hunter22", first)
    assert verify_password("hunter22", second)
    assert not verify_password("hunter23", first)


def test_verify_password_rejects_malformed_hash():
    """A stored value that is not a bcrypt hash never matches."""
    assert not verify_password("anything", "not-a-bcrypt-hash")


def test_token_round_trip_preserves_claims():
    """Decoding a fresh token returns the encoded claims."""
    token = encode_token({"sub": "7", "username": "neo"}, SECRET, expires_in=60)

    claims = decode_token(token, SECRET)

    assert claims["sub"] == "7"
    assert claims["username"] == "neo"
    assert claims["exp"] > claims["iat"]


def test_expired_token_is_rejected():
    """Tokens past their expiry raise TokenExpiredError."""
    issued = datetime.now(UTC) - timedelta(hours=2)
    token = encode_token({"sub": "1"}, SECRET, expires_in=60, now=issued)

    with pytest.raises(TokenExpiredError):
        decode_token(token, SECRET)


def test_token_signed_with_other_secret_is_rejected():
    """Tampered or foreign tokens raise InvalidTokenError."""
    token = encode_token(
        {"sub": "1"}, "another-secret-with-enough-length-for-hs256", expires_in=60
    )

    with pytest.raises(InvalidTokenError):
        decode_token(token, SECRET)


def test_garbage_token_is_rejected():
    """Strings that are not JWTs raise InvalidTokenError."""
    with pytest.raises(InvalidTokenError):
        decode_token("definitely.not.ajwt", SECRET)


def test_token_without_subject_is_rejected():
    """Tokens must carry a subject claim."""
    token = jwt.encode(
        {"exp": datetime.now(UTC) + timedelta(minutes=5)}, SECRET, algorithm="HS256"
    )

    with pytest.raises(InvalidTokenError):
        decode_token(token, SECRET)
