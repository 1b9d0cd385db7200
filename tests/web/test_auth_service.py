"""Tests for the auth service."""

import pytest

from cinequeue.config.database import db
from cinequeue.exceptions import (
    AuthError,
    InvalidCredentialsError,
    InvalidTokenError,
    UsernameTakenError,
    ValidationError,
)
from cinequeue.models.db.user import User
from cinequeue.utils.security import decode_token
from cinequeue.web.services.auth_service import AuthService, get_auth_service


@pytest.fixture
def service() -> AuthService:
    """Provide the configured auth service."""
    return get_auth_service()


def test_register_issues_token_for_new_user(service: AuthService):
    """Registration stores the user and returns a token naming them."""
    response = service.register("trinity", "followthewhiterabbit")

    assert response.user.username == "trinity"
    claims = decode_token(response.token, service.settings.require_secret())
    assert claims["sub"] == str(response.user.id)
    assert claims["username"] == "trinity"


def test_register_rejects_duplicates(service: AuthService):
    """Usernames are unique."""
    service.register("morpheus", "redpill")

    with pytest.raises(UsernameTakenError):
        service.register("morpheus", "bluepill")


@pytest.mark.parametrize(
    ("username", "password"),
    [
        (None, "secret1"),
        ("neo", None),
        ("ab", "secret1"),
        ("x" * 31, "secret1"),
        ("neo", "12345"),
    ],
)
def test_register_validates_input(service: AuthService, username, password):
    """Missing fields and out-of-range lengths are rejected."""
    with pytest.raises(ValidationError):
        service.register(username, password)


def test_login_checks_password(service: AuthService):
    """Login succeeds with the right password and fails otherwise."""
    registered = service.register("smith", "agent007")

    response = service.login("smith", "agent007")
    assert response.user.id == registered.user.id
    assert response.message == "Login successful"

    with pytest.raises(InvalidCredentialsError):
        service.login("smith", "wrong-password")
    with pytest.raises(InvalidCredentialsError):
        service.login("nobody", "agent007")
    with pytest.raises(ValidationError):
        service.login("smith", "")


def test_authenticate_resolves_user(service: AuthService):
    """A valid token resolves to the profile of its user."""
    registered = service.register("oracle", "cookies")

    profile = service.authenticate(registered.token)

    assert profile.id == registered.user.id
    assert profile.username == "oracle"
    assert profile.created_at is not None


def test_authenticate_rejects_tokens_for_missing_users(service: AuthService):
    """Tokens for users that no longer exist are rejected with a 401."""
    registered = service.register("cypher", "steak123")
    token = registered.token

    with db() as ctx:
        ctx.session.query(User).filter(User.id == registered.user.id).delete()
        ctx.session.commit()

    with pytest.raises(AuthError) as exc_info:
        service.authenticate(token)
    assert exc_info.value.status_code == 401


def test_authenticate_rejects_garbage(service: AuthService):
    """Unverifiable tokens raise InvalidTokenError."""
    with pytest.raises(InvalidTokenError):
        service.authenticate("not-a-token")
