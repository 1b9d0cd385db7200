"""Service for user registration, login and bearer token verification."""

from dataclasses import dataclass
from datetime import datetime
from functools import lru_cache

from pydantic import BaseModel, Field
from sqlalchemy.exc import IntegrityError

from cinequeue import config, log
from cinequeue.config.database import db
from cinequeue.config.settings import AuthConfig
from cinequeue.exceptions import (
    AuthError,
    InvalidCredentialsError,
    UsernameTakenError,
    UserNotFoundError,
    ValidationError,
)
from cinequeue.models.db.user import User
from cinequeue.utils.security import (
    decode_token,
    encode_token,
    hash_password,
    verify_password,
)

__all__ = [
    "AuthResponse",
    "AuthService",
    "Credentials",
    "UserModel",
    "UserProfileModel",
    "get_auth_service",
]

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6


class Credentials(BaseModel):
    """Username/password pair submitted to register or log in."""

    username: str | None = None
    password: str | None = None


class UserModel(BaseModel):
    """Public representation of a user embedded in auth responses."""

    id: int
    username: str


class UserProfileModel(UserModel):
    """Public representation of the authenticated user."""

    created_at: datetime = Field(serialization_alias="createdAt")


class AuthResponse(BaseModel):
    """Token issued after a successful registration or login."""

    message: str
    token: str
    user: UserModel


@dataclass
class AuthService:
    """Service encapsulating account creation and credential checks."""

    settings: AuthConfig

    def register(self, username: str | None, password: str | None) -> AuthResponse:
        """Create an account and issue a token for it.

        Raises:
            ValidationError: If the username or password is missing or invalid.
            UsernameTakenError: If the username is already registered.
        """
        username = (username or "").strip()
        password = password or ""
        self._validate(username, password)

        password_hash = hash_password(password, rounds=self.settings.bcrypt_rounds)
        with db() as ctx:
            exists = ctx.session.query(User.id).filter(User.username == username)
            if exists.first() is not None:
                raise UsernameTakenError("Username already exists")

            user = User(username=username, password_hash=password_hash)
            ctx.session.add(user)
            try:
                ctx.session.commit()
            except IntegrityError as e:
                raise UsernameTakenError("Username already exists") from e
            ctx.session.refresh(user)

        log.success(f"Registered user $$'{user.username}'$$ ($${{id: {user.id}}}$$)")
        return AuthResponse(
            message="User registered successfully",
            token=self.issue_token(user),
            user=UserModel(id=user.id, username=user.username),
        )

    def login(self, username: str | None, password: str | None) -> AuthResponse:
        """Check credentials and issue a token.

        Unknown users and wrong passwords fail identically.

        Raises:
            ValidationError: If either field is missing.
            InvalidCredentialsError: If the credentials do not match.
        """
        username = (username or "").strip()
        if not username or not password:
            raise ValidationError("Username and password are required")

        with db() as ctx:
            user = ctx.session.query(User).filter(User.username == username).first()

        if user is None or not verify_password(password, user.password_hash):
            log.info(f"Failed login attempt for $$'{username}'$$")
            raise InvalidCredentialsError("Invalid username or password")

        log.debug(f"User $$'{user.username}'$$ logged in")
        return AuthResponse(
            message="Login successful",
            token=self.issue_token(user),
            user=UserModel(id=user.id, username=user.username),
        )

    def issue_token(self, user: User) -> str:
        """Sign a bearer token identifying ``user``."""
        return encode_token(
            {"sub": str(user.id), "username": user.username},
            self.settings.require_secret(),
            expires_in=self.settings.jwt_expires_in,
            algorithm=self.settings.jwt_algorithm,
        )

    def authenticate(self, token: str) -> UserProfileModel:
        """Resolve a bearer token to its user.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token fails verification.
            AuthError: If the token's user no longer exists.
        """
        claims = decode_token(
            token, self.settings.require_secret(), self.settings.jwt_algorithm
        )
        try:
            return self.get_user(int(claims["sub"]))
        except (TypeError, ValueError, UserNotFoundError) as e:
            raise AuthError("Access denied. User not found.") from e

    def get_user(self, user_id: int) -> UserProfileModel:
        """Return the user with ``user_id``.

        Raises:
            UserNotFoundError: If no such user exists.
        """
        with db() as ctx:
            user = ctx.session.get(User, user_id)
        if user is None:
            raise UserNotFoundError("User not found")
        return UserProfileModel(
            id=user.id, username=user.username, created_at=user.created_at
        )

    @staticmethod
    def _validate(username: str, password: str) -> None:
        if not username or not password:
            raise ValidationError("Username and password are required")
        if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
            raise ValidationError(
                f"Username must be between {USERNAME_MIN_LENGTH} and "
                f"{USERNAME_MAX_LENGTH} characters"
            )
        if len(password) < PASSWORD_MIN_LENGTH:
            raise ValidationError(
                f"Password must be at least {PASSWORD_MIN_LENGTH} characters"
            )


@lru_cache(maxsize=1)
def get_auth_service() -> AuthService:
    """Get the singleton auth service instance.

    Returns:
        AuthService: The auth service instance.
    """
    return AuthService(settings=config.auth)
