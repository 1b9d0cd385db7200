"""CineQueue Configuration Settings."""

from __future__ import annotations

import os
from enum import StrEnum
from functools import cached_property, lru_cache
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from cinequeue.exceptions import MissingSecretError
from cinequeue.utils.logging import _get_logger

__all__ = [
    "AuthConfig",
    "CacheConfig",
    "CineQueueConfig",
    "Environment",
    "LogLevel",
    "OmdbConfig",
    "RecommendationConfig",
    "WebConfig",
    "get_config",
]

_log = _get_logger(__name__)


def get_data_path() -> Path:
    """Return the data directory from ``CQ_DATA_PATH`` (default ``./data``)."""
    return Path(os.getenv("CQ_DATA_PATH", "./data")).resolve()


def find_yaml_config_file() -> Path:
    """Find the YAML configuration file in the data path.

    Returns:
        Path: The path to an existing YAML configuration file or the default location.
    """
    data_path = get_data_path()

    for ext in ("yaml", "yml"):
        yaml_file = data_path / f"config.{ext}"
        if yaml_file.exists():
            _log.debug(f"Using YAML config file: {yaml_file.resolve()}")
            return yaml_file.resolve()
    return data_path / "config.yaml"


class BaseStrEnum(StrEnum):
    """String enumeration with case-insensitive lookup."""

    @classmethod
    def _missing_(cls, value: object) -> BaseStrEnum | None:
        value = value.lower() if isinstance(value, str) else value
        for member in cls:
            if member.lower() == value:
                return member
        return None

    def __repr__(self) -> str:
        """Return the string value of the enum member."""
        return self.value

    def __str__(self) -> str:
        """Return the string representation of the enum member."""
        return repr(self)


class LogLevel(BaseStrEnum):
    """Enumeration of available logging levels.

    Note: SUCCESS is a custom level used by this application.
    """

    DEBUG = "DEBUG"  # Detailed information for debugging
    INFO = "INFO"  # General information about program execution
    SUCCESS = "SUCCESS"  # Successful operations (custom level)
    WARNING = "WARNING"  # Potential problems or issues
    ERROR = "ERROR"  # Error that prevented an operation
    CRITICAL = "CRITICAL"  # Error that prevents further program execution


class Environment(BaseStrEnum):
    """Deployment environment; development exposes error details to clients."""

    PRODUCTION = "production"
    DEVELOPMENT = "development"


class OmdbConfig(BaseModel):
    """Settings for the OMDb metadata provider."""

    base_url: str = Field(
        default="http://www.omdbapi.com", description="OMDb API base URL"
    )
    api_key: SecretStr | None = Field(default=None, description="OMDb API key")
    timeout: float = Field(
        default=5.0, gt=0, description="Per-attempt request timeout in seconds"
    )
    retry_attempts: int = Field(
        default=3, ge=0, description="Retries after the first failed attempt"
    )
    retry_delay: float = Field(
        default=1.0, ge=0, description="Seconds to wait between attempts"
    )


class AuthConfig(BaseModel):
    """Settings for password hashing and bearer tokens."""

    jwt_secret: SecretStr | None = Field(
        default=None, description="Secret used to sign bearer tokens (required)"
    )
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_expires_in: int = Field(
        default=24 * 60 * 60, gt=0, description="Token lifetime in seconds"
    )
    bcrypt_rounds: int = Field(
        default=12, ge=4, le=31, description="bcrypt cost factor"
    )

    def require_secret(self) -> str:
        """Return the JWT secret or fail if it is not configured.

        Raises:
            MissingSecretError: If no secret is configured.
        """
        if self.jwt_secret is None or not self.jwt_secret.get_secret_value():
            raise MissingSecretError("auth.jwt_secret must be configured")
        return self.jwt_secret.get_secret_value()


class CacheConfig(BaseModel):
    """Settings for the in-memory metadata cache."""

    enabled: bool = Field(default=True, description="Cache provider responses")
    ttl: float = Field(default=300, gt=0, description="Entry lifetime in seconds")
    maxsize: int = Field(default=1024, ge=1, description="Maximum cached entries")


class RecommendationConfig(BaseModel):
    """Settings for recommendation generation."""

    persist: bool = Field(
        default=False, description="Store each generated batch per user"
    )


class WebConfig(BaseModel):
    """Configuration for the embedded web server."""

    host: str = Field(default="0.0.0.0", description="Host for the web server")
    port: int = Field(default=3000, description="Port for the web server")
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"], description="Allowed CORS origins"
    )


class CineQueueConfig(BaseSettings):
    """Configuration manager for the CineQueue application.

    Values come from init kwargs, ``CQ_``-prefixed environment variables (use
    ``__`` for nested keys, e.g. ``CQ_OMDB__API_KEY``), a ``.env`` file, and
    finally ``config.yaml`` in the data path.
    """

    omdb: OmdbConfig = Field(default_factory=OmdbConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    recommendations: RecommendationConfig = Field(
        default_factory=RecommendationConfig
    )
    web: WebConfig = Field(default_factory=WebConfig)

    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy URL; defaults to a SQLite file in the data path",
    )
    log_level: LogLevel = Field(
        default=LogLevel.INFO, description="Logging level for the application"
    )
    environment: Environment = Field(
        default=Environment.PRODUCTION, description="Deployment environment"
    )

    @cached_property
    def data_path(self) -> Path:
        """Get the data path for CineQueue.

        Returns:
            Path: The data path resolved from the environment or default location.
        """
        return get_data_path()

    @property
    def is_development(self) -> bool:
        """Whether error details may be shown to API clients."""
        return self.environment == Environment.DEVELOPMENT

    def __str__(self) -> str:
        """Human-readable summary with secrets masked."""
        return (
            f"CineQueue Config: OMDB_URL: {self.omdb.base_url}, "
            f"OMDB_API_KEY: {'**********' if self.omdb.api_key else 'unset'}, "
            f"JWT_SECRET: {'**********' if self.auth.jwt_secret else 'unset'}, "
            f"DATA_PATH: {self.data_path}, LOG_LEVEL: {self.log_level}, "
            f"ENVIRONMENT: {self.environment}"
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of configuration sources."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=find_yaml_config_file()),
        )

    model_config = SettingsConfigDict(
        env_prefix="CQ_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )


@lru_cache(maxsize=1)
def get_config() -> CineQueueConfig:
    """Get the singleton instance of CineQueueConfig.

    Returns:
        CineQueueConfig: The singleton configuration instance.
    """
    return CineQueueConfig()
