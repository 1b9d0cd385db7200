"""Tests for settings configuration utilities."""

from pathlib import Path

import pytest
from pydantic import SecretStr

from cinequeue.config.settings import (
    AuthConfig,
    CineQueueConfig,
    Environment,
    LogLevel,
    find_yaml_config_file,
)
from cinequeue.exceptions import MissingSecretError


@pytest.fixture(autouse=True)
def isolate_working_directory(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Set the working directory to a temporary path for each test."""
    monkeypatch.chdir(tmp_path)


def test_find_yaml_config_file_prefers_data_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that find_yaml_config_file looks in CQ_DATA_PATH."""
    monkeypatch.setenv("CQ_DATA_PATH", str(tmp_path))
    config_file = tmp_path / "config.yaml"
    config_file.write_text("log_level: DEBUG", encoding="utf-8")

    result = find_yaml_config_file()

    assert result == config_file.resolve()


def test_find_yaml_config_file_accepts_yml_extension(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that a config.yml file is found when config.yaml is absent."""
    monkeypatch.setenv("CQ_DATA_PATH", str(tmp_path))
    config_file = tmp_path / "config.yml"
    config_file.write_text("log_level: DEBUG", encoding="utf-8")

    assert find_yaml_config_file() == config_file.resolve()


def test_yaml_values_are_loaded(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Test that values from config.yaml populate nested sections."""
    monkeypatch.setenv("CQ_DATA_PATH", str(tmp_path))
    (tmp_path / "config.yaml").write_text(
        "omdb:\n  timeout: 2.5\n  retry_attempts: 5\nweb:\n  port: 8080\n",
        encoding="utf-8",
    )

    config = CineQueueConfig()

    assert config.omdb.timeout == 2.5
    assert config.omdb.retry_attempts == 5
    assert config.web.port == 8080


def test_environment_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Test that CQ_ environment variables win over the YAML file."""
    monkeypatch.setenv("CQ_DATA_PATH", str(tmp_path))
    (tmp_path / "config.yaml").write_text("web:\n  port: 8080\n", encoding="utf-8")
    monkeypatch.setenv("CQ_WEB__PORT", "9090")
    monkeypatch.setenv("CQ_OMDB__API_KEY", "from-env")

    config = CineQueueConfig()

    assert config.web.port == 9090
    assert config.omdb.api_key is not None
    assert config.omdb.api_key.get_secret_value() == "from-env"


def test_defaults(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Test the documented defaults."""
    monkeypatch.setenv("CQ_DATA_PATH", str(tmp_path))

    config = CineQueueConfig()

    assert config.omdb.base_url == "http://www.omdbapi.com"
    assert config.omdb.timeout == 5.0
    assert config.omdb.retry_attempts == 3
    assert config.omdb.retry_delay == 1.0
    assert config.auth.jwt_algorithm == "HS256"
    assert config.auth.jwt_expires_in == 24 * 60 * 60
    assert config.cache.ttl == 300
    assert config.recommendations.persist is False
    assert config.environment == Environment.PRODUCTION
    assert config.log_level == LogLevel.INFO
    assert config.data_path == tmp_path.resolve()


def test_enums_are_case_insensitive():
    """Test that enum settings accept any casing."""
    config = CineQueueConfig(log_level="debug", environment="Development")

    assert config.log_level == LogLevel.DEBUG
    assert config.is_development


def test_require_secret_fails_without_secret():
    """Test that a missing JWT secret is a configuration error."""
    with pytest.raises(MissingSecretError):
        AuthConfig().require_secret()
    with pytest.raises(MissingSecretError):
        AuthConfig(jwt_secret=SecretStr("")).require_secret()

    assert AuthConfig(jwt_secret=SecretStr("s3cret")).require_secret() == "s3cret"


def test_str_masks_secrets():
    """Test that the config summary never prints secret values."""
    config = CineQueueConfig(
        omdb={"api_key": "omdb-value"}, auth={"jwt_secret": "jwt-value"}
    )

    rendered = str(config)

    assert "omdb-value" not in rendered
    assert "jwt-value" not in rendered
    assert "**********" in rendered
