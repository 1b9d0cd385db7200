"""Shared pytest configuration and fixtures for the test suite."""

import atexit
import os
import shutil
import tempfile
from pathlib import Path

import pytest
import yaml

_TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="cq-tests-"))
os.environ["CQ_DATA_PATH"] = str(_TEST_DATA_DIR)
_TEST_CONFIG_FILE = _TEST_DATA_DIR / "config.yaml"

_TEST_CONFIG_FILE.write_text(
    yaml.safe_dump(
        {
            "omdb": {"api_key": "omdb-test-key", "retry_delay": 0},
            "auth": {
                "jwt_secret": "test-secret-with-enough-length-for-hs256",
                "bcrypt_rounds": 4,
            },
            "cache": {"ttl": 60},
        },
        sort_keys=False,
    ),
    encoding="utf-8",
)

from cinequeue.config import settings as settings_module  # noqa: E402
from cinequeue.config.database import db  # noqa: E402
from cinequeue.models import Base  # noqa: E402
from cinequeue.web.state import get_app_state  # noqa: E402

settings_module.get_config.cache_clear()


@pytest.fixture(autouse=True)
def _reset_app_state():
    """Ensure each test interacts with a fresh AppState instance."""
    get_app_state.cache_clear()
    state = get_app_state()
    yield state
    get_app_state.cache_clear()


@pytest.fixture(autouse=True)
def _clean_database():
    """Remove every row written by a test once it finishes."""
    yield
    with db() as ctx:
        for table in reversed(Base.metadata.sorted_tables):
            ctx.session.execute(table.delete())
        ctx.session.commit()


@atexit.register
def _cleanup_test_data_dir() -> None:
    """Remove the temporary test data directory after the test session."""
    shutil.rmtree(_TEST_DATA_DIR, ignore_errors=True)
