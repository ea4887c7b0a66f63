"""
permstore Test Configuration

Shared fixtures for all tests.
"""

import pytest

from permstore import Store
from permstore.logger import configure_logger, get_logger


@pytest.fixture(autouse=True)
def reset_logger():
    """Give every test a quiet, file-less logger with empty history."""
    configure_logger(enabled=True, level="TRACE")
    logger = get_logger()
    logger.clear_history()
    yield logger
    logger.close()
    configure_logger()
    logger.clear_history()


@pytest.fixture
def store():
    """Empty store with the default rw policy."""
    return Store()


@pytest.fixture
def project_dir(tmp_path):
    """Temporary project root with an empty .permstore directory."""
    (tmp_path / ".permstore").mkdir()
    return tmp_path


@pytest.fixture
def clean_env(monkeypatch):
    """Remove PERMSTORE_* variables from the environment."""
    for name in (
        "PERMSTORE_DEFAULT_POLICY",
        "PERMSTORE_DEFINITIONS_DIR",
        "PERMSTORE_LOG_LEVEL",
        "PERMSTORE_LOG_DIR",
        "PERMSTORE_LOG_ENABLED",
        "PERMSTORE_LOG_CONSOLE",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
