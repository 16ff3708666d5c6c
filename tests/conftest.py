"""Shared pytest fixtures."""

import pytest

from escow.logging.context import clear_log_context

ENV_VARS = ("LOG_LEVEL", "ESCOW_DATA_DIR", "ESCOW_ENVIRONMENT")


@pytest.fixture
def mock_env_vars(monkeypatch):
    """Start from an environment with none of the escow variables set."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_log_context():
    clear_log_context()
    yield
    clear_log_context()
