"""Shared fixtures for unit tests."""

import pytest

from fetchmcp.config import Settings


@pytest.fixture
def app_settings() -> Settings:
    """Real settings with defaults, ignoring any local .env file."""
    return Settings(_env_file=None)  # type: ignore[call-arg]
