"""Pytest configuration and fixtures."""

import random

import pytest

from randcheck.config import settings as settings_module
from randcheck.constants import ENV_DEBUG, ENV_ITERATIONS, ENV_MAX_CHAR, ENV_MAX_FILTER_ATTEMPTS, ENV_SEED


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Every test starts from default settings, whatever the shell exports."""
    for name in (ENV_SEED, ENV_ITERATIONS, ENV_MAX_FILTER_ATTEMPTS, ENV_MAX_CHAR, ENV_DEBUG):
        monkeypatch.delenv(name, raising=False)
    settings_module.reload_settings()
    yield
    monkeypatch.undo()
    settings_module.reload_settings()


@pytest.fixture
def configure(monkeypatch):
    """Set environment variables and reload the settings."""
    def apply(**env):
        for name, value in env.items():
            monkeypatch.setenv(name, str(value))
        return settings_module.reload_settings()

    return apply


@pytest.fixture
def seed():
    return 20240611


@pytest.fixture
def rng(seed):
    return random.Random(seed)
