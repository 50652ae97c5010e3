"""Shared pytest fixtures."""

import pytest

from propfilter.core.config import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reload settings for every test so environment overrides apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
