"""Unit test fixtures shared across bounded contexts."""

import pytest

from infrastructure.settings import get_atlas_settings, get_drain_settings, get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Drop cached settings so environment changes in a test take effect."""
    get_settings.cache_clear()
    get_atlas_settings.cache_clear()
    get_drain_settings.cache_clear()
    yield
    get_settings.cache_clear()
    get_atlas_settings.cache_clear()
    get_drain_settings.cache_clear()
