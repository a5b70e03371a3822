"""Pytest configuration for unit tests."""

import pytest

from storefront.core.config import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Drop cached settings so environment patches take effect."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
