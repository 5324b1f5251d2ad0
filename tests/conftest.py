"""Pytest configuration and fixtures for fleetcache.

Every cache test runs on a ManualClock so expiry is simulated, never slept.
"""

import pytest

from fleetcache.core.config import get_settings
from fleetcache.infrastructure.cache.memory_cache import CacheManager, reset_cache
from fleetcache.shared.utils.clock import ManualClock

# Arbitrary fixed start time (2025-01-15T12:00:00Z) in epoch milliseconds.
START_MS = 1_736_942_400_000


@pytest.fixture(autouse=True)
def _isolated_settings_and_cache():
    """Fresh settings and no process-wide cache for each test."""
    get_settings.cache_clear()
    reset_cache()
    yield
    reset_cache()
    get_settings.cache_clear()


@pytest.fixture
def clock() -> ManualClock:
    """Manual clock starting at START_MS."""
    return ManualClock(start_ms=START_MS)


@pytest.fixture
def cache(clock: ManualClock) -> CacheManager:
    """Empty CacheManager on the manual clock with the 5 minute default TTL."""
    return CacheManager(clock=clock, default_ttl_ms=5 * 60 * 1000)
