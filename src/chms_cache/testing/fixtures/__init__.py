"""Testing fixtures – pytest fixtures for the cache and its fakes.

Enable in a ``conftest.py``::

    pytest_plugins = ["chms_cache.testing.fixtures"]
"""
from chms_cache.testing.fixtures.cache import cache_settings, file_cache, memory_cache
from chms_cache.testing.fixtures.clock import fake_clock

__all__ = [
    "cache_settings",
    "fake_clock",
    "file_cache",
    "memory_cache",
]
