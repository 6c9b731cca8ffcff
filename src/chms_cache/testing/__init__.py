"""Testing support – fakes and pytest fixtures.

Import in your ``conftest.py``::

    pytest_plugins = ["chms_cache.testing.fixtures"]
"""

from chms_cache.testing.fakes import FakeClock, FakeMetricsRegistry, FrozenClock, InMemoryCache

__all__ = [
    "FakeClock",
    "FakeMetricsRegistry",
    "FrozenClock",
    "InMemoryCache",
]
