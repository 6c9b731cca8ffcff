"""Testing fakes – in-memory doubles for the cache and its ports."""
from chms_cache.testing.fakes.cache import InMemoryCache
from chms_cache.testing.fakes.clock import FakeClock
from chms_cache.testing.fakes.metrics import FakeMetricsRegistry
from chms_cache.kernel.time import FrozenClock

__all__ = [
    "FakeClock",
    "FakeMetricsRegistry",
    "FrozenClock",
    "InMemoryCache",
]
