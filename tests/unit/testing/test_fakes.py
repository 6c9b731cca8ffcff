"""Unit tests for in-memory test fakes."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from chms_cache.cache import Cache, CacheSettings, JsonValueSerializer
from chms_cache.kernel.time import FrozenClock
from chms_cache.testing.fakes import FakeClock, FakeMetricsRegistry, InMemoryCache
from chms_cache.testing.fakes.clock import EPOCH


# ---------------------------------------------------------------------------
# FakeClock
# ---------------------------------------------------------------------------


class TestFakeClock:
    def test_pinned_to_known_instant(self) -> None:
        clock = FakeClock()
        assert isinstance(clock, FrozenClock)
        assert clock.now() == datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def test_fixture_is_a_fresh_fake_clock(self, fake_clock: FrozenClock) -> None:
        assert fake_clock.now() == FakeClock().now()

    def test_custom_start(self) -> None:
        start = datetime(2030, 6, 1, tzinfo=UTC)
        clock = FakeClock(start)
        clock.advance(seconds=30)
        assert clock.now() == datetime(2030, 6, 1, 0, 0, 30, tzinfo=UTC)

    def test_default_start_is_epoch(self) -> None:
        assert FakeClock().now() == EPOCH


# ---------------------------------------------------------------------------
# InMemoryCache
# ---------------------------------------------------------------------------


class TestInMemoryCache:
    def test_get_set(self, memory_cache: InMemoryCache) -> None:
        assert memory_cache.set("k", {"a": [1, 2]})
        assert memory_cache.get("k") == {"a": [1, 2]}
        assert memory_cache.get("missing", 0) == 0

    def test_values_are_copies(self, memory_cache: InMemoryCache) -> None:
        value = {"a": 1}
        memory_cache.set("k", value)
        value["a"] = 2
        assert memory_cache.get("k") == {"a": 1}

    def test_expiry(self, memory_cache: InMemoryCache, fake_clock: FrozenClock) -> None:
        memory_cache.set("k", 1, ttl=10)
        fake_clock.advance(seconds=10)
        assert memory_cache.get("k") is None
        assert not memory_cache.has("k")

    def test_default_ttl(self, memory_cache: InMemoryCache, fake_clock: FrozenClock) -> None:
        memory_cache.set("k", 1)
        fake_clock.advance(seconds=59)
        assert memory_cache.has("k")
        fake_clock.advance(seconds=1)
        assert not memory_cache.has("k")

    def test_zero_ttl_never_expires(self, memory_cache: InMemoryCache, fake_clock: FrozenClock) -> None:
        memory_cache.set("k", 1, ttl=0)
        fake_clock.advance(days=1000)
        assert memory_cache.get("k") == 1

    def test_rejects_what_the_file_cache_rejects(self, fake_clock: FrozenClock) -> None:
        cache = InMemoryCache(clock=fake_clock, max_entry_size=8)
        assert cache.set("k", object()) is False
        assert cache.set("k", "x" * 100) is False
        assert cache.set("k", 1, ttl=-1) is False
        assert cache.get("k") is None

    def test_remember_counts_computations(self, memory_cache: InMemoryCache) -> None:
        memory_cache.remember("k", lambda: 1)
        memory_cache.remember("k", lambda: 2)
        assert memory_cache.computed == 1
        assert memory_cache.get("k") == 1

    def test_remember_propagates_compute_errors(self, memory_cache: InMemoryCache) -> None:
        def boom() -> int:
            raise LookupError("no row")

        with pytest.raises(LookupError):
            memory_cache.remember("k", boom)

    def test_invalidate_tag(self, memory_cache: InMemoryCache) -> None:
        memory_cache.set("a", 1, tags=["grp"])
        memory_cache.set("b", 2, tags="grp")
        memory_cache.set("c", 3)
        assert memory_cache.invalidate_tag("grp") == 2
        assert memory_cache.get("c") == 3
        assert memory_cache.invalidate_tag("grp") == 0

    def test_delete_idempotent(self, memory_cache: InMemoryCache) -> None:
        memory_cache.set("k", 1)
        assert memory_cache.delete("k")
        assert memory_cache.delete("k")

    def test_cleanup_flush_stats(self, memory_cache: InMemoryCache, fake_clock: FrozenClock) -> None:
        memory_cache.set("short", 1, ttl=5)
        memory_cache.set("long", 2, ttl=500)
        fake_clock.advance(seconds=6)

        assert memory_cache.stats().expired_count == 1
        assert memory_cache.cleanup() == 1
        assert memory_cache.stats().entry_count == 1
        assert memory_cache.flush() == 1
        assert memory_cache.stats().entry_count == 0

    def test_total_bytes_match_the_file_cache(self, memory_cache: InMemoryCache, file_cache: Cache) -> None:
        value = {"members": [1, 2, 3], "note": "olá"}
        memory_cache.set("k", value, ttl=60, tags=["grp"])
        file_cache.set("k", value, ttl=60, tags=["grp"])
        assert memory_cache.stats().total_bytes == file_cache.stats().total_bytes

    def test_size_limit_counts_the_encoded_entry(self, fake_clock: FrozenClock, tmp_path: Path) -> None:
        value = "x" * 60
        assert len(JsonValueSerializer().serialize(value)) < 100
        memory = InMemoryCache(clock=fake_clock, max_entry_size=100)
        files = Cache(CacheSettings(storage_dir=str(tmp_path), max_entry_size=100), clock=fake_clock)
        assert memory.set("k", value) is False
        assert files.set("k", value) is False
        assert memory.set("k", "x") is True
        assert files.set("k", "x") is True


# ---------------------------------------------------------------------------
# FakeMetricsRegistry
# ---------------------------------------------------------------------------


class TestFakeMetricsRegistry:
    def test_counter_accumulates(self) -> None:
        metrics = FakeMetricsRegistry()
        counter = metrics.counter("cache_hits_total")
        counter.add()
        counter.add(2)
        assert metrics.counter("cache_hits_total") is counter
        assert counter.call_count == 2
        metrics.assert_counter_total("cache_hits_total", 3)

    def test_histogram_and_gauge(self) -> None:
        metrics = FakeMetricsRegistry()
        metrics.histogram("cache_sweep_duration").record(4.0)
        metrics.gauge("cache_entries").set(9)
        assert metrics.histograms["cache_sweep_duration"].values == [4.0]
        metrics.assert_gauge("cache_entries", 9)

    def test_assert_on_unknown_counter_fails(self) -> None:
        with pytest.raises(AssertionError, match="never created"):
            FakeMetricsRegistry().assert_counter_total("nope", 0)
