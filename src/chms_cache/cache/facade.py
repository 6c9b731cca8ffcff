"""Cache – public facade.

Usage::

    cache = Cache(CacheSettings(storage_dir="/var/cache/chms"))
    totals = cache.remember(
        CacheKey.for_query("dashboard.totals", fiscal_year=2025),
        lambda: load_totals(2025),
        ttl=600,
        tags=["contributions"],
    )
    ...
    cache.invalidate_tag("contributions")

Runtime cache conditions (miss, corruption, oversized value, I/O failure)
never raise; they come back as the caller's default or ``False``.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any, TypeVar

from chms_cache.cache.codec import EntryCodec
from chms_cache.cache.entry import CacheEntry
from chms_cache.cache.keys import KeyMapper
from chms_cache.cache.serializers import JsonValueSerializer, ValueSerializer
from chms_cache.cache.settings import CacheSettings
from chms_cache.cache.store import EntryStore
from chms_cache.cache.sweeper import CacheStats, Sweeper
from chms_cache.cache.tags import TagIndex
from chms_cache.config.settings import EnvSettingsLoader, SettingsFactory
from chms_cache.kernel.errors import SerializationError
from chms_cache.kernel.time import Clock, SystemClock
from chms_cache.observability.metrics import Metrics, NoopMetrics

logger = logging.getLogger(__name__)

T = TypeVar("T")

_MISSING: Any = object()


class Cache:
    """File-backed cache shared by every process that points at the same directory."""

    def __init__(
        self,
        settings: CacheSettings | None = None,
        *,
        clock: Clock | None = None,
        serializer: ValueSerializer | None = None,
        metrics: Metrics | None = None,
    ) -> None:
        self._settings = settings or CacheSettings()
        self._clock: Clock = clock or SystemClock()
        self._serializer = serializer or JsonValueSerializer()
        self._codec = EntryCodec()
        self._mapper = KeyMapper()
        self._store = EntryStore(self._settings.storage_dir, lock_timeout=self._settings.lock_timeout)
        self._tags = TagIndex(self._store, self._clock, codec=self._codec, mapper=self._mapper)

        metrics = metrics or NoopMetrics()
        self._sweeper = Sweeper(self._store, self._clock, codec=self._codec, metrics=metrics)
        self._hits = metrics.counter("cache_hits_total", "Lookups answered from the cache")
        self._misses = metrics.counter("cache_misses_total", "Lookups that found nothing live")
        self._writes = metrics.counter("cache_writes_total", "Entries written")
        self._write_failures = metrics.counter("cache_write_failures_total", "Rejected or failed writes")
        self._invalidations = metrics.counter("cache_invalidations_total", "Entries removed by tag invalidation")

    @classmethod
    def from_env(
        cls,
        *,
        environ: Mapping[str, str] | None = None,
        overrides: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> Cache:
        """Build a cache from ``CACHE_*`` environment variables plus *overrides*."""
        settings = SettingsFactory.create(CacheSettings, [EnvSettingsLoader(environ)], overrides)
        return cls(settings, **kwargs)

    @property
    def settings(self) -> CacheSettings:
        return self._settings

    @property
    def store(self) -> EntryStore:
        return self._store

    @property
    def tags(self) -> TagIndex:
        return self._tags

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for *key*, else *default*."""
        value = self._lookup(key)
        return default if value is _MISSING else value

    def has(self, key: str) -> bool:
        return self._lookup(key) is not _MISSING

    def _lookup(self, key: str) -> Any:
        location = self._mapper.entry_location(key)
        data = self._store.read(location)
        if data is None:
            self._misses.add()
            return _MISSING

        now = self._clock.timestamp()
        entry = self._codec.try_decode(data)
        if entry is None:
            logger.warning("cache.corrupt_entry key=%s", key)
            self._evict(location, data)
            self._misses.add()
            return _MISSING
        if entry.is_expired(now):
            self._evict(location, data)
            self._misses.add()
            return _MISSING
        try:
            value = self._serializer.deserialize(entry.value)
        except SerializationError as exc:
            logger.warning("cache.undecodable_payload key=%s exc=%r", key, exc)
            self._evict(location, data)
            self._misses.add()
            return _MISSING

        self._hits.add()
        return value

    def _evict(self, location: str, seen: bytes) -> None:
        # only if nobody has rewritten the file since it was read
        self._store.remove_if(location, lambda current: current == seen)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
        tags: Iterable[str] = (),
    ) -> bool:
        """Store *value* under *key*.

        ``ttl=None`` applies the configured default, ``ttl=0`` never expires.
        Returns ``False`` (and logs) when the value cannot be cached; a
        previously stored value is left untouched in that case.
        """
        ttl = self._settings.default_ttl if ttl is None else ttl
        if ttl < 0:
            logger.warning("cache.invalid_ttl key=%s ttl=%s", key, ttl)
            self._write_failures.add()
            return False
        if isinstance(tags, str):
            tags = (tags,)

        try:
            payload = self._serializer.serialize(value)
        except SerializationError as exc:
            logger.warning("cache.unserializable_value key=%s exc=%r", key, exc)
            self._write_failures.add()
            return False

        entry = CacheEntry.create(payload, ttl=ttl, now=self._clock.timestamp(), tags=[str(t) for t in tags])
        location = self._mapper.entry_location(key)
        if not self._store.write(location, self._codec.encode(entry), self._settings.max_entry_size):
            self._write_failures.add()
            return False
        self._writes.add()

        for tag in entry.tags:
            if not self._tags.append(tag, key):
                # entry stays live but is no longer reachable through this tag
                logger.warning("cache.entry_untagged key=%s tag=%s", key, tag)
        return True

    def remember(
        self,
        key: str,
        compute: Callable[[], T],
        ttl: int | None = None,
        tags: Iterable[str] = (),
    ) -> T:
        """Return the cached value for *key*, computing and storing it on a miss.

        *compute* runs at most once per call.  There is no single-flight:
        other processes missing on the same key compute independently and
        the last write wins.  A cached ``None`` counts as a hit.
        """
        value = self._lookup(key)
        if value is not _MISSING:
            return value
        value = compute()
        self.set(key, value, ttl, tags)
        return value

    def delete(self, key: str) -> bool:
        """Remove *key*; deleting an absent key succeeds.  Tag indexes are left alone."""
        return self._store.delete(self._mapper.entry_location(key))

    def invalidate_tag(self, tag: str) -> int:
        removed = self._tags.invalidate(tag)
        self._invalidations.add(removed)
        return removed

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    def flush(self) -> int:
        return self._sweeper.flush()

    def cleanup(self) -> int:
        return self._sweeper.cleanup()

    def stats(self) -> CacheStats:
        return self._sweeper.stats()


__all__ = ["Cache"]
