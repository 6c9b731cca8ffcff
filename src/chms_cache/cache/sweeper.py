"""Cache – Sweeper: maintenance passes over the whole storage directory."""
from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any

from chms_cache.cache.codec import EntryCodec
from chms_cache.cache.keys import ENTRY_PREFIX, TAG_PREFIX
from chms_cache.cache.store import EntryStore
from chms_cache.kernel.time import Clock
from chms_cache.observability.metrics import Metrics, NoopMetrics

logger = logging.getLogger(__name__)

# filesystems stamp mtimes from a coarse clock that can lag time.time()
MTIME_SLACK = 1.0


@dataclass(frozen=True)
class CacheStats:
    """Aggregate counters from one read-only pass.

    Undecodable entries are not part of ``entry_count``/``total_bytes``;
    they are tallied in ``corrupt_count`` instead.
    """

    entry_count: int = 0
    total_bytes: int = 0
    expired_count: int = 0
    corrupt_count: int = 0

    @property
    def total_size_mb(self) -> float:
        return round(self.total_bytes / 1024 / 1024, 2)

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["total_size_mb"] = self.total_size_mb
        return payload


class Sweeper:
    def __init__(
        self,
        store: EntryStore,
        clock: Clock,
        *,
        codec: EntryCodec | None = None,
        metrics: Metrics | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._codec = codec or EntryCodec()
        metrics = metrics or NoopMetrics()
        self._swept = metrics.counter("cache_swept_total", "Entries removed by cleanup")
        self._sweep_duration = metrics.histogram("cache_sweep_duration", "Cleanup pass duration", "ms")
        self._entries = metrics.gauge("cache_entries", "Entries seen by the last stats pass")
        self._bytes = metrics.gauge("cache_bytes", "Bytes seen by the last stats pass", "By")

    def cleanup(self) -> int:
        """Remove expired and corrupt entries; return how many were removed.

        Expiry is judged against the sweep's start time.  An entry written
        during the sweep is live at that instant and therefore kept; an
        undecodable file is only removed if its mtime predates the sweep by
        more than ``MTIME_SLACK`` seconds, so one that appears during the
        sweep survives until the next run.
        """
        started_at = self._clock.timestamp()
        corrupt_cutoff = time.time() - MTIME_SLACK
        t0 = time.monotonic()

        def sweepable(data: bytes, location: str) -> bool:
            entry = self._codec.try_decode(data)
            if entry is None:
                st = self._store.stat(location)
                return st is not None and st.st_mtime < corrupt_cutoff
            return entry.is_expired(started_at)

        removed = 0
        for location in self._store.list_all(ENTRY_PREFIX):
            if self._store.remove_if(location, lambda data, loc=location: sweepable(data, loc)):
                removed += 1

        duration_ms = (time.monotonic() - t0) * 1000
        self._swept.add(removed)
        self._sweep_duration.record(duration_ms)
        logger.info("cache.cleanup_finished removed=%d duration_ms=%.1f", removed, duration_ms)
        return removed

    def flush(self) -> int:
        """Remove every entry and every tag index; return the entry count.

        Tag index files are deleted too (they would only point at missing
        keys) but are not included in the returned count.
        """
        removed = 0
        for location in self._store.list_all(ENTRY_PREFIX):
            if self._store.remove_if(location, lambda _data: True):
                removed += 1
        for location in self._store.list_all(TAG_PREFIX):
            self._store.delete(location)
        logger.info("cache.flushed removed=%d", removed)
        return removed

    def stats(self) -> CacheStats:
        """Count entries, bytes and expired-but-unswept entries; mutates nothing."""
        now = self._clock.timestamp()
        entry_count = total_bytes = expired = corrupt = 0
        for location in self._store.list_all(ENTRY_PREFIX):
            data = self._store.read(location)
            if data is None:
                continue
            entry = self._codec.try_decode(data)
            if entry is None:
                corrupt += 1
                continue
            entry_count += 1
            total_bytes += len(data)
            if entry.is_expired(now):
                expired += 1

        self._entries.set(entry_count)
        self._bytes.set(total_bytes)
        return CacheStats(
            entry_count=entry_count,
            total_bytes=total_bytes,
            expired_count=expired,
            corrupt_count=corrupt,
        )


__all__ = ["CacheStats", "Sweeper"]
