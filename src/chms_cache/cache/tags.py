"""Cache – TagIndex: reverse index from tag name to tagged keys.

Each tag has one JSON file (``{"tag": ..., "keys": [...]}``) stored next to
the entries.  The index is a best-effort superset: it may still list keys
whose entries expired or were deleted, but a tagging write that returned
``True`` is always listed.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from filelock import Timeout

from chms_cache.cache.codec import EntryCodec
from chms_cache.cache.keys import KeyMapper
from chms_cache.cache.store import EntryStore
from chms_cache.kernel.time import Clock

logger = logging.getLogger(__name__)


class TagIndex:
    def __init__(
        self,
        store: EntryStore,
        clock: Clock,
        *,
        codec: EntryCodec | None = None,
        mapper: KeyMapper | None = None,
    ) -> None:
        self._store = store
        self._clock = clock
        self._codec = codec or EntryCodec()
        self._mapper = mapper or KeyMapper()

    def append(self, tag: str, key: str) -> bool:
        """Add *key* under *tag*; a repeated pair does not grow the index."""
        location = self._mapper.tag_location(tag)
        try:
            with self._store.lock(location) as path:
                keys = self._parse(tag, self._store.read(location))
                if key in keys:
                    return True
                keys.append(key)
                self._store.replace_locked(path, self._dump(tag, keys))
            return True
        except (OSError, Timeout) as exc:
            logger.warning("cache.tag_append_failed tag=%s key=%s exc=%r", tag, key, exc)
            return False

    def members(self, tag: str) -> list[str]:
        """Keys currently indexed under *tag* (read-only, unlocked)."""
        return self._parse(tag, self._store.read(self._mapper.tag_location(tag)))

    def invalidate(self, tag: str) -> int:
        """Delete every entry indexed under *tag*, then the index itself.

        Returns how many *live* entries were removed; expired, corrupt or
        already-missing entries are removed silently and not counted.  The
        tag's lock is held throughout so concurrent appends wait, but the
        per-key deletions are not atomic as a group.
        """
        location = self._mapper.tag_location(tag)
        now = self._clock.timestamp()
        removed = 0
        try:
            with self._store.lock(location) as path:
                keys = self._parse(tag, self._store.read(location))
                for key in keys:
                    data = self._store.pop(self._mapper.entry_location(key))
                    if data is None:
                        continue
                    entry = self._codec.try_decode(data)
                    if entry is not None and entry.is_live(now):
                        removed += 1
                path.unlink(missing_ok=True)
        except (OSError, Timeout) as exc:
            logger.error("cache.tag_invalidate_failed tag=%s removed=%d exc=%r", tag, removed, exc)
            return removed
        logger.info("cache.tag_invalidated tag=%s removed=%d", tag, removed)
        return removed

    @staticmethod
    def _parse(tag: str, data: bytes | None) -> list[str]:
        if data is None:
            return []
        try:
            doc: Any = json.loads(data)
        except (ValueError, RecursionError):
            logger.warning("cache.tag_index_corrupt tag=%s", tag)
            return []
        keys = doc.get("keys") if isinstance(doc, dict) else None
        if not isinstance(keys, list):
            logger.warning("cache.tag_index_corrupt tag=%s", tag)
            return []
        return list(dict.fromkeys(k for k in keys if isinstance(k, str)))

    @staticmethod
    def _dump(tag: str, keys: list[str]) -> bytes:
        # ASCII escapes keep lone surrogates encodable
        return json.dumps({"tag": tag, "keys": keys}).encode()


__all__ = ["TagIndex"]
