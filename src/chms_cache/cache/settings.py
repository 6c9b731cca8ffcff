"""Cache – CacheSettings."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from chms_cache.config.settings import Settings
from chms_cache.config.validation import InvalidSettingValueError

DEFAULT_TTL = 3600
MAX_ENTRY_SIZE = 5 * 1024 * 1024


@dataclasses.dataclass
class CacheSettings(Settings):
    """Explicit cache configuration, read from ``CACHE_*`` variables.

    * ``storage_dir`` – directory shared by every process using the cache.
    * ``default_ttl`` – seconds applied when ``set`` gets ``ttl=None``;
      ``0`` means entries never expire.
    * ``max_entry_size`` – encoded entries larger than this many bytes are
      rejected instead of cached.
    * ``lock_timeout`` – seconds to wait for a per-entry lock before giving up.
    """

    _prefix: ClassVar[str] = "CACHE"

    storage_dir: str = "cache/data"
    default_ttl: int = DEFAULT_TTL
    max_entry_size: int = MAX_ENTRY_SIZE
    lock_timeout: float = 10.0

    def _validate(self) -> None:
        if not str(self.storage_dir).strip():
            raise InvalidSettingValueError("storage_dir", self.storage_dir, "must not be empty")
        if self.default_ttl < 0:
            raise InvalidSettingValueError("default_ttl", self.default_ttl, "must be >= 0")
        if self.max_entry_size <= 0:
            raise InvalidSettingValueError("max_entry_size", self.max_entry_size, "must be > 0")
        if self.lock_timeout <= 0:
            raise InvalidSettingValueError("lock_timeout", self.lock_timeout, "must be > 0")


__all__ = ["DEFAULT_TTL", "MAX_ENTRY_SIZE", "CacheSettings"]
