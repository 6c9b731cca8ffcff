"""Cache – file-backed, multi-process key/value cache with TTLs and tags."""
from chms_cache.cache.codec import EntryCodec
from chms_cache.cache.decorators import cached
from chms_cache.cache.entry import NEVER_EXPIRES, CacheEntry
from chms_cache.cache.facade import Cache
from chms_cache.cache.keys import CacheKey, KeyMapper
from chms_cache.cache.serializers import BytesSerializer, JsonValueSerializer, ValueSerializer
from chms_cache.cache.settings import CacheSettings
from chms_cache.cache.store import EntryStore
from chms_cache.cache.sweeper import CacheStats, Sweeper
from chms_cache.cache.tags import TagIndex

__all__ = [
    "NEVER_EXPIRES",
    "BytesSerializer",
    "Cache",
    "CacheEntry",
    "CacheKey",
    "CacheSettings",
    "CacheStats",
    "EntryCodec",
    "EntryStore",
    "JsonValueSerializer",
    "KeyMapper",
    "Sweeper",
    "TagIndex",
    "ValueSerializer",
    "cached",
]
