"""
chms_cache – file-backed, multi-process cache for aggregate queries.

Import path convention::

    from chms_cache.cache import Cache, CacheSettings, CacheKey
    from chms_cache.testing import InMemoryCache
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
