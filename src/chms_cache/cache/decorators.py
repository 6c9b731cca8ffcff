"""Cache – @cached decorator."""
from __future__ import annotations

import functools
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

from chms_cache.cache.facade import Cache
from chms_cache.cache.keys import CacheKey

R = TypeVar("R")

__all__ = ["cached"]


def cached(
    cache: Cache,
    ttl: int | None = None,
    tags: Iterable[str] = (),
    key_fn: Callable[..., str] | None = None,
) -> Callable[[Callable[..., R]], Callable[..., R]]:
    """Decorator: memoize a synchronous function through ``cache.remember``.

    *key_fn* receives the same args/kwargs as the wrapped function; without
    it the key is derived from the function's qualified name and arguments
    (see :meth:`CacheKey.for_call`): argument types count, so ``f((1, 2))``
    and ``f([1, 2])`` are cached separately.  Arguments that are not plain
    data are keyed by ``repr()``, which must therefore be stable.
    Results must be serializable by the cache's value serializer.
    """
    tag_list = [tags] if isinstance(tags, str) else list(tags)

    def decorator(fn: Callable[..., R]) -> Callable[..., R]:
        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> R:
            if key_fn is not None:
                key = key_fn(*args, **kwargs)
            else:
                key = CacheKey.for_call(f"{fn.__module__}.{fn.__qualname__}", args, kwargs)
            return cache.remember(key, lambda: fn(*args, **kwargs), ttl=ttl, tags=tag_list)

        wrapper.cache = cache  # type: ignore[attr-defined]
        return wrapper

    return decorator
