"""Cache – CacheEntry value object."""
from __future__ import annotations

from dataclasses import dataclass

NEVER_EXPIRES = 0.0


@dataclass(frozen=True)
class CacheEntry:
    """A stored payload plus its expiry metadata.

    ``value`` holds bytes already produced by a value serializer; timestamps
    are UNIX seconds.  ``expires_at == NEVER_EXPIRES`` marks an entry that
    only goes away when deleted.
    """

    value: bytes
    expires_at: float
    tags: tuple[str, ...] = ()
    created_at: float = 0.0

    @classmethod
    def create(
        cls,
        value: bytes,
        *,
        ttl: int | float,
        now: float,
        tags: tuple[str, ...] | list[str] = (),
    ) -> CacheEntry:
        expires_at = now + ttl if ttl > 0 else NEVER_EXPIRES
        return cls(value=value, expires_at=expires_at, tags=tuple(dict.fromkeys(tags)), created_at=now)

    @property
    def never_expires(self) -> bool:
        return self.expires_at == NEVER_EXPIRES

    def is_live(self, now: float) -> bool:
        """Live iff it never expires or its expiry is strictly after *now*."""
        return self.never_expires or self.expires_at > now

    def is_expired(self, now: float) -> bool:
        return not self.is_live(now)


__all__ = ["NEVER_EXPIRES", "CacheEntry"]
