"""Infrastructure errors – storage I/O and payload encoding failures.

The cache facade converts every one of these into a soft failure (``False``
or a miss); they only surface when the lower layers are used directly.
"""

from __future__ import annotations

from typing import Any

from chms_cache.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a caller mistake."""

    default_code = "infrastructure_error"


class StorageError(InfrastructureError):
    """Reading, writing or locking a storage location failed."""

    default_code = "storage_error"

    def __init__(
        self,
        location: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Storage operation failed for '{location}'", **kwargs)
        self.location = location


class SerializationError(InfrastructureError):
    """Failed to serialize or deserialize a payload."""

    default_code = "serialization_error"

    def __init__(
        self,
        message: str,
        *,
        payload_type: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.payload_type = payload_type


class CorruptEntryError(SerializationError):
    """Stored bytes are not a complete, well-formed cache entry."""

    default_code = "corrupt_entry"

    def __init__(self, reason: str, **kwargs: Any) -> None:
        super().__init__(f"Corrupt cache entry: {reason}", payload_type="cache_entry", **kwargs)
        self.reason = reason


__all__ = [
    "CorruptEntryError",
    "InfrastructureError",
    "SerializationError",
    "StorageError",
]
