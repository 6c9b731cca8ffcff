"""Kernel – framework-agnostic building blocks (errors, time)."""

from chms_cache.kernel.errors import (
    ApplicationError,
    BaseError,
    CorruptEntryError,
    InfrastructureError,
    SerializationError,
    StorageError,
)

__all__ = [
    "ApplicationError",
    "BaseError",
    "CorruptEntryError",
    "InfrastructureError",
    "SerializationError",
    "StorageError",
]
