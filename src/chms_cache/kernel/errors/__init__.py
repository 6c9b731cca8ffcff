"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── ApplicationError     (application.py)
    │   └── ConfigError      (chms_cache.config.validation)
    └── InfrastructureError  (infrastructure.py)
        ├── StorageError
        └── SerializationError
            └── CorruptEntryError
"""

from chms_cache.kernel.errors.application import ApplicationError
from chms_cache.kernel.errors.base import BaseError
from chms_cache.kernel.errors.infrastructure import (
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
