"""Cache – value serializers.

Entries store bytes.  A serializer turns caller values into those bytes and
back; nothing here unpickles arbitrary objects.
"""
from __future__ import annotations

import abc
import json
from typing import Any

from chms_cache.kernel.errors import SerializationError


class ValueSerializer(abc.ABC):
    """Port: serialize / deserialize cached values."""

    @abc.abstractmethod
    def serialize(self, value: Any) -> bytes: ...

    @abc.abstractmethod
    def deserialize(self, data: bytes) -> Any: ...


class JsonValueSerializer(ValueSerializer):
    """JSON serializer for plain data (dicts, lists, str, numbers, bools, None)."""

    def serialize(self, value: Any) -> bytes:
        try:
            return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode()
        except (TypeError, ValueError, RecursionError) as exc:
            raise SerializationError(
                f"Value of type {type(value).__name__} is not JSON serializable",
                payload_type=type(value).__name__,
                cause=exc,
            ) from exc

    def deserialize(self, data: bytes) -> Any:
        try:
            return json.loads(data)
        except (ValueError, RecursionError) as exc:
            raise SerializationError("Cached payload is not valid JSON", payload_type="json", cause=exc) from exc


class BytesSerializer(ValueSerializer):
    """Pass-through for callers that encode their own values."""

    def serialize(self, value: Any) -> bytes:
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        raise SerializationError(
            f"BytesSerializer expects bytes, got {type(value).__name__}",
            payload_type=type(value).__name__,
        )

    def deserialize(self, data: bytes) -> bytes:
        return data


__all__ = ["BytesSerializer", "JsonValueSerializer", "ValueSerializer"]
