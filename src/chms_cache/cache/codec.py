"""Cache – binary entry codec.

Layout::

    b"CHC" | version (1 byte) | header length (4 bytes, big-endian) | header | payload

The header is a JSON object carrying ``expires_at``, ``created_at``, ``tags``,
``size`` and ``crc32`` of the payload, so a truncated or half-overwritten file
is detected instead of being decoded into a partial entry.
"""
from __future__ import annotations

import json
import struct
import zlib
from typing import Any

from chms_cache.cache.entry import CacheEntry
from chms_cache.kernel.errors import CorruptEntryError

MAGIC = b"CHC"
FORMAT_VERSION = 1

_PREFIX = struct.Struct(">3sBI")


class EntryCodec:
    """Encode/decode :class:`CacheEntry` objects to and from bytes."""

    def encode(self, entry: CacheEntry) -> bytes:
        header = json.dumps(
            {
                "expires_at": entry.expires_at,
                "created_at": entry.created_at,
                "tags": list(entry.tags),
                "size": len(entry.value),
                "crc32": zlib.crc32(entry.value),
            },
            separators=(",", ":"),
        ).encode()
        return _PREFIX.pack(MAGIC, FORMAT_VERSION, len(header)) + header + entry.value

    def decode(self, data: bytes) -> CacheEntry:
        """Decode *data*; raise :class:`CorruptEntryError` on any defect."""
        if len(data) < _PREFIX.size:
            raise CorruptEntryError("truncated prefix")
        magic, version, header_len = _PREFIX.unpack_from(data)
        if magic != MAGIC:
            raise CorruptEntryError("bad magic")
        if version != FORMAT_VERSION:
            raise CorruptEntryError(f"unsupported format version {version}")

        header_end = _PREFIX.size + header_len
        if len(data) < header_end:
            raise CorruptEntryError("truncated header")
        try:
            header: Any = json.loads(data[_PREFIX.size:header_end])
        except (ValueError, RecursionError) as exc:
            # ValueError covers bad UTF-8, bad JSON and over-long integer literals
            raise CorruptEntryError("unreadable header", cause=exc) from exc
        if not isinstance(header, dict):
            raise CorruptEntryError("header is not an object")

        expires_at = _number(header, "expires_at")
        created_at = _number(header, "created_at")
        size = header.get("size")
        checksum = header.get("crc32")
        tags = header.get("tags")
        if not isinstance(size, int) or not isinstance(checksum, int):
            raise CorruptEntryError("missing size or checksum")
        if not isinstance(tags, list) or not all(isinstance(t, str) for t in tags):
            raise CorruptEntryError("malformed tags")

        payload = data[header_end:]
        if len(payload) != size:
            raise CorruptEntryError(f"payload is {len(payload)} bytes, expected {size}")
        if zlib.crc32(payload) != checksum:
            raise CorruptEntryError("checksum mismatch")

        return CacheEntry(value=payload, expires_at=expires_at, tags=tuple(tags), created_at=created_at)

    def try_decode(self, data: bytes) -> CacheEntry | None:
        """Like :meth:`decode` but returns ``None`` for corrupt data."""
        try:
            return self.decode(data)
        except CorruptEntryError:
            return None


def _number(header: dict[str, Any], name: str) -> float:
    value = header.get(name)
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptEntryError(f"missing or invalid '{name}'")
    try:
        return float(value)
    except OverflowError as exc:
        raise CorruptEntryError(f"out-of-range '{name}'", cause=exc) from exc


__all__ = ["FORMAT_VERSION", "MAGIC", "EntryCodec"]
