"""Unit tests for the cache entry codec."""
from __future__ import annotations

import json
import struct

import pytest

from chms_cache.cache import NEVER_EXPIRES, CacheEntry, EntryCodec
from chms_cache.cache.codec import FORMAT_VERSION, MAGIC
from chms_cache.kernel.errors import CorruptEntryError, SerializationError


def _entry(**overrides: object) -> CacheEntry:
    fields: dict[str, object] = {
        "value": b'{"total":1250}',
        "expires_at": 1_767_272_400.0,
        "tags": ("contributions", "dashboard"),
        "created_at": 1_767_268_800.0,
    }
    fields.update(overrides)
    return CacheEntry(**fields)  # type: ignore[arg-type]


# ---------------------------------------------------------------------------
# CacheEntry
# ---------------------------------------------------------------------------


class TestCacheEntry:
    def test_create_with_ttl_sets_absolute_expiry(self) -> None:
        entry = CacheEntry.create(b"v", ttl=60, now=1000.0)
        assert entry.expires_at == 1060.0
        assert entry.created_at == 1000.0

    def test_create_with_zero_ttl_never_expires(self) -> None:
        entry = CacheEntry.create(b"v", ttl=0, now=1000.0)
        assert entry.expires_at == NEVER_EXPIRES
        assert entry.never_expires
        assert entry.is_live(10**12)

    def test_create_deduplicates_tags_keeping_order(self) -> None:
        entry = CacheEntry.create(b"v", ttl=1, now=0.0, tags=["a", "b", "a"])
        assert entry.tags == ("a", "b")

    def test_live_strictly_before_expiry(self) -> None:
        entry = CacheEntry.create(b"v", ttl=10, now=100.0)
        assert entry.is_live(109.999)
        assert not entry.is_live(110.0)
        assert entry.is_expired(110.0)


# ---------------------------------------------------------------------------
# Encode / decode
# ---------------------------------------------------------------------------


class TestEntryCodec:
    def test_decode_restores_every_field(self) -> None:
        codec = EntryCodec()
        entry = _entry()
        assert codec.decode(codec.encode(entry)) == entry

    def test_encoded_bytes_start_with_magic_and_version(self) -> None:
        data = EntryCodec().encode(_entry())
        assert data[:3] == MAGIC
        assert data[3] == FORMAT_VERSION

    def test_empty_payload_is_valid(self) -> None:
        codec = EntryCodec()
        entry = _entry(value=b"", tags=())
        assert codec.decode(codec.encode(entry)) == entry

    def test_truncated_payload_rejected(self) -> None:
        data = EntryCodec().encode(_entry())
        with pytest.raises(CorruptEntryError, match="payload"):
            EntryCodec().decode(data[:-3])

    def test_truncated_header_rejected(self) -> None:
        data = EntryCodec().encode(_entry())
        with pytest.raises(CorruptEntryError):
            EntryCodec().decode(data[:12])

    def test_too_short_for_prefix_rejected(self) -> None:
        with pytest.raises(CorruptEntryError, match="prefix"):
            EntryCodec().decode(b"CH")

    def test_wrong_magic_rejected(self) -> None:
        data = EntryCodec().encode(_entry())
        with pytest.raises(CorruptEntryError, match="magic"):
            EntryCodec().decode(b"XYZ" + data[3:])

    def test_unknown_version_rejected(self) -> None:
        data = bytearray(EntryCodec().encode(_entry()))
        data[3] = FORMAT_VERSION + 1
        with pytest.raises(CorruptEntryError, match="version"):
            EntryCodec().decode(bytes(data))

    def test_flipped_payload_byte_fails_checksum(self) -> None:
        data = bytearray(EntryCodec().encode(_entry()))
        data[-1] ^= 0xFF
        with pytest.raises(CorruptEntryError, match="checksum"):
            EntryCodec().decode(bytes(data))

    def test_missing_header_field_rejected(self) -> None:
        header = json.dumps({"created_at": 1.0, "tags": [], "size": 0, "crc32": 0}).encode()
        data = struct.pack(">3sBI", MAGIC, FORMAT_VERSION, len(header)) + header
        with pytest.raises(CorruptEntryError, match="expires_at"):
            EntryCodec().decode(data)

    def test_non_string_tags_rejected(self) -> None:
        header = json.dumps(
            {"expires_at": 0, "created_at": 1.0, "tags": [1], "size": 0, "crc32": 0}
        ).encode()
        data = struct.pack(">3sBI", MAGIC, FORMAT_VERSION, len(header)) + header
        with pytest.raises(CorruptEntryError, match="tags"):
            EntryCodec().decode(data)

    def test_corrupt_entry_error_is_serialization_error(self) -> None:
        with pytest.raises(SerializationError):
            EntryCodec().decode(b"garbage bytes that are not an entry")

    def test_try_decode_returns_none_for_garbage(self) -> None:
        assert EntryCodec().try_decode(b"\x00" * 64) is None

    def test_try_decode_returns_entry_for_valid_bytes(self) -> None:
        codec = EntryCodec()
        assert codec.try_decode(codec.encode(_entry())) == _entry()


# ---------------------------------------------------------------------------
# Hostile headers
# ---------------------------------------------------------------------------


def _with_header(header: bytes, payload: bytes = b"") -> bytes:
    return struct.pack(">3sBI", MAGIC, FORMAT_VERSION, len(header)) + header + payload


class TestEntryCodecHostileHeaders:
    def test_deeply_nested_header_is_corrupt(self) -> None:
        with pytest.raises(CorruptEntryError, match="unreadable header"):
            EntryCodec().decode(_with_header(b"[" * 100_000))

    def test_integer_beyond_float_range_is_corrupt(self) -> None:
        header = b'{"expires_at":1' + b"0" * 400 + b',"created_at":0,"tags":[],"size":0,"crc32":0}'
        with pytest.raises(CorruptEntryError, match="expires_at"):
            EntryCodec().decode(_with_header(header))

    def test_integer_literal_too_long_to_parse_is_corrupt(self) -> None:
        header = b'{"expires_at":' + b"9" * 10_000 + b"}"
        with pytest.raises(CorruptEntryError):
            EntryCodec().decode(_with_header(header))

    def test_non_utf8_header_is_corrupt(self) -> None:
        with pytest.raises(CorruptEntryError):
            EntryCodec().decode(_with_header(b'{"tags":"\xff\xfe"}'))

    def test_try_decode_returns_none_for_hostile_headers(self) -> None:
        codec = EntryCodec()
        assert codec.try_decode(_with_header(b"[" * 100_000)) is None
        assert codec.try_decode(_with_header(b'{"expires_at":1' + b"0" * 400 + b"}")) is None
