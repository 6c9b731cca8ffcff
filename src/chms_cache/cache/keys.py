"""Cache – key mapping and logical key builders."""
from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping, Sequence
from typing import Any

ENTRY_PREFIX = "cache_"
TAG_PREFIX = "tag_"


def _utf8(text: str) -> bytes:
    # lone surrogates (e.g. from os.fsdecode) are valid str and must still hash
    return text.encode("utf-8", "surrogatepass")


class KeyMapper:
    """Map cache keys and tag names to storage location names.

    Locations are ``<prefix><sha256 hex>``: fixed length, filesystem safe,
    and collision resistant.  Tags are hashed in a ``tag:`` namespace and
    carry their own prefix so a tag can never share a file with a key.
    """

    @staticmethod
    def entry_location(key: str) -> str:
        return ENTRY_PREFIX + hashlib.sha256(_utf8(key)).hexdigest()

    @staticmethod
    def tag_location(tag: str) -> str:
        return TAG_PREFIX + hashlib.sha256(_utf8(f"tag:{tag}")).hexdigest()


def _typed(value: Any) -> Any:
    """JSON-ready form of *value* that keeps its type.

    ``(1, 2)`` and ``[1, 2]``, or a ``date`` and its ISO string, produce
    different forms.  Mappings are ordered by their canonical keys.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Mapping):
        items = [[_typed(k), _typed(v)] for k, v in value.items()]
        items.sort(key=lambda kv: json.dumps(kv[0], sort_keys=True))
        return {type(value).__qualname__: items}
    if isinstance(value, (set, frozenset)):
        members = sorted((_typed(v) for v in value), key=lambda v: json.dumps(v, sort_keys=True))
        return {type(value).__qualname__: members}
    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return {type(value).__qualname__: [_typed(v) for v in value]}
    return {type(value).__qualname__: repr(value)}


def _digest(material: Any) -> str:
    canonical = json.dumps(material, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(_utf8(canonical)).hexdigest()[:24]


class CacheKey:
    """Builders for readable, deterministic cache keys.

    ``for_resource("member", 42)`` gives ``"member:42"``; ``for_query`` and
    ``for_call`` hash their arguments so any parameter set fits in one key.
    """

    @staticmethod
    def for_resource(resource_type: str, resource_id: str | int) -> str:
        return f"{resource_type}:{resource_id}"

    @staticmethod
    def for_query(query_type: str, **params: Any) -> str:
        """Key for a named query; keyword order does not matter."""
        return f"query:{query_type}:{_digest(_typed(params))}"

    @staticmethod
    def for_call(name: str, args: Sequence[Any] = (), kwargs: Mapping[str, Any] | None = None) -> str:
        """Key for a function call; positional and keyword arguments stay distinct."""
        return f"call:{name}:{_digest([_typed(list(args)), _typed(dict(kwargs or {}))])}"


__all__ = ["ENTRY_PREFIX", "TAG_PREFIX", "CacheKey", "KeyMapper"]
