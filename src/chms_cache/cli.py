"""Command-line maintenance for the cache directory.

Meant for cron / scheduled jobs::

    python -m chms_cache cleanup
    python -m chms_cache --storage-dir /var/cache/chms stats
    python -m chms_cache invalidate contributions

Configuration comes from ``CACHE_*`` environment variables; ``--storage-dir``
overrides ``CACHE_STORAGE_DIR``.  Results are printed as JSON.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from typing import Any

from chms_cache.cache import Cache
from chms_cache.config import ConfigError
from chms_cache.observability.logging import JsonLoggerFactory, get_logger

__all__ = ["build_parser", "main"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chms_cache", description="File cache maintenance")
    parser.add_argument("--storage-dir", default=None, help="Cache directory (overrides CACHE_STORAGE_DIR)")
    parser.add_argument("--log-level", default="WARNING", help="Logging level for diagnostics on stderr")
    sub = parser.add_subparsers(dest="command", required=True)
    sub.add_parser("stats", help="Print entry count, size and expired count")
    sub.add_parser("cleanup", help="Remove expired and corrupt entries")
    sub.add_parser("flush", help="Remove every entry and tag index")
    invalidate = sub.add_parser("invalidate", help="Remove every entry carrying a tag")
    invalidate.add_argument("tag")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    JsonLoggerFactory.configure(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

    try:
        cache = Cache.from_env(overrides={"storage_dir": args.storage_dir})
    except ConfigError as exc:
        print(json.dumps({"error": exc.to_dict()}), file=sys.stderr)
        return 2

    result: dict[str, Any]
    if args.command == "stats":
        result = cache.stats().to_dict()
    elif args.command == "cleanup":
        result = {"removed": cache.cleanup()}
    elif args.command == "flush":
        result = {"removed": cache.flush()}
    else:
        result = {"tag": args.tag, "removed": cache.invalidate_tag(args.tag)}

    log = get_logger(__name__, command=args.command, storage_dir=cache.settings.storage_dir)
    log.info("cli.command_finished", **result)
    print(json.dumps(result))
    return 0
