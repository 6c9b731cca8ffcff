"""Observability – structured logging helpers."""
from chms_cache.observability.logging.factory import JsonLoggerFactory
from chms_cache.observability.logging.processors import ProcessIdProcessor, get_logger

__all__ = [
    "JsonLoggerFactory",
    "ProcessIdProcessor",
    "get_logger",
]
