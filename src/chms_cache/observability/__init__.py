"""Observability – logging and metrics."""

from chms_cache.observability.logging import JsonLoggerFactory, ProcessIdProcessor, get_logger
from chms_cache.observability.metrics import Counter, Gauge, Histogram, Metrics, NoopMetrics

__all__ = [
    "Counter",
    "Gauge",
    "Histogram",
    "JsonLoggerFactory",
    "Metrics",
    "NoopMetrics",
    "ProcessIdProcessor",
    "get_logger",
]
