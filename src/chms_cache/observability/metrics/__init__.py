"""Observability – metrics ports."""
from chms_cache.observability.metrics.ports import Counter, Gauge, Histogram, Metrics
from chms_cache.observability.metrics.noop import NoopMetrics

__all__ = ["Counter", "Gauge", "Histogram", "Metrics", "NoopMetrics"]
