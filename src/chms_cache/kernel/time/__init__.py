"""Kernel time – Clock port + implementations."""
from chms_cache.kernel.time.clock import Clock, FrozenClock, SystemClock

__all__ = ["Clock", "FrozenClock", "SystemClock"]
