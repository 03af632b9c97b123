"""Kernel time – Clock port, SystemClock, FrozenClock."""
from clubgate.kernel.time.clock import Clock, FrozenClock, SystemClock, utc_now

__all__ = ["Clock", "FrozenClock", "SystemClock", "utc_now"]
