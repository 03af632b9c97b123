"""Testing fakes – in-memory doubles for kernel and application ports."""
from clubgate.testing.fakes.clock import FakeClock
from clubgate.testing.fakes.sink import RecordingEventSink
from clubgate.testing.fakes.store import InMemoryConnection, InMemoryConnectionStore
from clubgate.kernel.time import FrozenClock

__all__ = [
    "FakeClock",
    "FrozenClock",
    "InMemoryConnection",
    "InMemoryConnectionStore",
    "RecordingEventSink",
]
