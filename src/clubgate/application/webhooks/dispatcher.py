"""Application webhooks – hands accepted events to the event sink off the
request path.

The listener thread only enqueues; one worker thread drains the queue and
calls the sink, so a slow sink never delays a webhook response.
"""
from __future__ import annotations

import queue
import threading
from typing import Protocol, runtime_checkable

from clubgate.application.webhooks.event import WebhookEvent
from clubgate.observability.logging import get_logger

__all__ = ["EventSink", "EventSinkDispatcher"]

logger = get_logger(__name__)

_STOP = object()


@runtime_checkable
class EventSink(Protocol):
    """Port: receives each accepted, non-duplicate event exactly once."""

    def on_validated_event(self, event_type: str, subject_id: str) -> None: ...


class EventSinkDispatcher:
    """Bounded queue plus a single worker thread feeding an :class:`EventSink`.

    Parameters
    ----------
    sink:
        The application hook.  Exceptions it raises are logged and the worker
        carries on with the next event.
    maxsize:
        Queue bound.  A full queue drops the event with a warning.
    """

    def __init__(self, sink: EventSink, maxsize: int = 1000) -> None:
        self._sink = sink
        self._queue: queue.Queue[object] = queue.Queue(maxsize=maxsize)
        self._thread: threading.Thread | None = None
        self._abort = threading.Event()
        self._lock = threading.Lock()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        with self._lock:
            if self.running:
                return
            self._abort = threading.Event()
            self._thread = threading.Thread(
                target=self._drain, args=(self._abort,), name="clubgate-event-sink", daemon=True
            )
            self._thread.start()

    def submit(self, event: WebhookEvent) -> bool:
        """Enqueue *event* without blocking; ``False`` when it was dropped."""
        try:
            self._queue.put_nowait(event)
        except queue.Full:
            logger.warning(
                "webhook.dispatch_dropped",
                event_id=event.event_id,
                event_type=event.event_type,
                queue_size=self._queue.maxsize,
            )
            return False
        return True

    def stop(self, timeout: float = 5.0) -> None:
        """Deliver everything already queued, then stop the worker.

        Never blocks longer than roughly *timeout*.  When the queue is full
        the backlog is abandoned: the worker exits after the event it is
        currently delivering.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._thread = None
            try:
                self._queue.put_nowait(_STOP)
            except queue.Full:
                self._abort.set()
                logger.warning("webhook.dispatcher_backlog_abandoned", pending=self._queue.qsize())
            thread.join(timeout)
            if thread.is_alive():
                logger.warning("webhook.dispatcher_stop_timeout", timeout=timeout)

    def _drain(self, abort: threading.Event) -> None:
        while not abort.is_set():
            item = self._queue.get()
            try:
                if item is _STOP:
                    return
                self._deliver(item)  # type: ignore[arg-type]
            finally:
                self._queue.task_done()

    def _deliver(self, event: WebhookEvent) -> None:
        try:
            self._sink.on_validated_event(event.event_type, event.subject_id)
        except Exception:  # noqa: BLE001
            logger.exception("webhook.sink_failed", event_id=event.event_id, event_type=event.event_type)
