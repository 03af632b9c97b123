"""Application webhooks – bounded event log with a duplicate window."""
from __future__ import annotations

import collections
import datetime
import threading

from clubgate.application.webhooks.event import WebhookEvent, WebhookEventStatus

__all__ = ["DEFAULT_CAPACITY", "WebhookEventBuffer"]

DEFAULT_CAPACITY = 100


class WebhookEventBuffer:
    """Ring buffer of the most recent deliveries plus the ids of the most
    recently accepted events.

    The duplicate check and the append happen under one lock, so two
    concurrent deliveries of the same id yield exactly one ``RECEIVED`` and
    the log stays in arrival order.  Clearing the log keeps the duplicate
    window, so a cleared display never re-admits a replay.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY, dedup_window: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1 or dedup_window < 1:
            raise ValueError("capacity and dedup_window must be positive")
        self._lock = threading.Lock()
        self._events: collections.deque[WebhookEvent] = collections.deque(maxlen=capacity)
        self._recent_ids: collections.deque[str] = collections.deque()
        self._recent_set: set[str] = set()
        self._window = dedup_window

    @property
    def capacity(self) -> int:
        return self._events.maxlen or 0

    def accept(
        self,
        *,
        event_type: str,
        subject_id: str,
        event_id: str,
        signature_valid: bool,
        received_at: datetime.datetime,
    ) -> WebhookEvent:
        """Record a verified delivery as ``RECEIVED`` or ``DUPLICATE``."""
        with self._lock:
            if event_id in self._recent_set:
                status = WebhookEventStatus.DUPLICATE
            else:
                status = WebhookEventStatus.RECEIVED
                self._remember(event_id)
            event = WebhookEvent(
                received_at=received_at,
                event_type=event_type,
                subject_id=subject_id,
                signature_valid=signature_valid,
                status=status,
                event_id=event_id,
            )
            self._events.append(event)
            return event

    def reject(
        self,
        *,
        received_at: datetime.datetime,
        event_type: str = "unknown",
        subject_id: str = "",
        event_id: str | None = None,
    ) -> WebhookEvent:
        event = WebhookEvent(
            received_at=received_at,
            event_type=event_type,
            subject_id=subject_id,
            signature_valid=False,
            status=WebhookEventStatus.REJECTED,
            event_id=event_id,
        )
        with self._lock:
            self._events.append(event)
        return event

    def withdraw(self, event: WebhookEvent) -> None:
        """Undo an accepted event that could not be handed on, so a resend is
        not mistaken for a duplicate."""
        if event.status is not WebhookEventStatus.RECEIVED:
            return
        with self._lock:
            if event.event_id in self._recent_set:
                self._recent_set.discard(event.event_id)
                self._recent_ids.remove(event.event_id)
            if event in self._events:
                self._events.remove(event)

    def snapshot(self) -> list[WebhookEvent]:
        """Newest first."""
        with self._lock:
            return list(reversed(self._events))

    def clear(self) -> None:
        with self._lock:
            self._events.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)

    def _remember(self, event_id: str) -> None:
        self._recent_ids.append(event_id)
        self._recent_set.add(event_id)
        if len(self._recent_ids) > self._window:
            self._recent_set.discard(self._recent_ids.popleft())
