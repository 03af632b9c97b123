"""FastAPI adapter – WebhookListenerService.

Owns the listener lifecycle (``STOPPED -> STARTING -> LISTENING -> STOPPED``)
and the pieces a running listener needs: the event log, the sink dispatcher
and the uvicorn thread.  The event log survives restarts so the operator can
still see what arrived before a stop.
"""
from __future__ import annotations

import dataclasses
import threading
from enum import Enum
from typing import Any

from clubgate.adapters.fastapi.app import create_webhook_app
from clubgate.adapters.fastapi.server import UvicornServerThread
from clubgate.application.webhooks import (
    EventSink,
    EventSinkDispatcher,
    WebhookEvent,
    WebhookEventBuffer,
    WebhookReceiver,
)
from clubgate.config.webhook import WebhookConfig
from clubgate.kernel.time import Clock, SystemClock
from clubgate.observability.logging import AuditLogger, get_logger

logger = get_logger(__name__)


class ListenerState(str, Enum):
    STOPPED = "stopped"
    STARTING = "starting"
    LISTENING = "listening"


class WebhookListenerService:
    """HTTP listener that authenticates deliveries and forwards new events.

    Parameters
    ----------
    sink:
        Receives ``(event_type, subject_id)`` for every accepted, non-duplicate
        event, on the dispatcher thread.
    clock:
        Timestamps for the event log.
    audit:
        Receives rejected deliveries and insecure-mode starts.
    queue_size:
        Bound of the dispatch queue.
    """

    def __init__(
        self,
        sink: EventSink,
        *,
        clock: Clock | None = None,
        audit: AuditLogger | None = None,
        buffer: WebhookEventBuffer | None = None,
        queue_size: int = 1000,
    ) -> None:
        self._sink = sink
        self._clock = clock or SystemClock()
        self._audit = audit or AuditLogger()
        self._buffer = buffer or WebhookEventBuffer()
        self._queue_size = queue_size
        self._lock = threading.RLock()
        self._state = ListenerState.STOPPED
        self._config: WebhookConfig | None = None
        self._server: UvicornServerThread | None = None
        self._dispatcher: EventSinkDispatcher | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> ListenerState:
        return self._state

    @property
    def config(self) -> WebhookConfig | None:
        return self._config

    @property
    def insecure(self) -> bool:
        """``True`` while listening with HMAC verification turned off."""
        return self._state is ListenerState.LISTENING and self._config is not None and not self._config.hmac_enabled

    def start(self, config: WebhookConfig) -> None:
        """Validate *config*, bind and serve.

        Raises :class:`~clubgate.config.validation.ConfigurationError`
        (including ``PortInUseError``); the state is ``STOPPED`` afterwards.
        """
        with self._lock:
            if self._state is not ListenerState.STOPPED:
                raise RuntimeError(f"Listener is already {self._state.value}")
            validated = dataclasses.replace(config)
            self._state = ListenerState.STARTING
            dispatcher = EventSinkDispatcher(self._sink, maxsize=self._queue_size)
            receiver = WebhookReceiver(validated, self._buffer, dispatcher, clock=self._clock, audit=self._audit)
            server = UvicornServerThread(
                create_webhook_app(receiver, self._health),
                validated.host,
                validated.listen_port,
            )
            dispatcher.start()
            try:
                server.start()
            except BaseException:
                dispatcher.stop()
                self._state = ListenerState.STOPPED
                raise

            self._config, self._server, self._dispatcher = validated, server, dispatcher
            self._state = ListenerState.LISTENING

        logger.info(
            "webhook.listener_started",
            host=validated.host,
            port=validated.listen_port,
            path=validated.webhook_path,
            hmac_enabled=validated.hmac_enabled,
            api_key_required=validated.require_api_key,
        )
        if not validated.hmac_enabled:
            logger.warning("webhook.listener_insecure", port=validated.listen_port)
            self._audit.log_security_event(
                "webhook_insecure_mode",
                description="Webhook listener started without HMAC signature verification",
                port=validated.listen_port,
            )

    def stop(self) -> None:
        """Stop serving and drain pending sink deliveries; no-op when stopped."""
        with self._lock:
            if self._state is ListenerState.STOPPED:
                return
            server, dispatcher = self._server, self._dispatcher
            self._server = self._dispatcher = None
            try:
                if server is not None:
                    server.stop()
            finally:
                self._state = ListenerState.STOPPED
                if dispatcher is not None:
                    dispatcher.stop()
        logger.info("webhook.listener_stopped")

    # ------------------------------------------------------------------
    # Event log
    # ------------------------------------------------------------------

    def events(self) -> list[WebhookEvent]:
        """Newest first."""
        return self._buffer.snapshot()

    def clear_events(self) -> None:
        self._buffer.clear()

    def _health(self) -> dict[str, Any]:
        cfg = self._config
        return {
            "status": self._state.value,
            "port": cfg.listen_port if cfg else None,
            "hmac_enabled": bool(cfg and cfg.hmac_enabled),
            "api_key_required": bool(cfg and cfg.require_api_key),
            "insecure": self.insecure,
            "events": len(self._buffer),
        }


__all__ = ["ListenerState", "WebhookListenerService"]
