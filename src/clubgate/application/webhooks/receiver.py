"""Application webhooks – inbound request pipeline.

Order of checks: API key, signature, content type, retry budget, body,
event-type allow-list, duplicate window, hand-off to the sink queue.
Authentication failures are recorded as ``REJECTED`` in the event log and
audited; they never reach the event sink.
"""
from __future__ import annotations

import dataclasses
import hmac
from typing import Any, Mapping

import pydantic

from clubgate.application.webhooks.buffer import WebhookEventBuffer
from clubgate.application.webhooks.dispatcher import EventSinkDispatcher
from clubgate.application.webhooks.event import WebhookEventStatus, WebhookPayload
from clubgate.application.webhooks.retry import RETRY_ID_HEADER, RetryTracker
from clubgate.application.webhooks.signature import verify
from clubgate.config.webhook import HEALTH_PATH, METRICS_PATH, WebhookConfig
from clubgate.kernel.errors import AuthenticationError
from clubgate.kernel.time import Clock, SystemClock
from clubgate.observability.logging import AuditLogger, AuditOutcome, get_logger

__all__ = [
    "API_KEY_HEADER",
    "IDEMPOTENCY_HEADER",
    "SIGNATURE_HEADER",
    "SIGNATURE_HEADER_ALIAS",
    "WebhookReceiver",
    "WebhookResponse",
]

logger = get_logger(__name__)

SIGNATURE_HEADER = "X-Signature"
SIGNATURE_HEADER_ALIAS = "X-Hub-Signature-256"
API_KEY_HEADER = "X-API-Key"
IDEMPOTENCY_HEADER = "Idempotency-Key"
JSON_MEDIA_TYPE = "application/json"


@dataclasses.dataclass(frozen=True)
class WebhookResponse:
    status_code: int
    body: dict[str, Any]

    @classmethod
    def ok(cls, status: str = "ok") -> "WebhookResponse":
        return cls(200, {"status": status})

    @classmethod
    def error(cls, status_code: int, message: str, code: str) -> "WebhookResponse":
        return cls(status_code, {"error": message, "code": code})


class WebhookReceiver:
    """Turns one raw delivery into a :class:`WebhookResponse`.

    Framework agnostic: the HTTP adapter passes the exact body bytes and the
    request headers and writes back whatever this returns.
    """

    def __init__(
        self,
        config: WebhookConfig,
        buffer: WebhookEventBuffer,
        dispatcher: EventSinkDispatcher,
        *,
        retries: RetryTracker | None = None,
        clock: Clock | None = None,
        audit: AuditLogger | None = None,
    ) -> None:
        self._config = config
        self._buffer = buffer
        self._dispatcher = dispatcher
        self._retries = retries or RetryTracker()
        self._clock = clock or SystemClock()
        self._audit = audit or AuditLogger()

    @property
    def config(self) -> WebhookConfig:
        return self._config

    @property
    def retry_path(self) -> str:
        return self._config.webhook_path.rstrip("/") + "/retry"

    def handle(self, body: bytes, headers: Mapping[str, str], client: str | None = None) -> WebhookResponse:
        return self._process(body, headers, client, retry=False)

    def handle_retry(self, body: bytes, headers: Mapping[str, str], client: str | None = None) -> WebhookResponse:
        """Like :meth:`handle`, but each ``X-Retry-ID`` gets a bounded number of attempts."""
        return self._process(body, headers, client, retry=True)

    def metrics(self) -> dict[str, Any]:
        return {
            "endpoints": [self._config.webhook_path, HEALTH_PATH, METRICS_PATH, self.retry_path],
            "authentication_required": self._config.require_api_key,
            "hmac_validation_enabled": self._config.hmac_enabled,
            "retry_counts": len(self._retries),
        }

    def _process(
        self, body: bytes, headers: Mapping[str, str], client: str | None, *, retry: bool
    ) -> WebhookResponse:
        h = {k.lower(): v for k, v in headers.items()}

        try:
            self._authenticate(body, h)
        except AuthenticationError as exc:
            return self._reject(exc, body, h, client)

        if JSON_MEDIA_TYPE not in h.get("content-type", "").lower():
            logger.info("webhook.invalid_content_type", content_type=h.get("content-type"), client=client)
            return WebhookResponse.error(400, "Content-Type must be application/json", "invalid_content_type")

        if retry:
            retry_id = h.get(RETRY_ID_HEADER.lower(), "").strip()
            if retry_id and not self._retries.attempt(retry_id):
                logger.warning("webhook.retry_limit_exceeded", retry_id=retry_id, client=client)
                return WebhookResponse(410, {"status": "error", "message": "Max retries exceeded"})

        if not body.strip():
            return WebhookResponse.error(400, "Empty payload", "empty_payload")
        try:
            payload = WebhookPayload.model_validate_json(body)
        except pydantic.ValidationError as exc:
            return self._bad_payload(exc, client)

        if not self._config.accepts_event_type(payload.event_type):
            logger.info("webhook.unsupported_event_type", event_type=payload.event_type, client=client)
            return WebhookResponse.error(400, f"Unsupported event type '{payload.event_type}'", "unsupported_event_type")

        event_id = payload.event_id or h.get(IDEMPOTENCY_HEADER.lower(), "").strip()
        if not event_id:
            return WebhookResponse.error(400, "eventId or Idempotency-Key is required", "missing_event_id")

        event = self._buffer.accept(
            event_type=payload.event_type,
            subject_id=payload.subject_id,
            event_id=event_id,
            signature_valid=self._config.hmac_enabled,
            received_at=self._clock.now(),
        )
        if event.status is WebhookEventStatus.DUPLICATE:
            logger.info("webhook.duplicate", event_id=event_id, event_type=event.event_type)
            return WebhookResponse.ok("duplicate")

        if not self._dispatcher.submit(event):
            self._buffer.withdraw(event)
            return WebhookResponse.error(503, "Event queue is full", "queue_full")
        logger.info("webhook.received", event_id=event_id, event_type=event.event_type, subject_id=event.subject_id)
        return WebhookResponse.ok()

    def _reject(
        self, exc: AuthenticationError, body: bytes, headers: Mapping[str, str], client: str | None
    ) -> WebhookResponse:
        described = _describe_unverified(body, headers)
        self._buffer.reject(received_at=self._clock.now(), **described)
        self._audit.log_security_event(
            "webhook_rejected",
            description=exc.message,
            outcome=AuditOutcome.DENIED.value,
            reason=exc.code,
            client=client,
            claimed_event_type=described.get("event_type", "unknown"),
        )
        return WebhookResponse.error(401, exc.message, exc.code)

    def _authenticate(self, body: bytes, headers: Mapping[str, str]) -> None:
        """Raise :class:`AuthenticationError` for a request that must be refused."""
        cfg = self._config
        if cfg.require_api_key:
            provided = headers.get(API_KEY_HEADER.lower(), "").strip()
            if not provided:
                raise AuthenticationError("API key required", code="missing_api_key")
            if not _constant_time_equals(provided, cfg.api_key):
                raise AuthenticationError("Invalid API key", code="invalid_api_key")

        if not cfg.hmac_enabled:
            return
        signature = (
            headers.get(SIGNATURE_HEADER.lower())
            or headers.get(SIGNATURE_HEADER_ALIAS.lower())
            or ""
        ).strip()
        if not signature:
            raise AuthenticationError("HMAC signature required", code="missing_signature")
        if not verify(cfg.hmac_secret, body, signature):
            raise AuthenticationError("Invalid signature", code="invalid_signature")

    def _bad_payload(self, exc: pydantic.ValidationError, client: str | None) -> WebhookResponse:
        json_invalid = any(err.get("type") == "json_invalid" for err in exc.errors())
        logger.info("webhook.bad_payload", client=client, errors=exc.error_count(), json_invalid=json_invalid)
        if json_invalid:
            return WebhookResponse.error(400, "Invalid JSON format", "invalid_json")
        return WebhookResponse.error(400, "Invalid payload format", "invalid_payload")


def _constant_time_equals(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


def _describe_unverified(body: bytes, headers: Mapping[str, str]) -> dict[str, Any]:
    """What an unauthenticated delivery claims to be, for the event log only."""
    described: dict[str, Any] = {"event_id": headers.get(IDEMPOTENCY_HEADER.lower(), "").strip() or None}
    try:
        payload = WebhookPayload.model_validate_json(body)
    except pydantic.ValidationError:
        return described
    described.update(event_type=payload.event_type, subject_id=payload.subject_id)
    if payload.event_id:
        described["event_id"] = payload.event_id
    return described
