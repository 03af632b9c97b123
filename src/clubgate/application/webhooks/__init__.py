"""Application webhooks – verification, event log, dispatch and registration."""
from clubgate.application.webhooks.buffer import DEFAULT_CAPACITY, WebhookEventBuffer
from clubgate.application.webhooks.dispatcher import EventSink, EventSinkDispatcher
from clubgate.application.webhooks.event import WebhookEvent, WebhookEventStatus, WebhookPayload
from clubgate.application.webhooks.receiver import (
    API_KEY_HEADER,
    IDEMPOTENCY_HEADER,
    SIGNATURE_HEADER,
    SIGNATURE_HEADER_ALIAS,
    WebhookReceiver,
    WebhookResponse,
)
from clubgate.application.webhooks.registration import (
    Registered,
    RegistrationClient,
    generate_api_key,
    generate_hmac_secret,
)
from clubgate.application.webhooks.retry import DEFAULT_MAX_RETRY_ATTEMPTS, RETRY_ID_HEADER, RetryTracker
from clubgate.application.webhooks.signature import WebhookSigner, sign, verify

__all__ = [
    "API_KEY_HEADER",
    "DEFAULT_CAPACITY",
    "DEFAULT_MAX_RETRY_ATTEMPTS",
    "EventSink",
    "EventSinkDispatcher",
    "IDEMPOTENCY_HEADER",
    "RETRY_ID_HEADER",
    "Registered",
    "RegistrationClient",
    "RetryTracker",
    "SIGNATURE_HEADER",
    "SIGNATURE_HEADER_ALIAS",
    "WebhookEvent",
    "WebhookEventBuffer",
    "WebhookEventStatus",
    "WebhookPayload",
    "WebhookReceiver",
    "WebhookResponse",
    "WebhookSigner",
    "generate_api_key",
    "generate_hmac_secret",
    "sign",
    "verify",
]
