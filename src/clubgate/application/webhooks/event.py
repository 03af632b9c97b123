"""Application webhooks – received event record and inbound payload model."""
from __future__ import annotations

import dataclasses
import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

__all__ = ["WebhookEvent", "WebhookEventStatus", "WebhookPayload"]


class WebhookEventStatus(str, Enum):
    RECEIVED = "received"
    DUPLICATE = "duplicate"
    REJECTED = "rejected"


@dataclasses.dataclass(frozen=True)
class WebhookEvent:
    """One inbound delivery as shown in the operator's event log."""

    received_at: datetime.datetime
    event_type: str
    subject_id: str
    signature_valid: bool
    status: WebhookEventStatus
    event_id: str | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "received_at": self.received_at.isoformat(),
            "event_type": self.event_type,
            "subject_id": self.subject_id,
            "signature_valid": self.signature_valid,
            "status": self.status.value,
            "event_id": self.event_id,
        }


class WebhookPayload(BaseModel):
    """JSON body of an inbound webhook.

    The wire form is camelCase (``eventType``); snake_case names are accepted
    too.  ``eventId`` may be omitted when the sender supplies an
    ``Idempotency-Key`` header instead.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
        frozen=True,
    )

    event_type: str = Field(alias="eventType", min_length=1)
    subject_id: str = Field(alias="subjectId", min_length=1)
    event_id: str | None = Field(default=None, alias="eventId")
