"""Application-layer errors – webhook trust and registration concerns."""

from __future__ import annotations

from typing import Any

from clubgate.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class AuthenticationError(ApplicationError):
    """Webhook signature or API key missing / invalid.

    Expected adversarial input: logged as a rejected event and answered with
    401, never surfaced as an application fault.
    """

    default_code = "unauthorized"


class DuplicateEventError(ApplicationError):
    """An event id was already accepted inside the dedup window.

    Not a failure: the request path acknowledges duplicates with 200.
    """

    default_code = "duplicate_event"

    def __init__(self, event_id: str, **kwargs: Any) -> None:
        super().__init__(f"Event '{event_id}' already received", **kwargs)
        self.event_id = event_id


class RegistrationError(ApplicationError):
    """Handshake with the external school server failed."""

    default_code = "registration_failed"

    def __init__(
        self,
        message: str,
        *,
        target_url: str | None = None,
        status_code: int | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.target_url = target_url
        self.status_code = status_code
        if target_url is not None:
            self.detail.setdefault("target_url", target_url)
        if status_code is not None:
            self.detail.setdefault("status_code", status_code)


__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "DuplicateEventError",
    "RegistrationError",
]
