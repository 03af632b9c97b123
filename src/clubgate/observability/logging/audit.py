"""Observability – AuditLogger.

A dedicated structured-log sink for security-sensitive actions: tenant
isolation bypasses, password-reset tokens, rejected webhook deliveries and
refused mutations.
"""
from __future__ import annotations

import datetime
from enum import Enum
from typing import Any

import structlog


class AuditOutcome(str, Enum):
    """Standardised audit outcomes."""

    SUCCESS = "success"
    FAILURE = "failure"
    DENIED = "denied"
    ERROR = "error"


class AuditLogger:
    """Dedicated structured-log sink for security-sensitive actions.

    All audit entries are emitted at ``WARNING`` level so they pass through
    even restrictive log-level filters.

    Parameters
    ----------
    service:
        Logical service name injected into every audit entry.
    logger:
        Underlying structlog logger.  Defaults to ``structlog.get_logger("audit")``.
    """

    def __init__(
        self,
        service: str = "clubgate",
        logger: Any = None,
    ) -> None:
        self._service = service
        self._log = logger if logger is not None else structlog.get_logger("audit")

    def log_access(
        self,
        principal: Any,
        resource: str,
        action: str,
        outcome: AuditOutcome | str = AuditOutcome.SUCCESS,
        **extra: Any,
    ) -> None:
        """Record a security access event.

        Parameters
        ----------
        principal:
            The user or service performing the action.  Uses
            ``principal.user_id`` if available, otherwise ``str(principal)``.
        resource:
            The resource being accessed (e.g. ``"club:<uuid>"``).
        action:
            The action performed (e.g. ``"create"``, ``"bypass"``).
        outcome:
            :class:`AuditOutcome` or plain string.
        **extra:
            Additional structured fields to include in the audit entry.
        """
        entry: dict[str, Any] = {
            "service": self._service,
            "principal_id": _principal_id(principal),
            "resource": resource,
            "action": action,
            "outcome": outcome.value if isinstance(outcome, AuditOutcome) else str(outcome),
            "timestamp": _now(),
            **extra,
        }
        self._log.warning("audit.access", **entry)

    def log_security_event(
        self,
        event_type: str,
        principal: Any = None,
        description: str = "",
        **extra: Any,
    ) -> None:
        """Record a generic security event (``"tenant_bypass"``, ``"password_reset"`` …)."""
        entry: dict[str, Any] = {
            "service": self._service,
            "event_type": event_type,
            "description": description,
            "timestamp": _now(),
            **extra,
        }
        if principal is not None:
            entry["principal_id"] = _principal_id(principal)
        self._log.warning(f"audit.{event_type}", **entry)


def _principal_id(principal: Any) -> str:
    value = getattr(principal, "user_id", None) or getattr(principal, "id", None) or principal
    return str(value)


def _now() -> str:
    return datetime.datetime.now(datetime.UTC).isoformat()


__all__ = ["AuditLogger", "AuditOutcome"]
