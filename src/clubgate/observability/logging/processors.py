"""Observability – get_logger helper and tenant binding.

Tenant and user ids are bound through :mod:`structlog.contextvars`, so every
log line emitted while a tenant scope is open carries them without callers
passing them explicitly.
"""
from __future__ import annotations

from typing import Any

import structlog


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


def bind_tenant(tenant_id: Any, user_id: Any) -> None:
    structlog.contextvars.bind_contextvars(
        tenant_id=None if tenant_id is None else str(tenant_id),
        user_id=None if user_id is None else str(user_id),
    )


def unbind_tenant() -> None:
    structlog.contextvars.unbind_contextvars("tenant_id", "user_id")


__all__ = ["bind_tenant", "get_logger", "unbind_tenant"]
