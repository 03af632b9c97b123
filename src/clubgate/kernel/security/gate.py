"""Kernel security – permission gate for mutating operations.

Denial is an ordinary outcome, so the gate returns values instead of raising.
"""

from __future__ import annotations

import dataclasses
import functools
from typing import Any, Awaitable, Callable, TypeVar

from clubgate.kernel.security.coordinator import AuthenticatedSession, CoordinatorStatus

R = TypeVar("R")


def can_mutate(status: CoordinatorStatus) -> bool:
    """Return ``True`` only for an active coordinator."""
    return status is CoordinatorStatus.ACTIVE_COORDINATOR


_DENIAL_REASONS: dict[CoordinatorStatus, str] = {
    CoordinatorStatus.NO_ACCESS: "only club coordinators may change club data",
    CoordinatorStatus.INACTIVE_COORDINATOR: (
        "your coordinator account is inactive; ask an administrator to activate it"
    ),
}


@dataclasses.dataclass(frozen=True)
class PermissionDecision:
    """Result of a :class:`PermissionGate` check."""

    allowed: bool
    status: CoordinatorStatus
    reason: str | None = None

    def __bool__(self) -> bool:
        return self.allowed


@dataclasses.dataclass(frozen=True)
class Denied:
    """Outcome returned by a guarded operation that the gate refused."""

    action: str
    decision: PermissionDecision

    @property
    def reason(self) -> str:
        return self.decision.reason or "not permitted"


class PermissionGate:
    """Decides whether an authenticated session may mutate club data."""

    def check(self, session: AuthenticatedSession | None) -> PermissionDecision:
        if session is None:
            return PermissionDecision(
                allowed=False,
                status=CoordinatorStatus.NO_ACCESS,
                reason="no authenticated session",
            )
        status = session.coordinator_status
        if can_mutate(status):
            return PermissionDecision(allowed=True, status=status)
        return PermissionDecision(allowed=False, status=status, reason=_DENIAL_REASONS[status])


def requires_active_coordinator(
    action: str,
) -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R | Denied]]]:
    """Decorator for async entry points whose first argument is the session.

    The wrapped coroutine is only awaited when the gate allows; otherwise a
    :class:`Denied` outcome is returned.

    Example::

        @requires_active_coordinator("club:create")
        async def create_club(session: AuthenticatedSession, name: str) -> UUID:
            ...
    """
    gate = PermissionGate()

    def decorator(fn: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R | Denied]]:
        @functools.wraps(fn)
        async def wrapper(session: AuthenticatedSession | None, *args: Any, **kwargs: Any) -> R | Denied:
            decision = gate.check(session)
            if not decision.allowed:
                return Denied(action=action, decision=decision)
            return await fn(session, *args, **kwargs)

        return wrapper

    return decorator


__all__ = [
    "Denied",
    "PermissionDecision",
    "PermissionGate",
    "can_mutate",
    "requires_active_coordinator",
]
