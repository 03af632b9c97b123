"""Kernel security – coordinator status, authenticated session, permission gate."""
from clubgate.kernel.security.coordinator import (
    COORDINATOR_ROLE,
    AuthenticatedSession,
    CoordinatorStatus,
)
from clubgate.kernel.security.gate import (
    Denied,
    PermissionDecision,
    PermissionGate,
    can_mutate,
    requires_active_coordinator,
)

__all__ = [
    "COORDINATOR_ROLE",
    "AuthenticatedSession",
    "CoordinatorStatus",
    "Denied",
    "PermissionDecision",
    "PermissionGate",
    "can_mutate",
    "requires_active_coordinator",
]
