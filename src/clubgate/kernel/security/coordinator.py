"""Kernel security – coordinator status and the authenticated session value.

The coordinator status is resolved once, when a user authenticates, from the
durable account flags (``role``, ``is_active``, ``is_active_coordinator``).
Forms never re-derive it; they receive the :class:`AuthenticatedSession` and
hand it to the permission gate.  Only an administrative action outside this
package moves a coordinator between inactive and active.
"""

from __future__ import annotations

import dataclasses
import uuid
from enum import Enum

from clubgate.kernel.types.ids import parse_id

COORDINATOR_ROLE = "club_coordinator"


class CoordinatorStatus(str, Enum):
    """Tri-state access level of the acting user."""

    NO_ACCESS = "no_access"
    INACTIVE_COORDINATOR = "inactive_coordinator"
    ACTIVE_COORDINATOR = "active_coordinator"

    @classmethod
    def derive(
        cls,
        role: str | None,
        *,
        is_active: bool,
        is_active_coordinator: bool,
    ) -> "CoordinatorStatus":
        """Map durable account flags to a status.

        Anyone who is not a coordinator, or whose account is disabled, has no
        access to mutating operations.
        """
        if role != COORDINATOR_ROLE or not is_active:
            return cls.NO_ACCESS
        if is_active_coordinator:
            return cls.ACTIVE_COORDINATOR
        return cls.INACTIVE_COORDINATOR


@dataclasses.dataclass(frozen=True)
class AuthenticatedSession:
    """Identity and access level captured at login."""

    tenant_id: uuid.UUID
    user_id: uuid.UUID
    coordinator_status: CoordinatorStatus = CoordinatorStatus.NO_ACCESS
    username: str = ""

    @classmethod
    def from_account(
        cls,
        *,
        school_id: uuid.UUID | str,
        user_id: uuid.UUID | str,
        role: str | None,
        is_active: bool,
        is_active_coordinator: bool,
        username: str = "",
    ) -> "AuthenticatedSession":
        return cls(
            tenant_id=parse_id(school_id, field="school_id"),
            user_id=parse_id(user_id, field="user_id"),
            coordinator_status=CoordinatorStatus.derive(
                role,
                is_active=is_active,
                is_active_coordinator=is_active_coordinator,
            ),
            username=username,
        )


__all__ = ["COORDINATOR_ROLE", "AuthenticatedSession", "CoordinatorStatus"]
