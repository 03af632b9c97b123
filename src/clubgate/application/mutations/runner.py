"""Application mutations – GuardedMutationRunner.

Every change to club data goes through one pipeline, in this order: permission
gate, acquire connection, tenant scope, unit of work, release.  A refused
session never reaches the store.
"""
from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

from clubgate.application.tenancy import TenantContextManager
from clubgate.application.uow import UnitOfWorkExecutor
from clubgate.kernel.errors import TransactionError
from clubgate.kernel.persistence import Connection, ConnectionStore
from clubgate.kernel.security import AuthenticatedSession, Denied, PermissionGate
from clubgate.kernel.types import Result
from clubgate.observability.logging import AuditLogger, AuditOutcome

T = TypeVar("T")

Operation = Callable[[Connection], Awaitable[T]]

_ANONYMOUS_GATE = PermissionGate()


class GuardedMutationRunner:
    def __init__(
        self,
        store: ConnectionStore,
        tenants: TenantContextManager | None = None,
        uow: UnitOfWorkExecutor | None = None,
        *,
        gate: PermissionGate | None = None,
        audit: AuditLogger | None = None,
    ) -> None:
        self._store = store
        self._tenants = tenants or TenantContextManager()
        self._uow = uow or UnitOfWorkExecutor()
        self._gate = gate or PermissionGate()
        self._audit = audit or AuditLogger()

    async def run(
        self,
        session: AuthenticatedSession | None,
        operation: Operation[T],
        *,
        action: str = "mutate",
    ) -> Denied | Result[T, TransactionError]:
        # Anonymous callers are judged by the built-in gate whatever gate was injected.
        gate = self._gate if session is not None else _ANONYMOUS_GATE
        decision = gate.check(session)
        if session is None or not decision.allowed:
            self._audit.log_access(
                session if session is not None else "anonymous",
                resource=action,
                action="mutate",
                outcome=AuditOutcome.DENIED,
                status=decision.status.value,
                reason=decision.reason,
            )
            return Denied(action=action, decision=decision)

        async with self._store.acquire_connection() as connection:
            return await self._tenants.with_tenant(
                connection,
                session.tenant_id,
                session.user_id,
                lambda conn: self._uow.execute(conn, operation),
            )


__all__ = ["GuardedMutationRunner", "Operation"]
