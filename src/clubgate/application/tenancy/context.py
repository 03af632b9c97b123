"""Application tenancy – per-connection tenant scope.

Row-level security policies in the database read three session variables.
Every unit of work sets them on its own connection before the body runs and
blanks them afterwards, whatever the outcome, so a pooled connection never
carries one school's scope into the next borrower's work.
"""
from __future__ import annotations

import dataclasses
import threading
import uuid
from enum import Enum
from typing import Any, Awaitable, Callable, TypeVar

from clubgate.kernel.errors import TenantContextError, ValidationError
from clubgate.kernel.persistence import Connection
from clubgate.kernel.types import parse_id
from clubgate.observability.logging import AuditLogger, bind_tenant, get_logger, unbind_tenant

T = TypeVar("T")

logger = get_logger(__name__)

SCHOOL_ID_VAR = "app.current_school_id"
USER_ID_VAR = "app.current_user_id"
BYPASS_RLS_VAR = "app.bypass_rls"


class BypassFlow(str, Enum):
    """The only flows allowed to run without tenant filtering."""

    PASSWORD_RESET = "password_reset"
    INITIAL_REGISTRATION = "initial_registration"


@dataclasses.dataclass(frozen=True)
class TenantContext:
    tenant_id: uuid.UUID | None
    acting_user_id: uuid.UUID | None
    bypass_rls: bool = False

    def __post_init__(self) -> None:
        if self.bypass_rls:
            if self.tenant_id is not None or self.acting_user_id is not None:
                raise TenantContextError("A bypass context must not carry tenant or user ids")
            return
        if self.tenant_id is None:
            raise TenantContextError("tenant_id is required", field="tenant_id")
        if self.acting_user_id is None:
            raise TenantContextError("acting_user_id is required", field="acting_user_id")

    @classmethod
    def for_user(cls, tenant_id: uuid.UUID | str | None, acting_user_id: uuid.UUID | str | None) -> "TenantContext":
        """Parse both ids; anything missing or malformed raises :class:`TenantContextError`."""
        return cls(
            tenant_id=_parse(tenant_id, "tenant_id"),
            acting_user_id=_parse(acting_user_id, "acting_user_id"),
        )

    @classmethod
    def bypass(cls) -> "TenantContext":
        return cls(tenant_id=None, acting_user_id=None, bypass_rls=True)

    def session_vars(self) -> dict[str, str]:
        return {
            SCHOOL_ID_VAR: "" if self.tenant_id is None else str(self.tenant_id),
            USER_ID_VAR: "" if self.acting_user_id is None else str(self.acting_user_id),
            BYPASS_RLS_VAR: "on" if self.bypass_rls else "off",
        }


_CLEARED: dict[str, str] = {SCHOOL_ID_VAR: "", USER_ID_VAR: "", BYPASS_RLS_VAR: ""}


def _parse(value: uuid.UUID | str | None, field: str) -> uuid.UUID:
    try:
        return parse_id(value, field=field)
    except ValidationError as exc:
        raise TenantContextError(exc.message, field=field, cause=exc) from exc


class TenantContextManager:
    """Applies a :class:`TenantContext` to a connection around an async body.

    A connection may hold one scope at a time; opening a second one on the
    same connection raises :class:`TenantContextError`.
    """

    def __init__(self, audit: AuditLogger | None = None) -> None:
        self._audit = audit or AuditLogger()
        self._lock = threading.Lock()
        self._scoped: set[int] = set()

    async def with_tenant(
        self,
        connection: Connection,
        tenant_id: uuid.UUID | str | None,
        acting_user_id: uuid.UUID | str | None,
        body: Callable[[Connection], Awaitable[T]],
    ) -> T:
        context = TenantContext.for_user(tenant_id, acting_user_id)
        return await self.run(connection, context, body)

    async def with_bypass(
        self,
        connection: Connection,
        body: Callable[[Connection], Awaitable[T]],
        *,
        flow: BypassFlow,
        actor: Any,
    ) -> T:
        """Run *body* with tenant filtering disabled, for one of the :class:`BypassFlow` flows."""
        if not isinstance(flow, BypassFlow):
            raise TenantContextError(f"Tenant isolation bypass is not permitted for {flow!r}")
        self._audit.log_security_event(
            "tenant_bypass",
            principal=actor,
            description=f"Row-level security bypassed for {flow.value}",
            flow=flow.value,
        )
        return await self.run(connection, TenantContext.bypass(), body)

    async def run(
        self,
        connection: Connection,
        context: TenantContext,
        body: Callable[[Connection], Awaitable[T]],
    ) -> T:
        key = id(connection)
        with self._lock:
            if key in self._scoped:
                raise TenantContextError("Connection already has an active tenant scope")
            self._scoped.add(key)
        try:
            await _apply(connection, context.session_vars())
            bind_tenant(context.tenant_id, context.acting_user_id)
            return await body(connection)
        finally:
            try:
                await _apply(connection, _CLEARED)
            finally:
                unbind_tenant()
                with self._lock:
                    self._scoped.discard(key)

    def is_scoped(self, connection: Connection) -> bool:
        with self._lock:
            return id(connection) in self._scoped


async def _apply(connection: Connection, values: dict[str, str]) -> None:
    for key, value in values.items():
        await connection.set_session_var(key, value)


__all__ = [
    "BYPASS_RLS_VAR",
    "SCHOOL_ID_VAR",
    "USER_ID_VAR",
    "BypassFlow",
    "TenantContext",
    "TenantContextManager",
]
