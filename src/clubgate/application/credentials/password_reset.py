"""Application credentials – password-reset token issuance.

The user is looked up by email before anyone is signed in, so the lookup
cannot be scoped to a school.  It runs as an audited tenant bypass, inside
one unit of work, and touches nothing but the reset columns of that user.
"""
from __future__ import annotations

import datetime
import secrets

from clubgate.application.tenancy import BypassFlow, TenantContextManager
from clubgate.application.uow import UnitOfWorkExecutor
from clubgate.kernel.errors import ValidationError
from clubgate.kernel.persistence import Connection, ConnectionStore
from clubgate.kernel.time import Clock, SystemClock
from clubgate.observability.logging import get_logger

logger = get_logger(__name__)

RESET_TOKEN_TTL = datetime.timedelta(hours=24)


class PasswordResetService:
    def __init__(
        self,
        store: ConnectionStore,
        tenants: TenantContextManager | None = None,
        uow: UnitOfWorkExecutor | None = None,
        *,
        clock: Clock | None = None,
        ttl: datetime.timedelta = RESET_TOKEN_TTL,
    ) -> None:
        self._store = store
        self._tenants = tenants or TenantContextManager()
        self._uow = uow or UnitOfWorkExecutor()
        self._clock = clock or SystemClock()
        self._ttl = ttl

    async def issue_reset_token(self, email: str) -> str | None:
        """Store a fresh reset token for *email* and return it.

        Returns ``None`` when no user has that email.  Raises
        :class:`TransactionError` when the store fails.
        """
        normalized = (email or "").strip().lower()
        if not normalized or "@" not in normalized:
            raise ValidationError("A valid email address is required")

        token = secrets.token_urlsafe(32)
        expires_at = self._clock.now() + self._ttl

        async def store_token(conn: Connection) -> str | None:
            rows = await conn.execute(
                "UPDATE users SET reset_token = :token, reset_token_expiry = :expiry "
                "WHERE lower(email) = :email RETURNING user_id",
                {"token": token, "expiry": expires_at.isoformat(), "email": normalized},
            )
            return token if rows else None

        async with self._store.acquire_connection() as connection:
            result = await self._tenants.with_bypass(
                connection,
                lambda conn: self._uow.execute(conn, store_token),
                flow=BypassFlow.PASSWORD_RESET,
                actor=normalized,
            )

        issued = result.unwrap()
        logger.info("password_reset.requested", token_issued=issued is not None)
        return issued


__all__ = ["RESET_TOKEN_TTL", "PasswordResetService"]
