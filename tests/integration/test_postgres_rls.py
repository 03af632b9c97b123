"""Integration tests – tenant scope against PostgreSQL row-level security.

Uses testcontainers to spawn a real PostgreSQL instance.
Run with: pytest tests/integration/test_postgres_rls.py -m integration -v
"""
from __future__ import annotations

import asyncio
import uuid
from typing import Any

import pytest

pytest.importorskip("asyncpg")
postgres = pytest.importorskip("testcontainers.postgres")

from sqlalchemy.engine import make_url  # noqa: E402

from clubgate.adapters.sqlalchemy import SqlAlchemyStore  # noqa: E402
from clubgate.application.mutations import CLUB, ClubCommands, GuardedMutationRunner  # noqa: E402
from clubgate.application.tenancy import BypassFlow, TenantContextManager  # noqa: E402
from clubgate.application.uow import UnitOfWorkExecutor  # noqa: E402
from clubgate.kernel.errors import TransactionError  # noqa: E402
from clubgate.kernel.security import AuthenticatedSession, CoordinatorStatus  # noqa: E402
from clubgate.observability.logging import AuditLogger  # noqa: E402

pytestmark = pytest.mark.integration

SCHOOL_A = uuid.UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa")
SCHOOL_B = uuid.UUID("bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb")
USER = uuid.UUID("22222222-2222-2222-2222-222222222222")

_POLICY = (
    "current_setting('app.bypass_rls', true) = 'on' "
    "OR school_id = current_setting('app.current_school_id', true)"
)
_SETUP = [
    "CREATE ROLE clubgate_app LOGIN PASSWORD 'clubgate'",
    "CREATE TABLE clubs ("
    " club_id TEXT PRIMARY KEY, school_id TEXT NOT NULL, club_name TEXT NOT NULL,"
    " description TEXT, meeting_day TEXT, meeting_time TEXT, venue TEXT,"
    " is_active BOOLEAN NOT NULL DEFAULT TRUE)",
    "ALTER TABLE clubs ENABLE ROW LEVEL SECURITY",
    f"CREATE POLICY tenant_isolation ON clubs USING ({_POLICY}) WITH CHECK ({_POLICY})",
    "GRANT SELECT, INSERT, UPDATE, DELETE ON clubs TO clubgate_app",
]


# ---------------------------------------------------------------------------
# helpers
# ---------------------------------------------------------------------------

class _NullLogger:
    def warning(self, event: str, **kw: Any) -> None:
        pass


def _run(coro):  # type: ignore[no-untyped-def]
    return asyncio.run(coro)


@pytest.fixture(scope="module")
def app_url():
    with postgres.PostgresContainer("postgres:16-alpine") as pg:
        admin = make_url(pg.get_connection_url()).set(drivername="postgresql+asyncpg")

        async def setup() -> None:
            store = SqlAlchemyStore(admin.render_as_string(hide_password=False))
            try:
                async with store.acquire_connection() as conn:
                    for ddl in _SETUP:
                        await conn.execute(ddl)
                    for school, name in ((SCHOOL_A, "Chess"), (SCHOOL_A, "Drama"), (SCHOOL_B, "Robotics")):
                        await conn.execute(
                            "INSERT INTO clubs (club_id, school_id, club_name) VALUES (:id, :s, :n)",
                            {"id": str(uuid.uuid4()), "s": str(school), "n": name},
                        )
            finally:
                await store.dispose()

        _run(setup())
        yield admin.set(username="clubgate_app", password="clubgate").render_as_string(hide_password=False)


def _tenants() -> TenantContextManager:
    return TenantContextManager(audit=AuditLogger(logger=_NullLogger()))


async def _club_names(conn: Any) -> list[str]:
    rows = await conn.execute("SELECT club_name FROM clubs ORDER BY club_name")
    return [r["club_name"] for r in rows]


# ---------------------------------------------------------------------------
# Tests
# ---------------------------------------------------------------------------

class TestRowLevelSecurity:
    def test_tenant_scope_filters_rows(self, app_url: str) -> None:
        async def run() -> tuple[list[str], list[str], list[str]]:
            store = SqlAlchemyStore(app_url)
            try:
                async with store.acquire_connection() as conn:
                    scoped = await _tenants().with_tenant(conn, SCHOOL_A, USER, _club_names)
                    after = await _club_names(conn)
                    bypass = await _tenants().with_bypass(
                        conn, _club_names, flow=BypassFlow.PASSWORD_RESET, actor="test"
                    )
                return scoped, after, bypass
            finally:
                await store.dispose()

        scoped, after, bypass = _run(run())
        assert scoped == ["Chess", "Drama"]
        assert after == []
        assert bypass == ["Chess", "Drama", "Robotics"]

    def test_insert_for_other_school_rejected(self, app_url: str) -> None:
        async def smuggle(conn: Any) -> None:
            await conn.execute(
                "INSERT INTO clubs (club_id, school_id, club_name) VALUES (:id, :s, 'Smuggled')",
                {"id": str(uuid.uuid4()), "s": str(SCHOOL_B)},
            )

        async def run() -> Any:
            store = SqlAlchemyStore(app_url)
            try:
                async with store.acquire_connection() as conn:
                    return await _tenants().with_tenant(
                        conn, SCHOOL_A, USER, lambda c: UnitOfWorkExecutor().execute(c, smuggle)
                    )
            finally:
                await store.dispose()

        result = _run(run())
        assert result.is_err()
        assert isinstance(result.error, TransactionError)

    def test_commands_create_visible_only_to_own_school(self, app_url: str) -> None:
        session = AuthenticatedSession(
            tenant_id=SCHOOL_B, user_id=USER, coordinator_status=CoordinatorStatus.ACTIVE_COORDINATOR
        )

        async def run() -> tuple[list[str], list[str]]:
            store = SqlAlchemyStore(app_url)
            try:
                runner = GuardedMutationRunner(store, _tenants(), audit=AuditLogger(logger=_NullLogger()))
                (await ClubCommands(runner).create(session, CLUB, {"club_name": "Athletics"})).unwrap()
                async with store.acquire_connection() as conn:
                    own = await _tenants().with_tenant(conn, SCHOOL_B, USER, _club_names)
                    other = await _tenants().with_tenant(conn, SCHOOL_A, USER, _club_names)
                return own, other
            finally:
                await store.dispose()

        own, other = _run(run())
        assert "Athletics" in own
        assert "Athletics" not in other
