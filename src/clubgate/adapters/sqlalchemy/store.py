"""SQLAlchemy adapter – ConnectionStore over an async engine.

Each lease is one ``AsyncConnection``.  DB-API style ``autocommit`` is
emulated on top of SQLAlchemy's autobegin: while ``autocommit`` is ``True``
each statement is committed as soon as it runs.  Tenant session variables are
written with PostgreSQL's ``set_config``; on other dialects (SQLite in tests)
they are only recorded on the connection.
"""
from __future__ import annotations

import contextlib
from typing import Any, AsyncIterator, Mapping, Sequence

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from clubgate.observability.logging import get_logger

logger = get_logger(__name__)

_SET_CONFIG = text("SELECT set_config(:key, :value, false)")


class SqlAlchemyStoreConnection:
    """:class:`~clubgate.kernel.persistence.Connection` backed by an ``AsyncConnection``.

    Statements use SQLAlchemy's named ``:param`` style.
    """

    def __init__(self, connection: AsyncConnection) -> None:
        self._conn = connection
        self._autocommit = True
        self.session_vars: dict[str, str] = {}

    @property
    def dialect(self) -> str:
        return self._conn.dialect.name

    @property
    def autocommit(self) -> bool:
        return self._autocommit

    @autocommit.setter
    def autocommit(self, value: bool) -> None:
        self._autocommit = bool(value)

    async def set_session_var(self, key: str, value: str) -> None:
        if self.dialect == "postgresql":
            await self._conn.execute(_SET_CONFIG, {"key": key, "value": value})
            await self._maybe_commit()
        self.session_vars[key] = value

    async def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> Sequence[Mapping[str, Any]]:
        result = await self._conn.execute(text(sql), dict(params or {}))
        rows: list[Mapping[str, Any]] = [dict(row._mapping) for row in result] if result.returns_rows else []
        await self._maybe_commit()
        return rows

    async def commit(self) -> None:
        await self._conn.commit()

    async def rollback(self) -> None:
        await self._conn.rollback()

    async def _maybe_commit(self) -> None:
        if self._autocommit and self._conn.in_transaction():
            await self._conn.commit()


class SqlAlchemyStore:
    """Creates an async engine and leases one connection per unit of work."""

    def __init__(self, database_url: str | None = None, *, engine: AsyncEngine | None = None, **engine_kwargs: Any) -> None:
        if engine is None and database_url is None:
            raise ValueError("Either database_url or engine is required")
        self._engine = engine if engine is not None else create_async_engine(database_url, **engine_kwargs)

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @contextlib.asynccontextmanager
    async def acquire_connection(self) -> AsyncIterator[SqlAlchemyStoreConnection]:
        async with self._engine.connect() as conn:
            wrapped = SqlAlchemyStoreConnection(conn)
            try:
                yield wrapped
            finally:
                if conn.in_transaction():
                    logger.debug("store.release_rollback")
                    await conn.rollback()

    async def dispose(self) -> None:
        await self._engine.dispose()


__all__ = ["SqlAlchemyStore", "SqlAlchemyStoreConnection"]
