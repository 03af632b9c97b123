"""Store ports – the connection surface the tenant and UoW layers consume."""

from __future__ import annotations

import contextlib
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable


@runtime_checkable
class Connection(Protocol):
    """One exclusively-owned database connection.

    ``autocommit`` follows DB-API semantics: while ``True`` every statement is
    committed as it runs; while ``False`` statements accumulate until
    :meth:`commit` or :meth:`rollback`.
    """

    autocommit: bool

    async def set_session_var(self, key: str, value: str) -> None: ...
    async def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> Sequence[Mapping[str, Any]]: ...
    async def commit(self) -> None: ...
    async def rollback(self) -> None: ...


class ConnectionStore(Protocol):
    """Port: hands out connections for the duration of one unit of work."""

    def acquire_connection(self) -> contextlib.AbstractAsyncContextManager[Connection]: ...


__all__ = ["Connection", "ConnectionStore"]
