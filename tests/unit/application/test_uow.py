"""Unit tests – UnitOfWorkExecutor."""
from __future__ import annotations

import asyncio

import pytest

from clubgate.application.uow import UnitOfWorkExecutor
from clubgate.kernel.errors import NestedUnitOfWorkError, TransactionError
from clubgate.testing.fakes import InMemoryConnection


async def _two_inserts(conn: InMemoryConnection) -> int:
    await conn.execute("INSERT INTO clubs (club_name) VALUES (:n)", {"n": "Chess"})
    await conn.execute("INSERT INTO clubs_bad (club_name) VALUES (:n)", {"n": "Chess"})
    return 2


class TestUnitOfWorkExecutor:
    def test_commit_on_success(self) -> None:
        conn = InMemoryConnection()

        async def op(c: InMemoryConnection) -> str:
            await c.execute("INSERT INTO clubs (club_name) VALUES ('Chess')")
            return "ok"

        result = asyncio.run(UnitOfWorkExecutor().execute(conn, op))
        assert result.unwrap() == "ok"
        assert conn.op_names() == ["autocommit", "execute", "commit", "autocommit"]
        assert conn.autocommit is True

    def test_failure_rolls_back_and_returns_err(self) -> None:
        conn = InMemoryConnection(fail_on="clubs_bad")
        result = asyncio.run(UnitOfWorkExecutor().execute(conn, _two_inserts))
        assert result.is_err()
        assert isinstance(result.error, TransactionError)
        assert isinstance(result.error.cause, RuntimeError)
        assert "commit" not in conn.op_names()
        assert conn.op_names()[-2:] == ["rollback", "autocommit"]
        assert conn.autocommit is True

    def test_failing_commit_rolls_back(self) -> None:
        conn = InMemoryConnection(fail_commit=True)
        result = asyncio.run(UnitOfWorkExecutor().execute(conn, lambda c: c.execute("SELECT 1")))
        assert result.is_err()
        assert "rollback" in conn.op_names()

    def test_failing_rollback_is_noted(self) -> None:
        conn = InMemoryConnection(fail_on="clubs_bad", fail_rollback=True)
        result = asyncio.run(UnitOfWorkExecutor().execute(conn, _two_inserts))
        err = result.error
        assert isinstance(err.cause, RuntimeError)
        assert "rollback failed" in err.detail["rollback_error"]
        assert any("rollback also failed" in note for note in err.__notes__)

    def test_prior_autocommit_false_is_restored(self) -> None:
        conn = InMemoryConnection()
        conn.autocommit = False
        asyncio.run(UnitOfWorkExecutor().execute(conn, lambda c: c.execute("SELECT 1")))
        assert conn.autocommit is False

    def test_cancellation_rolls_back_and_propagates(self) -> None:
        conn = InMemoryConnection()

        async def op(c: InMemoryConnection) -> None:
            raise asyncio.CancelledError()

        with pytest.raises(asyncio.CancelledError):
            asyncio.run(UnitOfWorkExecutor().execute(conn, op))
        assert "rollback" in conn.op_names()
        assert conn.autocommit is True

    def test_nested_unit_of_work_raises(self) -> None:
        uow = UnitOfWorkExecutor()
        conn = InMemoryConnection()

        async def outer(c: InMemoryConnection):
            return await uow.execute(c, lambda inner: inner.execute("SELECT 1"))

        with pytest.raises(NestedUnitOfWorkError):
            asyncio.run(uow.execute(conn, outer))
        assert "rollback" in conn.op_names()
        assert "commit" not in conn.op_names()

    def test_executor_reusable_after_failure(self) -> None:
        uow = UnitOfWorkExecutor()
        conn = InMemoryConnection(fail_on="clubs_bad")
        asyncio.run(uow.execute(conn, _two_inserts))
        conn.fail_on = None
        assert asyncio.run(uow.execute(conn, _two_inserts)).unwrap() == 2
