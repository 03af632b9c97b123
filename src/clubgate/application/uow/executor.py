"""Application UoW – run one operation atomically on a connection."""
from __future__ import annotations

import threading
from typing import Awaitable, Callable, TypeVar

from clubgate.kernel.errors import NestedUnitOfWorkError, TransactionError
from clubgate.kernel.persistence import Connection
from clubgate.kernel.types import Err, Ok, Result
from clubgate.observability.logging import get_logger

T = TypeVar("T")

logger = get_logger(__name__)


class UnitOfWorkExecutor:
    """Commit on success, roll back on failure, and always restore autocommit.

    Failures come back as ``Err(TransactionError)`` with the original
    exception as ``cause``.  Cancellation and other non-``Exception`` base
    exceptions still roll back but propagate unchanged.  Opening a unit of
    work on a connection that is already inside one raises
    :class:`NestedUnitOfWorkError`.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._active: set[int] = set()

    async def execute(
        self,
        connection: Connection,
        operation: Callable[[Connection], Awaitable[T]],
    ) -> Result[T, TransactionError]:
        key = id(connection)
        with self._lock:
            if key in self._active:
                raise NestedUnitOfWorkError("A unit of work is already open on this connection")
            self._active.add(key)

        previous = connection.autocommit
        try:
            try:
                connection.autocommit = False
                value = await operation(connection)
                await connection.commit()
            except NestedUnitOfWorkError:
                await self._rollback(connection, None)
                raise
            except Exception as exc:
                error = TransactionError(f"Unit of work rolled back: {exc}", cause=exc)
                await self._rollback(connection, error)
                logger.warning("uow.rolled_back", error_type=type(exc).__name__, error=str(exc))
                return Err(error)
            except BaseException:
                await self._rollback(connection, None)
                raise
            return Ok(value)
        finally:
            connection.autocommit = previous
            with self._lock:
                self._active.discard(key)

    @staticmethod
    async def _rollback(connection: Connection, error: TransactionError | None) -> None:
        try:
            await connection.rollback()
        except Exception as rollback_exc:  # noqa: BLE001
            logger.error("uow.rollback_failed", error_type=type(rollback_exc).__name__, error=str(rollback_exc))
            if error is not None:
                error.detail["rollback_error"] = repr(rollback_exc)
                error.add_note(f"rollback also failed: {rollback_exc!r}")


__all__ = ["UnitOfWorkExecutor"]
