"""Infrastructure errors – transaction and store failures."""

from __future__ import annotations

from clubgate.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class TransactionError(InfrastructureError):
    """A unit of work failed and was rolled back."""

    default_code = "transaction_failed"


class NestedUnitOfWorkError(TransactionError):
    """A second unit of work was opened on a connection that already has one.

    This is a programming error and is always raised, never returned as a
    ``Result``.
    """

    default_code = "nested_unit_of_work"


__all__ = ["InfrastructureError", "NestedUnitOfWorkError", "TransactionError"]
