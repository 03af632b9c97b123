"""Domain errors – tenant-boundary and validation rule violations."""

from __future__ import annotations

from typing import Any

from clubgate.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a domain rule / invariant is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules."""

    default_code = "validation_error"


class TenantContextError(DomainError):
    """A unit of work was attempted without a valid tenant scope.

    Raised for missing or malformed tenant / user ids, for bypass requests
    outside the credential-recovery flows, and for overlapping scopes on one
    connection.  The enclosing operation must fail closed.
    """

    default_code = "tenant_context_error"

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.field = field


__all__ = ["DomainError", "TenantContextError", "ValidationError"]
