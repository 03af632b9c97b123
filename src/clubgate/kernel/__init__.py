"""Kernel – framework-agnostic building blocks."""

from clubgate.kernel.errors import (
    ApplicationError,
    AuthenticationError,
    BaseError,
    DomainError,
    DuplicateEventError,
    InfrastructureError,
    NestedUnitOfWorkError,
    RegistrationError,
    TenantContextError,
    TransactionError,
    ValidationError,
)

__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "BaseError",
    "DomainError",
    "DuplicateEventError",
    "InfrastructureError",
    "NestedUnitOfWorkError",
    "RegistrationError",
    "TenantContextError",
    "TransactionError",
    "ValidationError",
]
