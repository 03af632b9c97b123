"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError            (domain.py)
    │   ├── ValidationError
    │   └── TenantContextError
    ├── ApplicationError       (application.py)
    │   ├── AuthenticationError
    │   ├── DuplicateEventError
    │   ├── RegistrationError
    │   └── ConfigurationError (clubgate.config.validation)
    │       └── PortInUseError
    └── InfrastructureError    (infrastructure.py)
        └── TransactionError
            └── NestedUnitOfWorkError
"""

from clubgate.kernel.errors.application import (
    ApplicationError,
    AuthenticationError,
    DuplicateEventError,
    RegistrationError,
)
from clubgate.kernel.errors.base import BaseError
from clubgate.kernel.errors.domain import (
    DomainError,
    TenantContextError,
    ValidationError,
)
from clubgate.kernel.errors.infrastructure import (
    InfrastructureError,
    NestedUnitOfWorkError,
    TransactionError,
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
