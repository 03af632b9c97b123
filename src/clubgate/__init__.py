"""
clubgate – trust and tenant-boundary layer for the club management system.

Import path convention::

    from clubgate.kernel.errors import TenantContextError
    from clubgate.adapters.fastapi import WebhookListenerService
    from clubgate.application.tenancy import TenantContextManager
    from clubgate.application.uow import UnitOfWorkExecutor
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
