"""Application tenancy – tenant scope and audited bypass."""
from clubgate.application.tenancy.context import (
    BYPASS_RLS_VAR,
    SCHOOL_ID_VAR,
    USER_ID_VAR,
    BypassFlow,
    TenantContext,
    TenantContextManager,
)

__all__ = [
    "BYPASS_RLS_VAR",
    "SCHOOL_ID_VAR",
    "USER_ID_VAR",
    "BypassFlow",
    "TenantContext",
    "TenantContextManager",
]
