"""Observability – structured logging helpers."""
from clubgate.observability.logging.filters import DEFAULT_SENSITIVE_FIELDS, SensitiveFieldsFilter
from clubgate.observability.logging.factory import JsonLoggerFactory
from clubgate.observability.logging.processors import bind_tenant, get_logger, unbind_tenant
from clubgate.observability.logging.audit import AuditLogger, AuditOutcome

__all__ = [
    "AuditLogger",
    "AuditOutcome",
    "DEFAULT_SENSITIVE_FIELDS",
    "JsonLoggerFactory",
    "SensitiveFieldsFilter",
    "bind_tenant",
    "get_logger",
    "unbind_tenant",
]
