"""Application mutations – permission-gated, tenant-scoped writes."""
from clubgate.application.mutations.clubs import (
    CLASS_GROUP,
    CLUB,
    GRADE,
    RESOURCES,
    SCHEDULE,
    TENANT_COLUMN,
    ClubCommands,
    ResourceSpec,
)
from clubgate.application.mutations.runner import GuardedMutationRunner, Operation

__all__ = [
    "CLASS_GROUP",
    "CLUB",
    "GRADE",
    "RESOURCES",
    "SCHEDULE",
    "TENANT_COLUMN",
    "ClubCommands",
    "GuardedMutationRunner",
    "Operation",
    "ResourceSpec",
]
