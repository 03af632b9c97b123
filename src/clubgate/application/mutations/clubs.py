"""Application mutations – club, class group, grade and schedule commands.

Column names are checked against a per-resource allow-list before any SQL is
built, and the tenant column is always set (inserts) or filtered on
(updates and deletes) from the session, never from caller input.
"""
from __future__ import annotations

import dataclasses
import uuid
from typing import Any, Mapping

from clubgate.application.mutations.runner import GuardedMutationRunner
from clubgate.kernel.errors import TransactionError, ValidationError
from clubgate.kernel.persistence import Connection
from clubgate.kernel.security import AuthenticatedSession, Denied
from clubgate.kernel.types import Result, parse_id

TENANT_COLUMN = "school_id"


@dataclasses.dataclass(frozen=True)
class ResourceSpec:
    """Table layout of one mutable resource."""

    name: str
    table: str
    id_column: str
    columns: frozenset[str]
    soft_delete: bool = False

    def check_columns(self, values: Mapping[str, Any]) -> None:
        if not values:
            raise ValidationError(f"No {self.name} fields given")
        unknown = sorted(set(values) - self.columns)
        if unknown:
            raise ValidationError(f"Unknown {self.name} fields: {', '.join(unknown)}")


CLUB = ResourceSpec(
    name="club",
    table="clubs",
    id_column="club_id",
    columns=frozenset({"club_name", "description", "meeting_day", "meeting_time", "venue"}),
    soft_delete=True,
)
CLASS_GROUP = ResourceSpec(
    name="class_group",
    table="class_groups",
    id_column="class_id",
    columns=frozenset({"group_name"}),
)
GRADE = ResourceSpec(
    name="grade",
    table="grades",
    id_column="grade_id",
    columns=frozenset({"grade_name"}),
)
SCHEDULE = ResourceSpec(
    name="schedule",
    table="club_schedules",
    id_column="schedule_id",
    columns=frozenset(
        {"club_id", "grade_id", "class_group_id", "meeting_day", "start_time", "end_time", "venue"}
    ),
    soft_delete=True,
)

RESOURCES: dict[str, ResourceSpec] = {spec.name: spec for spec in (CLUB, CLASS_GROUP, GRADE, SCHEDULE)}


class ClubCommands:
    """Create, update and delete tenant-owned club data for a coordinator.

    Every method returns :class:`Denied` when the session may not mutate,
    otherwise the unit-of-work ``Result``.  Ids are passed to the store as
    strings so every driver binds them the same way.
    """

    def __init__(self, runner: GuardedMutationRunner) -> None:
        self._runner = runner

    async def create(
        self,
        session: AuthenticatedSession | None,
        resource: ResourceSpec,
        values: Mapping[str, Any],
    ) -> Denied | Result[uuid.UUID, TransactionError]:
        resource.check_columns(values)
        tenant = _tenant_of(session)
        new_id = uuid.uuid4()

        async def insert(conn: Connection) -> uuid.UUID:
            row = {**values, resource.id_column: str(new_id), TENANT_COLUMN: tenant}
            columns = ", ".join(row)
            placeholders = ", ".join(f":{c}" for c in row)
            await conn.execute(f"INSERT INTO {resource.table} ({columns}) VALUES ({placeholders})", row)
            return new_id

        return await self._runner.run(session, insert, action=f"{resource.name}:create")

    async def update(
        self,
        session: AuthenticatedSession | None,
        resource: ResourceSpec,
        resource_id: uuid.UUID | str,
        values: Mapping[str, Any],
    ) -> Denied | Result[bool, TransactionError]:
        resource.check_columns(values)
        target = parse_id(resource_id, field=resource.id_column)
        tenant = _tenant_of(session)

        async def update_row(conn: Connection) -> bool:
            assignments = ", ".join(f"{c} = :{c}" for c in values)
            sql = (
                f"UPDATE {resource.table} SET {assignments} "
                f"WHERE {resource.id_column} = :_id AND {TENANT_COLUMN} = :_tenant "
                f"RETURNING {resource.id_column}"
            )
            rows = await conn.execute(sql, {**values, "_id": str(target), "_tenant": tenant})
            return len(rows) > 0

        return await self._runner.run(session, update_row, action=f"{resource.name}:update")

    async def delete(
        self,
        session: AuthenticatedSession | None,
        resource: ResourceSpec,
        resource_id: uuid.UUID | str,
    ) -> Denied | Result[bool, TransactionError]:
        """Soft-delete (``is_active = FALSE``) where the resource supports it."""
        target = parse_id(resource_id, field=resource.id_column)
        tenant = _tenant_of(session)

        async def delete_row(conn: Connection) -> bool:
            where = f"WHERE {resource.id_column} = :_id AND {TENANT_COLUMN} = :_tenant"
            if resource.soft_delete:
                sql = f"UPDATE {resource.table} SET is_active = FALSE {where} RETURNING {resource.id_column}"
            else:
                sql = f"DELETE FROM {resource.table} {where} RETURNING {resource.id_column}"
            rows = await conn.execute(sql, {"_id": str(target), "_tenant": tenant})
            return len(rows) > 0

        return await self._runner.run(session, delete_row, action=f"{resource.name}:delete")


def _tenant_of(session: AuthenticatedSession | None) -> str:
    # A missing session is refused by the runner before any operation runs.
    return "" if session is None else str(session.tenant_id)


__all__ = [
    "CLASS_GROUP",
    "CLUB",
    "GRADE",
    "RESOURCES",
    "SCHEDULE",
    "TENANT_COLUMN",
    "ClubCommands",
    "ResourceSpec",
]
