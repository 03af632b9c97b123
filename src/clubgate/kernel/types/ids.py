"""UUID-backed identifiers for schools (tenants) and users."""

from __future__ import annotations

import uuid

from clubgate.kernel.errors.domain import ValidationError


def parse_id(value: uuid.UUID | str | None, *, field: str = "id") -> uuid.UUID:
    """Coerce *value* to a :class:`uuid.UUID`.

    Raises :class:`ValidationError` for ``None``, blank strings and strings
    that are not a valid UUID.
    """
    if isinstance(value, uuid.UUID):
        return value
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} must not be empty")
    try:
        return uuid.UUID(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"{field} is not a valid UUID: {value!r}", cause=exc) from exc


__all__ = ["parse_id"]
