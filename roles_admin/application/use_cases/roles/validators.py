"""Common lookup and validation helpers for role use cases."""

from __future__ import annotations

from collections.abc import Iterable
from uuid import UUID

from roles_admin.domain.entities import Role
from roles_admin.domain.exceptions import NotFoundError, ValidationError
from roles_admin.infrastructure.repositories import RoleRepository


def get_role_or_raise(repository: RoleRepository, role_uuid: UUID | str) -> Role:
    """Return the role identified by ``role_uuid`` or raise ``NotFoundError``."""

    role = repository.get_by_uuid(role_uuid)
    if role is None:
        raise NotFoundError(f"There is no role with UUID {role_uuid}")
    return role


def resolve_roles(repository: RoleRepository, role_uuids: Iterable[UUID | str]) -> list[Role]:
    """Resolve ``role_uuids`` in order, dropping repeats.

    Raises ``NotFoundError`` naming every UUID that does not resolve.
    """

    requested = list(role_uuids)
    found = repository.get_many_by_uuids(requested)
    resolved: list[Role] = []
    missing: list[str] = []
    seen: set[UUID] = set()
    for value in requested:
        key = _as_uuid(value)
        role = found.get(key) if key is not None else None
        if role is None:
            missing.append(str(value))
            continue
        if role.uuid in seen:
            continue
        seen.add(role.uuid)
        resolved.append(role)
    if missing:
        raise NotFoundError(f"There are no roles with UUIDs {', '.join(missing)}")
    return resolved


def ensure_name_available(
    repository: RoleRepository, name: str, *, exclude_role_id: int | None = None
) -> None:
    """Raise ``ValidationError`` when another role already uses ``name``."""

    existing = repository.get_by_name(name)
    if existing is not None and existing.id != exclude_role_id:
        raise ValidationError(f"A role named {name} already exists")


def ensure_system_role(role: Role) -> None:
    if role.is_user_role:
        raise ValidationError(
            f"The role {role.name} belongs to a user and can not be managed here"
        )


def _as_uuid(value: UUID | str) -> UUID | None:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value).strip())
    except ValueError:
        return None


__all__ = [
    "ensure_name_available",
    "ensure_system_role",
    "get_role_or_raise",
    "resolve_roles",
]
