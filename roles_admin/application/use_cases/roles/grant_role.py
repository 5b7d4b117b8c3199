"""Use case for granting one role to another."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from roles_admin.domain.entities import GrantChange, Role
from roles_admin.domain.exceptions import CycleError
from roles_admin.infrastructure.database import unit_of_work
from roles_admin.infrastructure.repositories import RoleHierarchyRepository, RoleRepository

from .validators import get_role_or_raise

logger = logging.getLogger(__name__)


def grant_role(
    session: Session,
    *,
    role_uuid: UUID | str,
    granted_role_uuid: UUID | str,
) -> GrantChange:
    """Make the role ``role_uuid`` inherit the role ``granted_role_uuid``.

    Granting an edge that already exists is a no-op reported with
    ``changed=False``. Raises ``NotFoundError`` for unknown roles and
    ``CycleError`` when the granted role already inherits the receiver,
    self-grants included.
    """

    with unit_of_work(session):
        hierarchy = RoleHierarchyRepository(session)
        hierarchy.lock_hierarchy()

        repository = RoleRepository(session)
        role = get_role_or_raise(repository, role_uuid)
        granted_role = get_role_or_raise(repository, granted_role_uuid)
        repository.lock([role.id, granted_role.id])

        changed = add_grant(hierarchy, role, granted_role)

    if changed:
        logger.info("Role %s was granted role %s", role.name, granted_role.name)
    return GrantChange(role=role, granted_role=granted_role, changed=changed)


def add_grant(hierarchy: RoleHierarchyRepository, role: Role, granted_role: Role) -> bool:
    """Add the edge unless present. The caller holds the hierarchy lock."""

    if role.id == granted_role.id:
        raise CycleError(f"The role {role.name} can not be granted to itself")
    if hierarchy.has_edge(role.id, granted_role.id):
        return False
    try:
        hierarchy.add_edge(role.id, granted_role.id)
    except CycleError as exc:
        raise CycleError(
            f"The role {granted_role.name} already inherits the role {role.name}; "
            "granting it would create a cycle"
        ) from exc
    return True


__all__ = ["add_grant", "grant_role"]
