"""Use case for revoking a role previously granted to another."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from roles_admin.domain.entities import GrantChange
from roles_admin.infrastructure.database import unit_of_work
from roles_admin.infrastructure.repositories import RoleHierarchyRepository, RoleRepository

from .validators import get_role_or_raise

logger = logging.getLogger(__name__)


def revoke_role(
    session: Session,
    *,
    role_uuid: UUID | str,
    revoked_role_uuid: UUID | str,
) -> GrantChange:
    """Remove the grant ``role_uuid -> revoked_role_uuid``.

    Revoking a grant that does not exist is a no-op reported with
    ``changed=False``. Raises ``NotFoundError`` for unknown roles.
    """

    with unit_of_work(session):
        hierarchy = RoleHierarchyRepository(session)
        hierarchy.lock_hierarchy()

        repository = RoleRepository(session)
        role = get_role_or_raise(repository, role_uuid)
        revoked_role = get_role_or_raise(repository, revoked_role_uuid)
        repository.lock([role.id, revoked_role.id])

        changed = hierarchy.remove_edge(role.id, revoked_role.id)

    if changed:
        logger.info("Role %s was revoked role %s", role.name, revoked_role.name)
    return GrantChange(role=role, granted_role=revoked_role, changed=changed)


__all__ = ["revoke_role"]
