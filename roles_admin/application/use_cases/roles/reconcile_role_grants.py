"""Use case for replacing the set of roles granted to a role."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.orm import Session

from roles_admin.domain.entities import Role
from roles_admin.domain.hierarchy import GrantDiff, diff_grants
from roles_admin.infrastructure.database import unit_of_work
from roles_admin.infrastructure.repositories import RoleHierarchyRepository, RoleRepository

from .grant_role import add_grant
from .validators import get_role_or_raise, resolve_roles

logger = logging.getLogger(__name__)


def reconcile_role_grants(
    session: Session,
    *,
    role_uuid: UUID | str,
    granted_role_uuids: Iterable[UUID | str],
) -> GrantDiff:
    """Make the direct grants of ``role_uuid`` exactly ``granted_role_uuids``.

    Either every edge change is committed or none is.
    """

    with unit_of_work(session):
        hierarchy = RoleHierarchyRepository(session)
        hierarchy.lock_hierarchy()
        repository = RoleRepository(session)
        role = get_role_or_raise(repository, role_uuid)
        repository.lock([role.id])
        return apply_grant_set(session, role, granted_role_uuids)


def apply_grant_set(
    session: Session, role: Role, granted_role_uuids: Iterable[UUID | str]
) -> GrantDiff:
    """Revoke then grant so that ``role`` is directly granted exactly the given roles.

    Must run inside an open :func:`unit_of_work`. All revocations are applied
    before the first grant.
    """

    repository = RoleRepository(session)
    hierarchy = RoleHierarchyRepository(session)

    desired = resolve_roles(repository, granted_role_uuids)
    desired_by_id = {granted.id: granted for granted in desired}
    diff = diff_grants(hierarchy.direct_grants_of(role.id), desired_by_id)
    if diff.is_empty:
        return diff

    repository.lock({role.id, *diff.to_revoke, *diff.to_grant})
    for revoked_id in sorted(diff.to_revoke):
        hierarchy.remove_edge(role.id, revoked_id)
    for granted_id in sorted(diff.to_grant):
        add_grant(hierarchy, role, desired_by_id[granted_id])

    logger.debug(
        "Reconciled grants of role %s: revoked %s, granted %s",
        role.name,
        sorted(diff.to_revoke),
        sorted(diff.to_grant),
    )
    return diff


__all__ = ["apply_grant_set", "reconcile_role_grants"]
