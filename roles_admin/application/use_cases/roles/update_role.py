"""Use case for updating a system role and its grants."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from uuid import UUID

from sqlalchemy.orm import Session

from roles_admin.domain.entities import Role, RoleAttributes
from roles_admin.infrastructure.database import unit_of_work
from roles_admin.infrastructure.repositories import RoleHierarchyRepository, RoleRepository
from roles_admin.utils import now_in_app_timezone

from .reconcile_role_grants import apply_grant_set
from .validators import ensure_name_available, ensure_system_role, get_role_or_raise

logger = logging.getLogger(__name__)


def update_role(
    session: Session,
    *,
    role_uuid: UUID | str,
    attributes: RoleAttributes,
    granted_role_uuids: Iterable[UUID | str] | None = None,
    updated_by: int | None = None,
) -> Role:
    """Apply ``attributes`` and, when given, reconcile the grant set.

    The attribute write and the edge changes commit together or not at all.
    ``granted_role_uuids=None`` leaves the grants untouched; an empty
    iterable revokes all of them.
    """

    if granted_role_uuids is not None:
        granted_role_uuids = list(granted_role_uuids)

    with unit_of_work(session):
        if granted_role_uuids is not None:
            RoleHierarchyRepository(session).lock_hierarchy()
        repository = RoleRepository(session)
        role = get_role_or_raise(repository, role_uuid)
        ensure_system_role(role)
        repository.lock([role.id])

        role.set_attributes(attributes)
        if attributes.name is not None:
            ensure_name_available(repository, role.name, exclude_role_id=role.id)
        role.updated_by = updated_by
        role.updated_at = now_in_app_timezone()
        role = repository.update(role)

        if granted_role_uuids is not None:
            apply_grant_set(session, role, granted_role_uuids)

    logger.info("Role %s with UUID %s was updated", role.name, role.uuid)
    return role


__all__ = ["update_role"]
