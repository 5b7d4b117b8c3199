"""Use case for creating system roles."""

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
from .validators import ensure_name_available

logger = logging.getLogger(__name__)


def create_role(
    session: Session,
    *,
    name: str,
    description: str | None = None,
    granted_role_uuids: Iterable[UUID | str] = (),
    created_by: int | None = None,
) -> Role:
    """Create a system role and grant it ``granted_role_uuids`` in one transaction."""

    role = Role.new(RoleAttributes(name=name, description=description), created_by=created_by)
    role.created_at = now_in_app_timezone()
    granted_role_uuids = list(granted_role_uuids)

    with unit_of_work(session):
        if granted_role_uuids:
            RoleHierarchyRepository(session).lock_hierarchy()
        repository = RoleRepository(session)
        ensure_name_available(repository, role.name)
        role = repository.create(role)
        if granted_role_uuids:
            apply_grant_set(session, role, granted_role_uuids)

    logger.info("Role %s was created with UUID %s", role.name, role.uuid)
    return role


__all__ = ["create_role"]
