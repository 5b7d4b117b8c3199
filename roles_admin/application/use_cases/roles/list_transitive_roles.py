"""Use cases for walking the grant hierarchy of a role."""

from __future__ import annotations

import logging
from uuid import UUID

from sqlalchemy.orm import Session

from roles_admin.domain.entities import Role
from roles_admin.infrastructure.repositories import RoleHierarchyRepository, RoleRepository

from .validators import get_role_or_raise

logger = logging.getLogger(__name__)


def list_inherited_roles(session: Session, role_uuid: UUID | str) -> list[Role]:
    """Return every role ``role_uuid`` inherits, directly or indirectly, by name."""

    repository = RoleRepository(session)
    role = get_role_or_raise(repository, role_uuid)
    role_ids = RoleHierarchyRepository(session).transitive_grants_of(role.id)
    logger.debug("Role %s inherits %d roles", role.name, len(role_ids))
    return _sorted_roles(repository, role_ids)


def list_inheriting_roles(session: Session, role_uuid: UUID | str) -> list[Role]:
    """Return every role that inherits ``role_uuid``, directly or indirectly, by name."""

    repository = RoleRepository(session)
    role = get_role_or_raise(repository, role_uuid)
    role_ids = RoleHierarchyRepository(session).transitive_grantees_of(role.id)
    logger.debug("Role %s is inherited by %d roles", role.name, len(role_ids))
    return _sorted_roles(repository, role_ids)


def _sorted_roles(repository: RoleRepository, role_ids: set[int]) -> list[Role]:
    roles = repository.get_many(role_ids).values()
    return sorted(roles, key=lambda role: (role.name, role.id))


__all__ = ["list_inherited_roles", "list_inheriting_roles"]
