"""Use case for retrieving a single role with its direct grants."""

from uuid import UUID

from sqlalchemy.orm import Session

from roles_admin.domain.entities import RoleListing
from roles_admin.infrastructure.repositories import RoleRepository

from .validators import get_role_or_raise


def get_role(session: Session, role_uuid: UUID | str) -> RoleListing:
    """Return the requested role or raise ``NotFoundError`` if it does not exist."""

    repository = RoleRepository(session)
    role = get_role_or_raise(repository, role_uuid)
    granted = repository.granted_roles_of_many([role.id])
    return RoleListing(role=role, granted_roles=granted.get(role.id, []))


__all__ = ["get_role"]
