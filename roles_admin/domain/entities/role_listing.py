"""Read models returned by role queries."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from .role import Role


@dataclass(frozen=True)
class GrantedRole:
    """Short reference to a role reached through a grant edge."""

    id: int
    uuid: UUID
    name: str


@dataclass
class RoleListing:
    """A role together with the roles it is directly granted."""

    role: Role
    granted_roles: list[GrantedRole] = field(default_factory=list)

    @property
    def granted_roles_ids(self) -> list[int]:
        return [granted.id for granted in self.granted_roles]

    @property
    def granted_roles_names(self) -> list[str]:
        return [granted.name for granted in self.granted_roles]

    @property
    def granted_roles_uuids(self) -> list[UUID]:
        return [granted.uuid for granted in self.granted_roles]


@dataclass
class RolePage:
    """One page of search results plus the count of all matches."""

    items: list[RoleListing]
    total: int
    offset: int
    limit: int

    @property
    def num_pages(self) -> int:
        if not self.limit:
            return 1
        return -(-self.total // self.limit)


__all__ = ["GrantedRole", "RoleListing", "RolePage"]
