"""Repository implementations for infrastructure layer."""

from .object_meta_repository import ObjectMetaRepository
from .role_hierarchy_repository import RoleHierarchyRepository
from .role_repository import ROLE_CLASS, SORTABLE_COLUMNS, RoleQuery, RoleRepository

__all__ = [
    "ROLE_CLASS",
    "SORTABLE_COLUMNS",
    "ObjectMetaRepository",
    "RoleHierarchyRepository",
    "RoleQuery",
    "RoleRepository",
]
