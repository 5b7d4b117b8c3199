"""ORM models used by the application infrastructure."""

from .object_meta import ObjectClassModel, ObjectMetaModel
from .role import RoleModel
from .role_hierarchy import HierarchyRevisionModel, RoleHierarchyModel

__all__ = [
    "HierarchyRevisionModel",
    "ObjectClassModel",
    "ObjectMetaModel",
    "RoleHierarchyModel",
    "RoleModel",
]
