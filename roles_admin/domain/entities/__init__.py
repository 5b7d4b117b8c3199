"""Domain entities exposed by the application."""

from .grant import GrantChange
from .role import (
    ROLE_DESCRIPTION_MAX_LENGTH,
    ROLE_NAME_MAX_LENGTH,
    Role,
    RoleAttributes,
    normalize_role_name,
)
from .role_listing import GrantedRole, RoleListing, RolePage

__all__ = [
    "ROLE_DESCRIPTION_MAX_LENGTH",
    "ROLE_NAME_MAX_LENGTH",
    "GrantChange",
    "GrantedRole",
    "Role",
    "RoleAttributes",
    "RoleListing",
    "RolePage",
    "normalize_role_name",
]
