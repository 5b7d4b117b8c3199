from .envelope import Envelope
from .role import (
    EDITABLE_RECORD_PROPERTIES,
    LISTING_COLUMNS,
    RECORD_PROPERTIES,
    GrantChangeRead,
    InheritedRoleRead,
    RoleCreate,
    RoleListingRead,
    RoleRecordRead,
    RoleSummaryRead,
    RoleUpdate,
    RoleView,
)

__all__ = [
    "EDITABLE_RECORD_PROPERTIES",
    "LISTING_COLUMNS",
    "RECORD_PROPERTIES",
    "Envelope",
    "GrantChangeRead",
    "InheritedRoleRead",
    "RoleCreate",
    "RoleListingRead",
    "RoleRecordRead",
    "RoleSummaryRead",
    "RoleUpdate",
    "RoleView",
]
