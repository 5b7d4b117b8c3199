"""Role schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from roles_admin.domain.entities import (
    ROLE_DESCRIPTION_MAX_LENGTH,
    ROLE_NAME_MAX_LENGTH,
    Role,
    RoleListing,
)

RECORD_PROPERTIES = [
    "role_id",
    "role_name",
    "role_description",
    "meta_object_uuid",
    "granted_roles_uuids",
]

# Must be a subset of RECORD_PROPERTIES.
EDITABLE_RECORD_PROPERTIES = [
    "role_name",
    "role_description",
    "granted_roles_uuids",
]

LISTING_COLUMNS = [
    "role_id",
    "role_name",
    "role_is_user",
    "meta_object_uuid",
    "granted_roles_names",
]


class RoleCreate(BaseModel):
    role_name: str = Field(..., min_length=1, max_length=ROLE_NAME_MAX_LENGTH)
    role_description: str | None = Field(default=None, max_length=ROLE_DESCRIPTION_MAX_LENGTH)
    granted_roles_uuids: list[UUID] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class RoleUpdate(BaseModel):
    """Fields left out of the body keep their current value.

    ``granted_roles_uuids`` replaces the whole set of directly granted roles
    when present; an empty list revokes all of them.
    """

    role_name: str | None = Field(default=None, min_length=1, max_length=ROLE_NAME_MAX_LENGTH)
    role_description: str | None = Field(default=None, max_length=ROLE_DESCRIPTION_MAX_LENGTH)
    granted_roles_uuids: list[UUID] | None = None

    model_config = ConfigDict(extra="forbid")


class RoleSummaryRead(BaseModel):
    role_id: int
    role_name: str
    meta_object_uuid: UUID

    @classmethod
    def from_role(cls, role: Role) -> RoleSummaryRead:
        return cls(role_id=role.id, role_name=role.name, meta_object_uuid=role.uuid)


class InheritedRoleRead(BaseModel):
    role_name: str
    meta_object_uuid: UUID


class RoleRecordRead(BaseModel):
    role_id: int
    role_name: str
    role_description: str | None
    role_is_user: bool
    meta_object_uuid: UUID
    meta_object_create_time: datetime | None
    meta_object_last_update_time: datetime | None
    meta_object_create_role_id: int | None
    meta_object_last_update_role_id: int | None
    granted_roles_ids: list[int]
    granted_roles_names: list[str]
    granted_roles_uuids: list[UUID]

    @classmethod
    def from_listing(cls, listing: RoleListing) -> RoleRecordRead:
        role = listing.role
        return cls(
            role_id=role.id,
            role_name=role.name,
            role_description=role.description,
            role_is_user=role.is_user_role,
            meta_object_uuid=role.uuid,
            meta_object_create_time=role.created_at,
            meta_object_last_update_time=role.updated_at,
            meta_object_create_role_id=role.created_by,
            meta_object_last_update_role_id=role.updated_by,
            granted_roles_ids=listing.granted_roles_ids,
            granted_roles_names=listing.granted_roles_names,
            granted_roles_uuids=listing.granted_roles_uuids,
        )


class RoleView(BaseModel):
    record: RoleRecordRead
    record_properties: list[str] = Field(default_factory=lambda: list(RECORD_PROPERTIES))
    editable_record_properties: list[str] = Field(
        default_factory=lambda: list(EDITABLE_RECORD_PROPERTIES)
    )
    # Direct grants only.
    inherited_roles: list[InheritedRoleRead]

    @classmethod
    def from_listing(cls, listing: RoleListing) -> RoleView:
        return cls(
            record=RoleRecordRead.from_listing(listing),
            inherited_roles=[
                InheritedRoleRead(role_name=granted.name, meta_object_uuid=granted.uuid)
                for granted in listing.granted_roles
            ],
        )


class RoleListingRead(BaseModel):
    listing_columns: list[str] = Field(default_factory=lambda: list(LISTING_COLUMNS))
    record_properties: list[str] = Field(default_factory=lambda: list(RECORD_PROPERTIES))
    editable_record_properties: list[str] = Field(
        default_factory=lambda: list(EDITABLE_RECORD_PROPERTIES)
    )
    data: list[RoleRecordRead]
    totalItems: int
    numPages: int


class GrantChangeRead(BaseModel):
    role: RoleSummaryRead
    granted_role: RoleSummaryRead
    changed: bool
