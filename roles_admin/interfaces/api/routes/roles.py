"""Routes for administering system roles and the grants between them."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.orm import Session

from roles_admin.application.use_cases.roles import (
    create_role as create_role_uc,
    get_role as get_role_uc,
    grant_role as grant_role_uc,
    list_inherited_roles as list_inherited_roles_uc,
    list_inheriting_roles as list_inheriting_roles_uc,
    revoke_role as revoke_role_uc,
    search_roles as search_roles_uc,
    update_role as update_role_uc,
)
from roles_admin.domain.entities import GrantChange, RoleAttributes
from roles_admin.domain.exceptions import RolesError
from roles_admin.infrastructure.database import get_db
from roles_admin.interfaces.api.dependencies import get_acting_role_id
from roles_admin.interfaces.api.routes_helpers import (
    NO_VALUE,
    decode_search_values,
    to_http_exception,
)
from roles_admin.interfaces.api.schemas import (
    Envelope,
    GrantChangeRead,
    RoleCreate,
    RoleListingRead,
    RoleRecordRead,
    RoleSummaryRead,
    RoleUpdate,
    RoleView,
)

router = APIRouter(prefix="/admin/roles", tags=["roles"])
logger = logging.getLogger(__name__)

DEFAULT_SORT_BY = "role_name"


def _grant_change_read(change: GrantChange) -> GrantChangeRead:
    return GrantChangeRead(
        role=RoleSummaryRead.from_role(change.role),
        granted_role=RoleSummaryRead.from_role(change.granted_role),
        changed=change.changed,
    )


@router.post(
    "/role",
    response_model=Envelope[RoleView],
    status_code=status.HTTP_201_CREATED,
)
def create_role(
    role_in: RoleCreate,
    db: Session = Depends(get_db),
    acting_role_id: int | None = Depends(get_acting_role_id),
):
    """Create a system role and grant it the listed roles."""

    try:
        role = create_role_uc(
            db,
            name=role_in.role_name,
            description=role_in.role_description,
            granted_role_uuids=role_in.granted_roles_uuids,
            created_by=acting_role_id,
        )
        listing = get_role_uc(db, role.uuid)
    except RolesError as exc:
        raise to_http_exception(exc) from exc

    return Envelope(
        data=RoleView.from_listing(listing),
        message=f"The role {role.name} was created with UUID {role.uuid}.",
    )


@router.get("/role/{uuid}", response_model=Envelope[RoleView])
def read_role(uuid: str, db: Session = Depends(get_db)):
    """Return the role, the properties shown by the UI and its direct grants."""

    try:
        listing = get_role_uc(db, uuid)
    except RolesError as exc:
        raise to_http_exception(exc) from exc
    return Envelope(data=RoleView.from_listing(listing))


@router.put("/role/{uuid}", response_model=Envelope[RoleView])
def update_role(
    uuid: str,
    role_in: RoleUpdate,
    db: Session = Depends(get_db),
    acting_role_id: int | None = Depends(get_acting_role_id),
):
    """Update the role attributes and replace its grants in one transaction."""

    update_data = role_in.model_dump(exclude_unset=True)
    try:
        role = update_role_uc(
            db,
            role_uuid=uuid,
            attributes=RoleAttributes(
                name=update_data.get("role_name"),
                description=update_data.get("role_description"),
            ),
            granted_role_uuids=update_data.get("granted_roles_uuids"),
            updated_by=acting_role_id,
        )
        listing = get_role_uc(db, role.uuid)
    except RolesError as exc:
        raise to_http_exception(exc) from exc

    return Envelope(
        data=RoleView.from_listing(listing),
        message=f"The role {role.name} with UUID {role.uuid} was updated.",
    )


@router.delete("/role/{uuid}", status_code=status.HTTP_501_NOT_IMPLEMENTED)
def delete_role(uuid: str):
    """Role deletion is not available."""

    raise HTTPException(
        status_code=status.HTTP_501_NOT_IMPLEMENTED,
        detail="Deleting roles is not implemented",
    )


@router.post("/role/{uuid}/role/{role_uuid}", response_model=Envelope[GrantChangeRead])
def grant_role(
    uuid: str,
    role_uuid: str,
    db: Session = Depends(get_db),
):
    """Grant the role ``role_uuid`` to the role ``uuid``."""

    try:
        change = grant_role_uc(db, role_uuid=uuid, granted_role_uuid=role_uuid)
    except RolesError as exc:
        raise to_http_exception(exc) from exc

    if change.changed:
        message = f"The role {change.granted_role.name} was granted to role {change.role.name}."
    else:
        message = f"The role {change.role.name} already inherits role {change.granted_role.name}."
    return Envelope(data=_grant_change_read(change), message=message)


@router.delete("/role/{uuid}/role/{role_uuid}", response_model=Envelope[GrantChangeRead])
def revoke_role(
    uuid: str,
    role_uuid: str,
    db: Session = Depends(get_db),
):
    """Revoke the role ``role_uuid`` from the role ``uuid``."""

    try:
        change = revoke_role_uc(db, role_uuid=uuid, revoked_role_uuid=role_uuid)
    except RolesError as exc:
        raise to_http_exception(exc) from exc

    if change.changed:
        message = f"The role {change.granted_role.name} was revoked from role {change.role.name}."
    else:
        message = f"The role {change.role.name} was not granted role {change.granted_role.name}."
    return Envelope(data=_grant_change_read(change), message=message)


@router.get("/role/{uuid}/inherited-roles", response_model=Envelope[list[RoleSummaryRead]])
def read_inherited_roles(uuid: str, db: Session = Depends(get_db)):
    """Return every role the role inherits, directly or through other roles."""

    try:
        roles = list_inherited_roles_uc(db, uuid)
    except RolesError as exc:
        raise to_http_exception(exc) from exc
    return Envelope(data=[RoleSummaryRead.from_role(role) for role in roles])


@router.get("/role/{uuid}/inheriting-roles", response_model=Envelope[list[RoleSummaryRead]])
def read_inheriting_roles(uuid: str, db: Session = Depends(get_db)):
    """Return every role that inherits the role, directly or through other roles."""

    try:
        roles = list_inheriting_roles_uc(db, uuid)
    except RolesError as exc:
        raise to_http_exception(exc) from exc
    return Envelope(data=[RoleSummaryRead.from_role(role) for role in roles])


@router.get(
    "/{page:int}/{limit:int}/{listing_path:path}",
    response_model=Envelope[RoleListingRead],
)
def list_roles(
    page: int = Path(..., ge=1),
    limit: int = Path(..., ge=0),
    listing_path: str = Path(..., description="{search_values}/{sort_by}/{sort}"),
    db: Session = Depends(get_db),
):
    """Return one page of system roles matching the encoded search values."""

    # Standard base64 search values may contain "/".
    parts = listing_path.rsplit("/", 2)
    if len(parts) != 3:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    search_values, sort_by, sort = parts

    if sort_by.lower() == NO_VALUE:
        sort_by = DEFAULT_SORT_BY
    if sort.lower() == NO_VALUE:
        sort = "asc"
    offset = (page - 1) * limit

    try:
        criteria = decode_search_values(search_values)
        result = search_roles_uc(
            db,
            criteria,
            offset=offset,
            limit=limit,
            order_by=sort_by,
            order=sort,
        )
    except RolesError as exc:
        raise to_http_exception(exc) from exc

    return Envelope(
        data=RoleListingRead(
            data=[RoleRecordRead.from_listing(item) for item in result.items],
            totalItems=result.total,
            numPages=result.num_pages,
        )
    )
