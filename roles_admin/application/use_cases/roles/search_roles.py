"""Use case for searching system roles with pagination."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy.orm import Session

from roles_admin.config import get_settings
from roles_admin.domain.entities import Role, RoleListing, RolePage
from roles_admin.domain.exceptions import InvalidFilterError, NotFoundError, ValidationError
from roles_admin.infrastructure.repositories import (
    SORTABLE_COLUMNS,
    RoleHierarchyRepository,
    RoleQuery,
    RoleRepository,
)

logger = logging.getLogger(__name__)

SEARCH_CRITERIA = (
    "role_uuid",
    "meta_object_uuid",  # same as role_uuid
    "role_id",
    "role_name",
    "role_description",
    "inherits_role_uuid",  # the given role anywhere in the inheritance tree
    "inherits_role_name",
    "granted_role_uuid",  # the given role among the directly granted roles only
    "granted_role_name",
)

SORT_DIRECTIONS = ("asc", "desc")
DEFAULT_ORDER_BY = "role_name"


def search_roles(
    session: Session,
    criteria: Mapping[str, Any] | None = None,
    *,
    offset: int = 0,
    limit: int = 0,
    order_by: str = DEFAULT_ORDER_BY,
    order: str = "asc",
    case_sensitive: bool | None = None,
) -> RolePage:
    """Return system roles matching every criterion, one page at a time.

    ``limit=0`` returns all matches. ``RolePage.total`` counts matches after
    every filter, hierarchy filters included. Criteria with a ``None`` value
    are ignored.
    """

    criteria = _validated_criteria(criteria or {})
    direction = _validated_direction(order)
    if order_by not in SORTABLE_COLUMNS:
        raise ValidationError(
            f"Roles can not be sorted by {order_by}. "
            f"The sortable fields are {', '.join(SORTABLE_COLUMNS)}."
        )
    if offset < 0 or limit < 0:
        raise ValidationError("The offset and limit must not be negative")
    if case_sensitive is None:
        case_sensitive = get_settings().role_search_case_sensitive

    repository = RoleRepository(session)
    hierarchy = RoleHierarchyRepository(session)

    role_ids: frozenset[int] | None = None
    for key in ("inherits_role_uuid", "inherits_role_name"):
        if key in criteria:
            named = _resolve_named_role(repository, key, criteria[key])
            inheriting = frozenset(hierarchy.transitive_grantees_of(named.id) | {named.id})
            role_ids = inheriting if role_ids is None else role_ids & inheriting
    for key in ("granted_role_uuid", "granted_role_name"):
        if key in criteria:
            named = _resolve_named_role(repository, key, criteria[key])
            granting = frozenset(hierarchy.direct_grantees_of(named.id))
            role_ids = granting if role_ids is None else role_ids & granting

    uuid_contains = criteria.get("role_uuid", criteria.get("meta_object_uuid"))
    query = RoleQuery(
        role_id=_as_role_id(criteria["role_id"]) if "role_id" in criteria else None,
        uuid_contains=str(uuid_contains) if uuid_contains is not None else None,
        name_contains=_as_text(criteria.get("role_name")),
        description_contains=_as_text(criteria.get("role_description")),
        role_ids=role_ids,
        case_sensitive=case_sensitive,
        order_by=order_by,
        descending=direction == "desc",
        offset=offset,
        limit=limit,
    )
    roles, total = repository.search(query)
    logger.debug("Role search %s matched %d roles", criteria, total)

    granted = repository.granted_roles_of_many([role.id for role in roles])
    items = [
        RoleListing(role=role, granted_roles=granted.get(role.id, [])) for role in roles
    ]
    return RolePage(items=items, total=total, offset=offset, limit=limit)


def _validated_criteria(criteria: Mapping[str, Any]) -> dict[str, Any]:
    unsupported = [key for key in criteria if key not in SEARCH_CRITERIA]
    if unsupported:
        raise InvalidFilterError(
            f"The search criteria contain unsupported keys {', '.join(map(str, unsupported))}. "
            f"The supported keys are {', '.join(SEARCH_CRITERIA)}."
        )
    return {key: value for key, value in criteria.items() if value is not None}


def _validated_direction(order: str) -> str:
    direction = (order or "").strip().lower()
    if direction not in SORT_DIRECTIONS:
        raise ValidationError(f"The sort direction must be one of {', '.join(SORT_DIRECTIONS)}")
    return direction


def _resolve_named_role(repository: RoleRepository, key: str, value: Any) -> Role:
    if key.endswith("_uuid"):
        role = repository.get_by_uuid(str(value))
        label = "UUID"
    else:
        role = repository.get_by_name(str(value))
        label = "role_name"
    if role is None:
        raise NotFoundError(
            f'There is no role with {label} {value} as provided in "{key}" of the search criteria'
        )
    return role


def _as_role_id(value: Any) -> int:
    if isinstance(value, bool):
        raise InvalidFilterError("role_id must be an integer")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidFilterError("role_id must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidFilterError("role_id must be an integer") from exc


def _as_text(value: Any) -> str | None:
    return None if value is None else str(value)


__all__ = ["DEFAULT_ORDER_BY", "SEARCH_CRITERIA", "SORT_DIRECTIONS", "search_roles"]
