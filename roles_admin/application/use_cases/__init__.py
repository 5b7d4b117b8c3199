"""Aggregate application use cases."""

from .roles import (
    create_role,
    get_role,
    grant_role,
    list_inherited_roles,
    list_inheriting_roles,
    reconcile_role_grants,
    revoke_role,
    search_roles,
    update_role,
)

__all__ = [
    "create_role",
    "get_role",
    "grant_role",
    "list_inherited_roles",
    "list_inheriting_roles",
    "reconcile_role_grants",
    "revoke_role",
    "search_roles",
    "update_role",
]
