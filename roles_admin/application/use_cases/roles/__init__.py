"""Use cases for managing system roles and their grants."""

from .create_role import create_role
from .get_role import get_role
from .grant_role import grant_role
from .list_transitive_roles import list_inherited_roles, list_inheriting_roles
from .reconcile_role_grants import reconcile_role_grants
from .revoke_role import revoke_role
from .search_roles import SEARCH_CRITERIA, search_roles
from .update_role import update_role

__all__ = [
    "SEARCH_CRITERIA",
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
