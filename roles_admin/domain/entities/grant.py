"""Domain records describing grant edge changes."""

from __future__ import annotations

from dataclasses import dataclass

from .role import Role


@dataclass(frozen=True)
class GrantChange:
    """Outcome of a grant or revoke between ``role`` and ``granted_role``.

    ``changed`` is ``False`` when the call was an idempotent no-op.
    """

    role: Role
    granted_role: Role
    changed: bool


__all__ = ["GrantChange"]
