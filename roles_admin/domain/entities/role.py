"""Domain entity representing a role in the inheritance graph."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from roles_admin.domain.exceptions import ValidationError

ROLE_NAME_MAX_LENGTH = 255
ROLE_DESCRIPTION_MAX_LENGTH = 1000


@dataclass(frozen=True)
class RoleAttributes:
    """Editable role attributes. ``None`` leaves the current value untouched."""

    name: str | None = None
    description: str | None = None


@dataclass
class Role:
    """A named permission bundle.

    ``id`` and ``uuid`` are assigned once by the store and never change.
    ``is_user_role`` is decided when a user account is created and is not
    exposed for editing.
    """

    id: int | None
    uuid: UUID | None
    name: str
    description: str | None
    is_user_role: bool
    created_at: datetime | None
    updated_at: datetime | None
    created_by: int | None
    updated_by: int | None

    @classmethod
    def new(cls, attributes: RoleAttributes, *, created_by: int | None = None) -> Role:
        """Return an unsaved system role carrying ``attributes``."""

        if attributes.name is None:
            raise ValidationError("The role name is required")
        role = cls(
            id=None,
            uuid=None,
            name="",
            description=None,
            is_user_role=False,
            created_at=None,
            updated_at=None,
            created_by=created_by,
            updated_by=None,
        )
        role.set_attributes(attributes)
        return role

    def set_attributes(self, attributes: RoleAttributes) -> None:
        """Apply ``attributes`` after validating them."""

        if attributes.name is not None:
            self.name = normalize_role_name(attributes.name)
        if attributes.description is not None:
            description = attributes.description.strip()
            if len(description) > ROLE_DESCRIPTION_MAX_LENGTH:
                raise ValidationError(
                    f"The role description must not exceed {ROLE_DESCRIPTION_MAX_LENGTH} characters"
                )
            self.description = description or None

    @property
    def is_system_role(self) -> bool:
        return not self.is_user_role


def normalize_role_name(name: str) -> str:
    """Return ``name`` stripped, or raise ``ValidationError`` when unusable."""

    normalized = name.strip()
    if not normalized:
        raise ValidationError("The role name must not be empty")
    if len(normalized) > ROLE_NAME_MAX_LENGTH:
        raise ValidationError(
            f"The role name must not exceed {ROLE_NAME_MAX_LENGTH} characters"
        )
    return normalized


__all__ = [
    "ROLE_DESCRIPTION_MAX_LENGTH",
    "ROLE_NAME_MAX_LENGTH",
    "Role",
    "RoleAttributes",
    "normalize_role_name",
]
