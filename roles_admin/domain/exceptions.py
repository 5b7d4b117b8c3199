"""Error kinds raised by the role administration core."""


class RolesError(Exception):
    """Base exception for role administration failures."""

    def __init__(self, message: str = "Role operation failed") -> None:
        self.message = message
        super().__init__(self.message)


class NotFoundError(RolesError):
    """Raised when a role id, uuid or name does not resolve."""


class ValidationError(RolesError):
    """Raised when input is rejected: blank or duplicate name, bad sort field."""


class InvalidFilterError(ValidationError):
    """Raised when search criteria contain an unsupported key or cannot be decoded."""


class CycleError(RolesError):
    """Raised when a grant would make a role inherit itself."""


class DuplicateEdgeError(RolesError):
    """Raised by the hierarchy store when the grant edge already exists."""


class TransientStoreError(RolesError):
    """Raised on lock timeouts and deadlocks. The whole operation may be retried."""


class ConflictError(RolesError):
    """Raised when a concurrent modification is detected at flush or commit."""


__all__ = [
    "RolesError",
    "NotFoundError",
    "ValidationError",
    "InvalidFilterError",
    "CycleError",
    "DuplicateEdgeError",
    "TransientStoreError",
    "ConflictError",
]
