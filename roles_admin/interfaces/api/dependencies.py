"""FastAPI dependency utilities."""

from fastapi import Header, HTTPException, status

ACTING_ROLE_HEADER = "X-Acting-Role-Id"


def get_acting_role_id(
    acting_role_id: str | None = Header(default=None, alias=ACTING_ROLE_HEADER),
) -> int | None:
    """Return the id of the role performing the request, recorded in the audit fields.

    Authentication happens in front of this service, which forwards the
    caller's role id in the ``X-Acting-Role-Id`` header.
    """

    if acting_role_id is None or not acting_role_id.strip():
        return None
    try:
        value = int(acting_role_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The {ACTING_ROLE_HEADER} header must be a positive integer",
        ) from exc
    if value < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The {ACTING_ROLE_HEADER} header must be a positive integer",
        )
    return value


__all__ = ["ACTING_ROLE_HEADER", "get_acting_role_id"]
