"""Helper utilities shared across API route handlers."""

from __future__ import annotations

import base64
import binascii
import json
import logging
from typing import Any
from urllib.parse import unquote

from fastapi import HTTPException, status

from roles_admin.domain.exceptions import (
    ConflictError,
    CycleError,
    DuplicateEdgeError,
    InvalidFilterError,
    NotFoundError,
    RolesError,
    TransientStoreError,
    ValidationError,
)

logger = logging.getLogger(__name__)

NO_VALUE = "none"

# Checked in order, so subclasses come before their bases.
_ERROR_STATUS_CODES: tuple[tuple[type[RolesError], int], ...] = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidFilterError, status.HTTP_400_BAD_REQUEST),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (CycleError, status.HTTP_409_CONFLICT),
    (DuplicateEdgeError, status.HTTP_409_CONFLICT),
    (ConflictError, status.HTTP_409_CONFLICT),
    (TransientStoreError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def status_code_for(exc: RolesError) -> int:
    """Return the HTTP status matching the kind of ``exc``."""

    for error_type, status_code in _ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def to_http_exception(exc: RolesError) -> HTTPException:
    """Translate a role administration error into an ``HTTPException``."""

    status_code = status_code_for(exc)
    if status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.exception("Unexpected role administration failure: %s", exc.message)
    headers = {"Retry-After": "1"} if isinstance(exc, TransientStoreError) else None
    return HTTPException(status_code=status_code, detail=exc.message, headers=headers)


def decode_search_values(search_values: str | None) -> dict[str, Any]:
    """Decode the URL-encoded base64 JSON search criteria of the listing route.

    ``none`` or an empty value means no criteria.
    """

    raw = unquote(search_values or "").strip()
    if not raw or raw.lower() == NO_VALUE:
        return {}
    try:
        padded = raw + "=" * (-len(raw) % 4)
        decoded = base64.b64decode(padded, altchars=b"-_", validate=False)
        criteria = json.loads(decoded.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise InvalidFilterError(
            "The search values must be URL-encoded base64 of a JSON object"
        ) from exc
    if criteria is None:
        return {}
    if not isinstance(criteria, dict):
        raise InvalidFilterError("The search values must decode to a JSON object")
    return criteria


__all__ = [
    "NO_VALUE",
    "decode_search_values",
    "status_code_for",
    "to_http_exception",
]
