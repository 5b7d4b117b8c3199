"""Audit timestamps in the configured application timezone."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from roles_admin.config import get_settings

_UTC_OFFSET = re.compile(r"^(?:UTC|GMT)([+-])(\d{1,2})(?::?(\d{2}))?$", re.IGNORECASE)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the zone named by ``APP_TIMEZONE``: an IANA name or ``UTC±HH:MM``.

    Unrecognised values fall back to UTC.
    """

    name = (get_settings().app_timezone or "").strip()
    if not name:
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        pass
    match = _UTC_OFFSET.match(name)
    if match is None:
        return timezone.utc
    sign, hours, minutes = match.groups()
    offset = timedelta(hours=int(hours), minutes=int(minutes or 0))
    return timezone(-offset if sign == "-" else offset)


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def localize(value: datetime | None, *, naive: bool = False) -> datetime | None:
    """Express ``value`` in the app timezone.

    Naive input is read as app-local wall-clock time. With ``naive=True`` the
    zone is dropped again, which is how the audit columns store it.
    """

    if value is None:
        return None
    zone = get_app_timezone()
    local = value.replace(tzinfo=zone) if value.tzinfo is None else value.astimezone(zone)
    return local.replace(tzinfo=None) if naive else local


__all__ = ["get_app_timezone", "localize", "now_in_app_timezone"]
