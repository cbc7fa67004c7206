"""
Conversion between instants and iCalendar compact timestamps.

Generation needs ``YYYYMMDDTHHMMSSZ`` (always UTC); detection turns such a
timestamp back into ``YYYY-MM-DDTHH:MM:SS[Z]``. Both directions are best
effort: a value that cannot be parsed is never an error.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timezone
from typing import Any

logger = logging.getLogger(__name__)

ICAL_DATETIME_FORMAT = "%Y%m%dT%H%M%SZ"

_ICAL_DATETIME_RE = re.compile(r'^(\d{4})(\d{2})(\d{2})T(\d{2})(\d{2})(\d{2})(Z?)$')


def utcnow() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def _to_utc(value: datetime) -> datetime:
    # Naive values carry no offset; they are taken to be UTC already.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_datetime(text: str) -> datetime:
    """Parse an ISO-like string, accepting a trailing ``Z`` for UTC."""
    text = text.strip()
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def format_ical_datetime(value: Any) -> str:
    """
    Format an instant as an iCalendar UTC timestamp.

    Args:
        value: An aware or naive ``datetime``, a ``date`` (midnight UTC), or
            an ISO 8601 string such as ``"2024-01-15T10:00:00Z"`` or
            ``"2024-07-01 14:00:00"``. Any other value gives ``""``.

    Returns:
        The timestamp in ``YYYYMMDDTHHMMSSZ`` form, or ``""`` when the value
        is missing or cannot be parsed.
    """
    try:
        if isinstance(value, datetime):
            moment = value
        elif isinstance(value, date):
            moment = datetime.combine(value, time.min)
        elif isinstance(value, str):
            moment = _parse_datetime(value)
        else:
            return ""
        return _to_utc(moment).strftime(ICAL_DATETIME_FORMAT)
    except (ValueError, TypeError, OverflowError) as exc:
        logger.warning("Error formatting iCal date %r: %s", value, exc)
        return ""


def format_date_from_ical(value: str) -> str:
    """
    Convert an iCalendar timestamp to ISO form.

    ``20240115T100000Z`` becomes ``2024-01-15T10:00:00Z``; the trailing ``Z``
    is kept only when present. Anything else (all-day dates, TZID-local
    values with odd spacing) is returned unchanged.
    """
    match = _ICAL_DATETIME_RE.match(value)
    if not match:
        return value
    year, month, day, hour, minute, second, suffix = match.groups()
    return f"{year}-{month}-{day}T{hour}:{minute}:{second}{suffix}"
