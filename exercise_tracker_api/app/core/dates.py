"""
Calendar date helpers.

Exercise dates are stored as ISO ``YYYY-MM-DD`` strings.  That form
sorts lexicographically in the same order as the dates themselves,
which is what the ``from``/``to`` filters of the log query rely on.
"""

from datetime import date, datetime, timezone
from typing import Optional

from .exceptions import ValidationError

_WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def today_utc() -> str:
    """Return the current UTC calendar day as ``YYYY-MM-DD``."""
    return datetime.now(timezone.utc).date().isoformat()


def parse_date(value: str) -> date:
    """Parse a date or ISO datetime string.

    Plain dates (``2024-03-01``) are taken as is.  Datetimes are
    accepted too; aware ones are converted to UTC before the day is
    taken.  Raises ``ValidationError`` for anything else.
    """
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        moment = datetime.fromisoformat(text)
    except ValueError as exc:
        raise ValidationError("Invalid date format. Use YYYY-MM-DD") from exc
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def normalize_date(value: Optional[str]) -> str:
    """Return the canonical stored form of ``value``, defaulting to today."""
    if value is None or not str(value).strip():
        return today_utc()
    return parse_date(str(value)).isoformat()


def display_date(stored: str) -> str:
    """Render a stored ``YYYY-MM-DD`` value as ``"Fri Jan 05 2024"``.

    Names come from fixed English tables instead of ``strftime`` so the
    output does not depend on the process locale.
    """
    day = date.fromisoformat(stored)
    return "%s %s %02d %04d" % (
        _WEEKDAYS[day.weekday()],
        _MONTHS[day.month - 1],
        day.day,
        day.year,
    )
