"""Wall-clock time helpers.

Appointment times are salon wall-clock values. A stored ``2026-01-30T12:05:00Z``
means 12:05 on the salon's clock, so every helper here reads the literal
``YYYY-MM-DDTHH:MM`` text and drops any zone suffix without converting.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Optional, Union

WallClockInput = Union[str, datetime, date]

_DATE_FORMAT = "%Y-%m-%d"
_MINUTE_FORMAT = "%Y-%m-%dT%H:%M"
_SECOND_FORMAT = "%Y-%m-%dT%H:%M:%S"


def wall_clock(value: WallClockInput) -> datetime:
    """Return a naive datetime holding the literal wall-clock value."""

    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time())
    if not isinstance(value, str):
        raise TypeError(f"Unsupported wall-clock value: {value!r}")

    text = value.strip().replace(" ", "T", 1)
    if len(text) == 10:
        return datetime.strptime(text, _DATE_FORMAT)
    if len(text) >= 19 and text[16] == ":":
        return datetime.strptime(text[:19], _SECOND_FORMAT)
    if len(text) >= 16:
        return datetime.strptime(text[:16], _MINUTE_FORMAT)
    raise ValueError(f"Invalid wall-clock timestamp: {value!r}")


def try_wall_clock(value: Optional[WallClockInput]) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return wall_clock(value)
    except (TypeError, ValueError):
        return None


def calendar_day(value: WallClockInput) -> date:
    """Reduce a stored date (``2026-01-30`` or ``2026-01-30T00:00:00Z``) to its day."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.strptime(value.strip()[:10], _DATE_FORMAT).date()


def clock_minutes(value: Union[str, datetime]) -> int:
    """Minutes since midnight read from the fixed-width ``HH`` and ``mm`` positions."""

    if isinstance(value, datetime):
        return value.hour * 60 + value.minute
    hours = int(value[11:13])
    minutes = int(value[14:16])
    return hours * 60 + minutes


def parse_hhmm(value: Optional[str]) -> Optional[time]:
    if not value:
        return None
    try:
        return datetime.strptime(value.strip()[:5], "%H:%M").time()
    except ValueError:
        return None


def format_hhmm(value: Union[time, datetime]) -> str:
    return value.strftime("%H:%M")


def combine(day: date, hhmm: Union[str, time]) -> datetime:
    """Build the naive wall-clock datetime for ``day`` at ``hhmm``."""

    moment = parse_hhmm(hhmm) if isinstance(hhmm, str) else hhmm
    if moment is None:
        raise ValueError(f"Invalid time of day: {hhmm!r}")
    return datetime.combine(day, moment)


def minutes_of(moment: time) -> int:
    return moment.hour * 60 + moment.minute


def add_minutes(moment: datetime, minutes: int) -> datetime:
    return moment + timedelta(minutes=minutes)


def format_wall_clock(moment: datetime) -> str:
    """Serialise without any zone designator, as the booking API expects."""

    return moment.replace(tzinfo=None).strftime(_SECOND_FORMAT)
