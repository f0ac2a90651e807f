from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
import re

MINUTES_PER_DAY = 24 * 60

# HH:MM, 24-hour clock. Shape validation happens at the request boundary.
HHMM_PATTERN = r"^([0-1][0-9]|2[0-3]):[0-5][0-9]$"
_HHMM_RE = re.compile(HHMM_PATTERN)


def is_valid_hhmm(value: str) -> bool:
    return bool(_HHMM_RE.match(value or ""))


def parse_hhmm(value: str) -> int:
    """
    Convert an ``HH:MM`` string to minutes since midnight.

    No shape validation: callers are expected to pass strings that already
    matched ``HHMM_PATTERN``.
    """
    hours, minutes = value.split(":")[:2]
    return int(hours) * 60 + int(minutes)


def minutes_to_hhmm(minutes: int) -> str:
    """Convert minutes since midnight to HH:MM, the inverse of ``parse_hhmm``."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"minutes out of range: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def time_to_minutes(t: time) -> int:
    return t.hour * 60 + t.minute


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def minutes_since_midnight(value: datetime) -> int:
    """Minutes since UTC midnight, ignoring seconds."""
    return time_to_minutes(ensure_utc(value).time())


def to_utc_date(value: date | datetime) -> date:
    """UTC calendar day of a date or datetime."""
    if isinstance(value, datetime):
        return ensure_utc(value).date()
    return value


def utc_day_start(value: date | datetime) -> datetime:
    """00:00 UTC of the calendar day containing ``value``."""
    day = to_utc_date(value)
    return datetime(day.year, day.month, day.day, tzinfo=timezone.utc)


def iter_days(start: date, end: date):
    """Yield each calendar day from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
