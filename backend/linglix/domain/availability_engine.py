"""
Availability engine for tutor bookings.

Pure, stateless functions that answer three questions from a tutor's
recurring weekly windows and existing bookings:

- Can this exact booking be made? (``check_time_slot_availability``)
- Which slots exist on a given date? (``get_available_time_slots``)
- Which dates in a range have at least one free slot? (``get_available_dates``)

All three share ``find_conflicting_booking`` / ``intervals_overlap`` so the
booking form, the calendar slot list and the date picker never disagree.

All arithmetic is in UTC minutes since midnight. A window's ``timezone``
field is informational and is not applied here. Inputs are assumed to be
shape-validated (``HH:MM`` strings, ``end_time`` after ``start_time``);
the engine does not re-validate them.

"No availability" is a normal result (``available=False`` or an empty
list), never an exception. The verdicts are advisory: callers must
re-check under a transaction when writing a booking.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from ..core.enums import INACTIVE_BOOKING_STATUSES
from ..utils.time_utils import (
    ensure_utc,
    iter_days,
    minutes_since_midnight,
    minutes_to_hhmm,
    parse_hhmm,
    to_utc_date,
    utc_day_start,
)

DEFAULT_SLOT_INTERVAL_MINUTES = 30

REASON_NOT_AVAILABLE_ON_DAY = "Tutor is not available on this day"
REASON_BOOKING_CONFLICT = "Time slot conflicts with an existing booking"
REASON_SLOT_BOOKED = "Time slot is already booked"

_INACTIVE_STATUS_VALUES = frozenset(status.value for status in INACTIVE_BOOKING_STATUSES)


class AvailabilityWindowLike(Protocol):
    tutor_id: str
    day_of_week: int
    start_time: str
    end_time: str
    is_active: bool


class BookingLike(Protocol):
    tutor_id: str
    scheduled_at: datetime
    duration: int
    status: Any


@dataclass(frozen=True)
class TimeSlot:
    start: datetime
    end: datetime
    available: bool
    reason: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "available": self.available,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class AvailabilityCheckResult:
    available: bool
    reason: Optional[str] = None
    conflicting_booking: Optional[Any] = None

    def to_payload(self) -> Dict[str, Any]:
        booking = self.conflicting_booking
        return {
            "available": self.available,
            "reason": self.reason,
            "conflicting_booking_id": getattr(booking, "id", None) if booking is not None else None,
        }


def day_of_week(value: date | datetime) -> int:
    """Weekday of the UTC calendar day, 0 = Sunday .. 6 = Saturday."""
    return (to_utc_date(value).weekday() + 1) % 7


def _status_value(status: Any) -> str:
    if isinstance(status, Enum):
        return str(status.value)
    return str(status)


def is_active_booking(booking: BookingLike) -> bool:
    """Active bookings occupy their interval; cancelled and refunded ones do not."""
    return _status_value(booking.status) not in _INACTIVE_STATUS_VALUES


def booking_interval(booking: BookingLike) -> tuple[datetime, datetime]:
    """Half-open ``[scheduled_at, scheduled_at + duration)`` in UTC."""
    start = ensure_utc(booking.scheduled_at)
    return start, start + timedelta(minutes=booking.duration)


def intervals_overlap(
    new_start: datetime, new_end: datetime, old_start: datetime, old_end: datetime
) -> bool:
    """
    Half-open overlap test between a proposed and an existing interval.

    Intervals that only touch at a boundary do not overlap.
    """
    return (
        (new_start >= old_start and new_start < old_end)
        or (new_end > old_start and new_end <= old_end)
        or (new_start <= old_start and new_end >= old_end)
    )


def find_conflicting_booking(
    start: datetime,
    end: datetime,
    bookings: Iterable[BookingLike],
    tutor_id: str,
    *,
    exclude_booking_id: Optional[str] = None,
) -> Optional[BookingLike]:
    """Return the first active booking of ``tutor_id`` overlapping ``[start, end)``."""
    start = ensure_utc(start)
    end = ensure_utc(end)
    for booking in bookings:
        if booking.tutor_id != tutor_id or not is_active_booking(booking):
            continue
        if exclude_booking_id is not None and getattr(booking, "id", None) == exclude_booking_id:
            continue
        existing_start, existing_end = booking_interval(booking)
        if intervals_overlap(start, end, existing_start, existing_end):
            return booking
    return None


def windows_for_day(
    windows: Iterable[AvailabilityWindowLike], tutor_id: str, weekday: int
) -> List[AvailabilityWindowLike]:
    """Active windows of ``tutor_id`` on ``weekday``, ordered by start time."""
    matching = [
        window
        for window in windows
        if window.is_active
        and window.day_of_week == weekday
        and getattr(window, "tutor_id", tutor_id) == tutor_id
    ]
    return sorted(matching, key=lambda window: parse_hhmm(window.start_time))


def _window_bounds(window: AvailabilityWindowLike) -> tuple[int, int]:
    return parse_hhmm(window.start_time), parse_hhmm(window.end_time)


def _outside_window_reason(day_windows: Sequence[AvailabilityWindowLike]) -> str:
    if len(day_windows) == 1:
        window = day_windows[0]
        return f"Time slot must be between {window.start_time} and {window.end_time} UTC"
    ranges = ", ".join(f"{w.start_time}-{w.end_time}" for w in day_windows)
    return f"Time slot must fall within the tutor's availability ({ranges} UTC)"


def check_time_slot_availability(
    scheduled_at: datetime,
    duration: int,
    recurring_windows: Iterable[AvailabilityWindowLike],
    existing_bookings: Iterable[BookingLike],
    tutor_id: str,
    *,
    exclude_booking_id: Optional[str] = None,
) -> AvailabilityCheckResult:
    """
    Validate a single proposed booking.

    The booking must sit entirely inside one active window of its UTC weekday
    and must not overlap any active booking of the tutor. The first
    conflicting booking found is reported.

    Args:
        scheduled_at: Proposed start (naive values are taken as UTC)
        duration: Length in minutes
        recurring_windows: The tutor's weekly windows, inactive ones included
        existing_bookings: The tutor's bookings in any status
        tutor_id: Owner of the windows and bookings
        exclude_booking_id: Booking to ignore (the one being rescheduled)

    Returns:
        AvailabilityCheckResult
    """
    booking_start = ensure_utc(scheduled_at)
    booking_end = booking_start + timedelta(minutes=duration)

    day_windows = windows_for_day(recurring_windows, tutor_id, day_of_week(booking_start))
    if not day_windows:
        return AvailabilityCheckResult(available=False, reason=REASON_NOT_AVAILABLE_ON_DAY)

    # No wrap past midnight: a booking running into the next day is never contained.
    start_minutes = minutes_since_midnight(booking_start)
    end_minutes = start_minutes + duration
    contained = False
    for window in day_windows:
        window_start, window_end = _window_bounds(window)
        if start_minutes >= window_start and end_minutes <= window_end:
            contained = True
            break
    if not contained:
        return AvailabilityCheckResult(available=False, reason=_outside_window_reason(day_windows))

    conflict = find_conflicting_booking(
        booking_start,
        booking_end,
        existing_bookings,
        tutor_id,
        exclude_booking_id=exclude_booking_id,
    )
    if conflict is not None:
        return AvailabilityCheckResult(
            available=False,
            reason=REASON_BOOKING_CONFLICT,
            conflicting_booking=conflict,
        )

    return AvailabilityCheckResult(available=True)


def get_available_time_slots(
    day: date | datetime,
    duration: int,
    recurring_windows: Iterable[AvailabilityWindowLike],
    existing_bookings: Iterable[BookingLike],
    tutor_id: str,
    *,
    interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
) -> List[TimeSlot]:
    """
    Enumerate every candidate slot of ``duration`` minutes on one UTC date.

    Candidates start at each window's start and advance by ``interval_minutes``
    while the slot still fits inside the window. Booked candidates are
    returned flagged ``available=False`` rather than dropped.
    """
    if interval_minutes <= 0:
        raise ValueError("interval_minutes must be positive")

    day_windows = windows_for_day(recurring_windows, tutor_id, day_of_week(day))
    if not day_windows:
        return []

    day_start = utc_day_start(day)
    active_bookings = [
        booking
        for booking in existing_bookings
        if booking.tutor_id == tutor_id and is_active_booking(booking)
    ]

    slots: List[TimeSlot] = []
    for window in day_windows:
        window_start, window_end = _window_bounds(window)
        current = window_start
        while current + duration <= window_end:
            slot_start = day_start + timedelta(minutes=current)
            slot_end = slot_start + timedelta(minutes=duration)
            conflict = find_conflicting_booking(slot_start, slot_end, active_bookings, tutor_id)
            slots.append(
                TimeSlot(
                    start=slot_start,
                    end=slot_end,
                    available=conflict is None,
                    reason=REASON_SLOT_BOOKED if conflict is not None else None,
                )
            )
            current += interval_minutes
    return slots


def get_available_dates(
    start_date: date | datetime,
    end_date: date | datetime,
    recurring_windows: Iterable[AvailabilityWindowLike],
    existing_bookings: Iterable[BookingLike],
    tutor_id: str,
    duration: int,
    *,
    interval_minutes: int = DEFAULT_SLOT_INTERVAL_MINUTES,
) -> List[date]:
    """UTC dates in ``[start_date, end_date]`` with at least one available slot."""
    windows = list(recurring_windows)
    bookings = [
        booking
        for booking in existing_bookings
        if booking.tutor_id == tutor_id and is_active_booking(booking)
    ]

    available_dates: List[date] = []
    for day in iter_days(to_utc_date(start_date), to_utc_date(end_date)):
        slots = get_available_time_slots(
            day, duration, windows, bookings, tutor_id, interval_minutes=interval_minutes
        )
        if any(slot.available for slot in slots):
            available_dates.append(day)
    return available_dates


def describe_window(window: AvailabilityWindowLike) -> str:
    """``HH:MM-HH:MM`` label, normalized through minutes."""
    start, end = _window_bounds(window)
    return f"{minutes_to_hhmm(start)}-{minutes_to_hhmm(end)}"
