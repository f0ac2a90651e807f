"""Booking business rules: pricing, advance-notice windows, cancellation and status lifecycle."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, FrozenSet, Optional

from ..core.enums import BookingStatus
from ..utils.time_utils import ensure_utc

VALID_DURATIONS = (30, 60, 90)

MIN_ADVANCE_BOOKING_HOURS = 24
MAX_ADVANCE_BOOKING_DAYS = 90
LATE_CANCELLATION_HOURS = 12
RESCHEDULE_CUTOFF_HOURS = 4

_CENT = Decimal("0.01")

_STATUS_TRANSITIONS: Dict[BookingStatus, FrozenSet[BookingStatus]] = {
    BookingStatus.PENDING: frozenset({BookingStatus.CONFIRMED, BookingStatus.CANCELLED}),
    BookingStatus.CONFIRMED: frozenset({BookingStatus.COMPLETED, BookingStatus.CANCELLED}),
    BookingStatus.COMPLETED: frozenset(),
    BookingStatus.CANCELLED: frozenset(),
    BookingStatus.REFUNDED: frozenset(),
}


@dataclass(frozen=True)
class RuleResult:
    valid: bool
    error: Optional[str] = None


RULE_OK = RuleResult(valid=True)


def _coerce_status(status: Any) -> BookingStatus:
    return status if isinstance(status, BookingStatus) else BookingStatus(str(status))


def _hours_until(scheduled_at: datetime, now: datetime) -> float:
    return (ensure_utc(scheduled_at) - ensure_utc(now)).total_seconds() / 3600


def calculate_price(duration: int, hourly_rate: Decimal | float | int) -> Decimal:
    """Session price for ``duration`` minutes at ``hourly_rate``, rounded to cents."""
    rate = Decimal(str(hourly_rate))
    return (rate * Decimal(duration) / Decimal(60)).quantize(_CENT, rounding=ROUND_HALF_UP)


def validate_booking_time(
    scheduled_at: datetime,
    now: datetime,
    *,
    min_advance_hours: int = MIN_ADVANCE_BOOKING_HOURS,
    max_advance_days: int = MAX_ADVANCE_BOOKING_DAYS,
) -> RuleResult:
    """Bookings must start more than ``min_advance_hours`` and at most ``max_advance_days`` ahead."""
    start = ensure_utc(scheduled_at)
    now = ensure_utc(now)

    if start <= now + timedelta(hours=min_advance_hours):
        return RuleResult(
            valid=False,
            error=f"Booking must be at least {min_advance_hours} hours in advance",
        )
    if start > now + timedelta(days=max_advance_days):
        return RuleResult(
            valid=False,
            error=f"Booking cannot be more than {max_advance_days} days in advance",
        )
    return RULE_OK


def can_cancel_booking(booking: Any) -> RuleResult:
    status = _coerce_status(booking.status)
    if status == BookingStatus.CANCELLED:
        return RuleResult(valid=False, error="Booking is already cancelled")
    if status == BookingStatus.COMPLETED:
        return RuleResult(valid=False, error="Cannot cancel a completed booking")
    if status == BookingStatus.REFUNDED:
        return RuleResult(valid=False, error="Booking has already been refunded")
    return RULE_OK


def is_late_cancellation(
    booking: Any, now: datetime, *, threshold_hours: int = LATE_CANCELLATION_HOURS
) -> bool:
    """Cancelling less than ``threshold_hours`` before the start counts as late."""
    return _hours_until(booking.scheduled_at, now) < threshold_hours


def can_reschedule_booking(
    booking: Any, now: datetime, *, cutoff_hours: int = RESCHEDULE_CUTOFF_HOURS
) -> RuleResult:
    status = _coerce_status(booking.status)
    if status == BookingStatus.CANCELLED:
        return RuleResult(valid=False, error="Cannot reschedule a cancelled booking")
    if status == BookingStatus.COMPLETED:
        return RuleResult(valid=False, error="Cannot reschedule a completed booking")
    if status == BookingStatus.REFUNDED:
        return RuleResult(valid=False, error="Cannot reschedule a refunded booking")
    if _hours_until(booking.scheduled_at, now) < cutoff_hours:
        return RuleResult(
            valid=False,
            error=f"Cannot reschedule booking less than {cutoff_hours} hours before start time",
        )
    return RULE_OK


def get_valid_status_transitions(current: Any) -> FrozenSet[BookingStatus]:
    return _STATUS_TRANSITIONS.get(_coerce_status(current), frozenset())


def validate_status_transition(current: Any, new: Any) -> RuleResult:
    current_status = _coerce_status(current)
    new_status = _coerce_status(new)
    if new_status not in get_valid_status_transitions(current_status):
        return RuleResult(
            valid=False,
            error=f"Cannot transition from {current_status.value} to {new_status.value}",
        )
    return RULE_OK
