# backend/tests/unit/test_booking_rules.py
"""Tests for pure booking business rules."""

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from types import SimpleNamespace

import pytest

from linglix.core.enums import BookingStatus
from linglix.domain import booking_rules

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def booking(status=BookingStatus.CONFIRMED, hours_ahead: float = 48):
    return SimpleNamespace(status=status, scheduled_at=NOW + timedelta(hours=hours_ahead))


@pytest.mark.unit
class TestCalculatePrice:
    @pytest.mark.parametrize(
        "duration, rate, expected",
        [
            (60, Decimal("50.00"), Decimal("50.00")),
            (30, Decimal("45.00"), Decimal("22.50")),
            (90, 40, Decimal("60.00")),
            (30, Decimal("33.33"), Decimal("16.67")),  # 16.665 rounds half-up
        ],
    )
    def test_price(self, duration, rate, expected):
        assert booking_rules.calculate_price(duration, rate) == expected


@pytest.mark.unit
class TestValidateBookingTime:
    def test_valid_window(self):
        assert booking_rules.validate_booking_time(NOW + timedelta(days=2), NOW).valid

    def test_too_soon(self):
        result = booking_rules.validate_booking_time(NOW + timedelta(hours=23), NOW)
        assert not result.valid
        assert result.error == "Booking must be at least 24 hours in advance"

    def test_exactly_min_advance_is_too_soon(self):
        assert not booking_rules.validate_booking_time(NOW + timedelta(hours=24), NOW).valid

    def test_too_far(self):
        result = booking_rules.validate_booking_time(NOW + timedelta(days=91), NOW)
        assert result.error == "Booking cannot be more than 90 days in advance"

    def test_custom_limits(self):
        result = booking_rules.validate_booking_time(
            NOW + timedelta(hours=3), NOW, min_advance_hours=2, max_advance_days=1
        )
        assert result.valid


@pytest.mark.unit
class TestCancellation:
    @pytest.mark.parametrize(
        "status, message",
        [
            (BookingStatus.CANCELLED, "Booking is already cancelled"),
            (BookingStatus.COMPLETED, "Cannot cancel a completed booking"),
            ("REFUNDED", "Booking has already been refunded"),
        ],
    )
    def test_terminal_states_cannot_be_cancelled(self, status, message):
        result = booking_rules.can_cancel_booking(booking(status))
        assert not result.valid
        assert result.error == message

    @pytest.mark.parametrize("status", [BookingStatus.PENDING, BookingStatus.CONFIRMED])
    def test_open_states_can_be_cancelled(self, status):
        assert booking_rules.can_cancel_booking(booking(status)).valid

    def test_late_cancellation_threshold(self):
        assert booking_rules.is_late_cancellation(booking(hours_ahead=11), NOW)
        assert not booking_rules.is_late_cancellation(booking(hours_ahead=12), NOW)
        assert booking_rules.is_late_cancellation(booking(hours_ahead=20), NOW, threshold_hours=24)


@pytest.mark.unit
class TestReschedule:
    def test_allowed(self):
        assert booking_rules.can_reschedule_booking(booking(), NOW).valid

    def test_cutoff(self):
        result = booking_rules.can_reschedule_booking(booking(hours_ahead=3), NOW)
        assert result.error == "Cannot reschedule booking less than 4 hours before start time"

    @pytest.mark.parametrize(
        "status", [BookingStatus.CANCELLED, BookingStatus.COMPLETED, BookingStatus.REFUNDED]
    )
    def test_terminal_states(self, status):
        assert not booking_rules.can_reschedule_booking(booking(status), NOW).valid


@pytest.mark.unit
class TestStatusTransitions:
    @pytest.mark.parametrize(
        "current, new",
        [
            (BookingStatus.PENDING, BookingStatus.CONFIRMED),
            (BookingStatus.PENDING, BookingStatus.CANCELLED),
            (BookingStatus.CONFIRMED, BookingStatus.COMPLETED),
            ("CONFIRMED", "CANCELLED"),
        ],
    )
    def test_valid(self, current, new):
        assert booking_rules.validate_status_transition(current, new).valid

    def test_invalid(self):
        result = booking_rules.validate_status_transition(
            BookingStatus.COMPLETED, BookingStatus.PENDING
        )
        assert not result.valid
        assert result.error == "Cannot transition from COMPLETED to PENDING"

    def test_terminal_states_have_no_transitions(self):
        for status in (BookingStatus.COMPLETED, BookingStatus.CANCELLED, BookingStatus.REFUNDED):
            assert booking_rules.get_valid_status_transitions(status) == frozenset()
