# backend/linglix/core/enums.py
"""
Core enums for the Linglix platform.

Kept free of ORM imports so the pure domain modules can use them
without pulling in the database layer.
"""

from enum import Enum


class BookingStatus(str, Enum):
    """Booking lifecycle statuses."""

    PENDING = "PENDING"  # Created, awaiting payment
    CONFIRMED = "CONFIRMED"  # Paid
    COMPLETED = "COMPLETED"  # Session took place
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"


# Bookings in these states no longer occupy their time interval.
INACTIVE_BOOKING_STATUSES = frozenset({BookingStatus.CANCELLED, BookingStatus.REFUNDED})


class ApprovalStatus(str, Enum):
    """Admin approval state of a tutor profile."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
