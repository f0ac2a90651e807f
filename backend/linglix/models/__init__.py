"""
Database models for the Linglix platform.

- TutorProfile: bookable tutors and their hourly rate
- RecurringAvailability: weekly availability windows
- Booking: paid sessions between students and tutors
"""

from .availability import RecurringAvailability
from .booking import Booking, BookingStatus
from .tutor import TutorProfile

__all__ = [
    "Booking",
    "BookingStatus",
    "RecurringAvailability",
    "TutorProfile",
]
