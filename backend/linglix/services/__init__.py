"""
Service layer for the Linglix platform.

Services hold business logic and transaction boundaries; repositories
handle data access; the availability engine in ``linglix.domain`` stays
free of both.
"""

from .availability_service import AvailabilityService
from .base import BaseService
from .booking_service import BookingService
from .conflict_checker import ConflictChecker

__all__ = [
    "AvailabilityService",
    "BaseService",
    "BookingService",
    "ConflictChecker",
]
