"""
Repository Pattern Implementation for the Linglix platform

Usage:
    from linglix.repositories import RepositoryFactory

    repository = RepositoryFactory.create_booking_repository(db)
    bookings = repository.get_active_bookings_for_tutor(tutor_id)
"""

from .availability_repository import AvailabilityRepository
from .base_repository import BaseRepository, IRepository
from .booking_repository import BookingRepository
from .factory import RepositoryFactory
from .tutor_profile_repository import TutorProfileRepository

__all__ = [
    "AvailabilityRepository",
    "BaseRepository",
    "BookingRepository",
    "IRepository",
    "RepositoryFactory",
    "TutorProfileRepository",
]
