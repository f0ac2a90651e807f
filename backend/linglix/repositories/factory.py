# backend/linglix/repositories/factory.py
"""
Repository Factory for the Linglix platform

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .availability_repository import AvailabilityRepository
    from .booking_repository import BookingRepository
    from .tutor_profile_repository import TutorProfileRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_availability_repository(db: Session) -> "AvailabilityRepository":
        """Create repository for recurring availability windows."""
        from .availability_repository import AvailabilityRepository

        return AvailabilityRepository(db)

    @staticmethod
    def create_booking_repository(db: Session) -> "BookingRepository":
        """Create repository for booking operations."""
        from .booking_repository import BookingRepository

        return BookingRepository(db)

    @staticmethod
    def create_tutor_profile_repository(db: Session) -> "TutorProfileRepository":
        """Create repository for tutor profiles."""
        from .tutor_profile_repository import TutorProfileRepository

        return TutorProfileRepository(db)
