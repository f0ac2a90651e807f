# backend/linglix/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

import logging

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.availability_service import AvailabilityService
from ...services.booking_service import BookingService
from ...services.conflict_checker import ConflictChecker
from .database import get_db

logger = logging.getLogger(__name__)


def get_availability_service(db: Session = Depends(get_db)) -> AvailabilityService:
    """
    Get availability window service instance.

    Args:
        db: Database session

    Returns:
        AvailabilityService instance
    """
    return AvailabilityService(db)


def get_conflict_checker(db: Session = Depends(get_db)) -> ConflictChecker:
    """
    Get conflict checker service instance.

    Args:
        db: Database session

    Returns:
        ConflictChecker instance
    """
    return ConflictChecker(db)


def get_booking_service(
    db: Session = Depends(get_db),
    conflict_checker: ConflictChecker = Depends(get_conflict_checker),
) -> BookingService:
    """Get booking service sharing the request's conflict checker."""
    return BookingService(db, conflict_checker=conflict_checker)
