# backend/linglix/repositories/booking_repository.py
"""
Booking Repository for the Linglix platform

Snapshot reads used by the availability engine plus the paginated
listing behind GET /bookings. "Active" means any status except
CANCELLED and REFUNDED.
"""

from datetime import datetime, timedelta
import logging
from typing import List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import INACTIVE_BOOKING_STATUSES
from ..core.exceptions import RepositoryException
from ..models.booking import Booking
from ..utils.time_utils import ensure_utc
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_INACTIVE_VALUES = [status.value for status in INACTIVE_BOOKING_STATUSES]

# Longest session offered is 90 minutes; one day is a generous look-back.
_OVERLAP_LOOKBACK = timedelta(days=1)


class BookingRepository(BaseRepository[Booking]):
    """Repository for booking data access."""

    def __init__(self, db: Session):
        super().__init__(db, Booking)

    def get_active_bookings_for_tutor(self, tutor_id: str) -> List[Booking]:
        query = (
            self._build_query()
            .filter(
                Booking.tutor_id == tutor_id,
                Booking.status.notin_(_INACTIVE_VALUES),
            )
            .order_by(Booking.scheduled_at.asc())
        )
        return self._execute_query(query)

    def get_active_bookings_near(
        self, tutor_id: str, start: datetime, end: datetime
    ) -> List[Booking]:
        """
        Active bookings that could overlap ``[start, end)``.

        Used for the write-time re-check inside the creating transaction.
        """
        query = (
            self._build_query()
            .filter(
                Booking.tutor_id == tutor_id,
                Booking.status.notin_(_INACTIVE_VALUES),
                Booking.scheduled_at < ensure_utc(end),
                Booking.scheduled_at >= ensure_utc(start) - _OVERLAP_LOOKBACK,
            )
            .order_by(Booking.scheduled_at.asc())
        )
        return self._execute_query(query)

    def list_bookings(
        self,
        *,
        tutor_id: Optional[str] = None,
        student_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Booking], int]:
        """
        Filtered, newest-first page of bookings.

        Returns:
            (bookings on this page, total matching)
        """
        try:
            query = self._build_query()
            if tutor_id:
                query = query.filter(Booking.tutor_id == tutor_id)
            if student_id:
                query = query.filter(Booking.student_id == student_id)
            if status:
                query = query.filter(Booking.status == status)

            total = query.count()
            items = (
                query.order_by(Booking.scheduled_at.desc()).offset(offset).limit(limit).all()
            )
            return items, total
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing bookings: {str(e)}")
            raise RepositoryException(f"Failed to list bookings: {str(e)}")
