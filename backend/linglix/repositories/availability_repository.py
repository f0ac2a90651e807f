# backend/linglix/repositories/availability_repository.py
"""
Availability Repository for the Linglix platform

Reads and writes recurring weekly windows. Time strings are zero-padded
``HH:MM`` so lexical comparison in SQL matches chronological order.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import RecurringAvailability
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AvailabilityRepository(BaseRepository[RecurringAvailability]):
    """Repository for recurring availability windows."""

    def __init__(self, db: Session):
        super().__init__(db, RecurringAvailability)

    def get_windows_for_tutor(
        self, tutor_id: str, *, active_only: bool = False
    ) -> List[RecurringAvailability]:
        """
        Get a tutor's windows ordered by weekday then start time.

        Args:
            tutor_id: Owning tutor
            active_only: Drop inactive windows in SQL

        Returns:
            List of windows
        """
        query = self._build_query().filter(RecurringAvailability.tutor_id == tutor_id)
        if active_only:
            query = query.filter(RecurringAvailability.is_active.is_(True))
        query = query.order_by(
            RecurringAvailability.day_of_week.asc(),
            RecurringAvailability.start_time.asc(),
        )
        return self._execute_query(query)

    def get_window_for_tutor(self, tutor_id: str, window_id: str) -> Optional[RecurringAvailability]:
        try:
            return (
                self._build_query()
                .filter(
                    RecurringAvailability.id == window_id,
                    RecurringAvailability.tutor_id == tutor_id,
                )
                .first()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting window {window_id}: {str(e)}")
            raise RepositoryException(f"Failed to retrieve availability window: {str(e)}")

    def find_overlapping_window(
        self,
        tutor_id: str,
        day_of_week: int,
        start_time: str,
        end_time: str,
        exclude_window_id: Optional[str] = None,
    ) -> Optional[RecurringAvailability]:
        """
        Find an active window on the same weekday overlapping ``[start_time, end_time)``.

        Windows that only touch at a boundary do not overlap.
        """
        try:
            query = self._build_query().filter(
                RecurringAvailability.tutor_id == tutor_id,
                RecurringAvailability.day_of_week == day_of_week,
                RecurringAvailability.is_active.is_(True),
                RecurringAvailability.start_time < end_time,
                RecurringAvailability.end_time > start_time,
            )
            if exclude_window_id:
                query = query.filter(RecurringAvailability.id != exclude_window_id)
            return query.order_by(RecurringAvailability.start_time.asc()).first()
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking window overlap for {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to check availability overlap: {str(e)}")
