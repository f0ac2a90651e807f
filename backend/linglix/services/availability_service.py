# backend/linglix/services/availability_service.py
"""
Availability Service for the Linglix platform

Manages a tutor's recurring weekly availability windows. Enforces the
invariants the availability engine relies on:

- ``end_time`` is strictly after ``start_time``
- active windows of one tutor never overlap on the same weekday
  (touching windows such as 09:00-12:00 and 12:00-15:00 are allowed)
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.exceptions import AvailabilityOverlapException, NotFoundException, ValidationException
from ..domain.availability_engine import describe_window
from ..models.availability import RecurringAvailability
from ..models.tutor import TutorProfile
from ..repositories import RepositoryFactory
from ..repositories.availability_repository import AvailabilityRepository
from ..schemas.availability import RecurringAvailabilityCreate, RecurringAvailabilityUpdate
from ..utils.time_utils import parse_hhmm
from .base import BaseService

logger = logging.getLogger(__name__)


class AvailabilityService(BaseService):
    """Service for recurring availability window CRUD."""

    def __init__(self, db: Session, repository: Optional[AvailabilityRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_availability_repository(db)
        self.tutor_repository = RepositoryFactory.create_tutor_profile_repository(db)

    def _require_tutor(self, tutor_id: str) -> TutorProfile:
        tutor = self.tutor_repository.get_by_id(tutor_id)
        if not tutor:
            raise NotFoundException("Tutor not found")
        return tutor

    def _require_window(self, tutor_id: str, window_id: str) -> RecurringAvailability:
        window = self.repository.get_window_for_tutor(tutor_id, window_id)
        if not window:
            raise NotFoundException("Availability not found")
        return window

    @staticmethod
    def _validate_time_order(start_time: str, end_time: str) -> None:
        if parse_hhmm(end_time) <= parse_hhmm(start_time):
            raise ValidationException("End time must be after start time")

    def _ensure_no_overlap(
        self,
        tutor_id: str,
        day_of_week: int,
        start_time: str,
        end_time: str,
        exclude_window_id: Optional[str] = None,
    ) -> None:
        existing = self.repository.find_overlapping_window(
            tutor_id, day_of_week, start_time, end_time, exclude_window_id=exclude_window_id
        )
        if existing:
            self.logger.info(
                f"Rejected overlapping window for tutor {tutor_id} on day {day_of_week}: "
                f"{start_time}-{end_time} vs {describe_window(existing)}"
            )
            raise AvailabilityOverlapException(
                day_of_week=day_of_week,
                new_range=f"{start_time}-{end_time}",
                conflicting_range=describe_window(existing),
            )

    @BaseService.measure_operation("list_windows")
    def list_windows(self, tutor_id: str) -> List[RecurringAvailability]:
        """All windows of a tutor, inactive included, ordered by weekday and start."""
        self._require_tutor(tutor_id)
        return self.repository.get_windows_for_tutor(tutor_id)

    @BaseService.measure_operation("create_window")
    def create_window(
        self, tutor_id: str, data: RecurringAvailabilityCreate
    ) -> RecurringAvailability:
        """
        Create a weekly window.

        Raises:
            NotFoundException: Unknown tutor
            ValidationException: end_time not after start_time
            AvailabilityOverlapException: Overlaps another active window that day
        """
        self._require_tutor(tutor_id)
        self._validate_time_order(data.start_time, data.end_time)

        if data.is_active:
            self._ensure_no_overlap(tutor_id, data.day_of_week, data.start_time, data.end_time)

        with self.transaction():
            window = self.repository.create(
                tutor_id=tutor_id,
                day_of_week=data.day_of_week,
                start_time=data.start_time,
                end_time=data.end_time,
                timezone=data.timezone or "UTC",
                is_active=data.is_active,
            )

        self.logger.info(
            f"Created availability window {window.id} for tutor {tutor_id}: "
            f"day {window.day_of_week} {window.start_time}-{window.end_time}"
        )
        return window

    @BaseService.measure_operation("update_window")
    def update_window(
        self, tutor_id: str, window_id: str, data: RecurringAvailabilityUpdate
    ) -> RecurringAvailability:
        """
        Partially update a window owned by ``tutor_id``.

        The resulting window is re-validated as a whole, so re-activating a
        window that now collides with another one is rejected too.
        """
        window = self._require_window(tutor_id, window_id)
        changes = data.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return window

        day_of_week = changes.get("day_of_week", window.day_of_week)
        start_time = changes.get("start_time", window.start_time)
        end_time = changes.get("end_time", window.end_time)
        is_active = changes.get("is_active", window.is_active)

        self._validate_time_order(start_time, end_time)
        if is_active:
            self._ensure_no_overlap(
                tutor_id, day_of_week, start_time, end_time, exclude_window_id=window.id
            )

        with self.transaction():
            updated = self.repository.update(window.id, **changes)

        self.logger.info(f"Updated availability window {window_id} for tutor {tutor_id}")
        return updated

    @BaseService.measure_operation("delete_window")
    def delete_window(self, tutor_id: str, window_id: str) -> None:
        window = self._require_window(tutor_id, window_id)
        with self.transaction():
            self.repository.delete(window.id)
        self.logger.info(f"Deleted availability window {window_id} for tutor {tutor_id}")
