# backend/linglix/services/conflict_checker.py
"""
Conflict Checker Service for the Linglix platform

Loads a tutor's windows and bookings and hands them to the availability
engine. Everything that decides availability lives in
``linglix.domain.availability_engine``; this service only handles:

- tutor lookup and the bookable gate (active + approved)
- date range defaults and limits for the date picker
- metrics for single-slot verdicts
"""

from datetime import date, datetime, timedelta
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import NotFoundException, ValidationException
from ..domain import availability_engine as engine
from ..domain.availability_engine import AvailabilityCheckResult, TimeSlot
from ..models.tutor import TutorProfile
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from ..schemas.booking import TutorAvailabilityResponse
from ..utils.time_utils import to_utc_date, utc_now
from .base import BaseService

logger = logging.getLogger(__name__)

REASON_TUTOR_NOT_BOOKABLE = "Tutor is not available for bookings"


class ConflictChecker(BaseService):
    """
    Service for booking conflict detection and slot discovery.

    Every answer is computed from one snapshot of the tutor's windows and
    bookings, so the slot list, the date picker and the single-slot check
    agree with each other.
    """

    def __init__(self, db: Session, repository: Optional[BookingRepository] = None):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional BookingRepository instance
        """
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.availability_repository = RepositoryFactory.create_availability_repository(db)
        self.tutor_repository = RepositoryFactory.create_tutor_profile_repository(db)

    def _get_tutor(self, tutor_id: str) -> TutorProfile:
        tutor = self.tutor_repository.get_by_id(tutor_id)
        if not tutor:
            raise NotFoundException("Tutor not found")
        return tutor

    def _snapshot(self, tutor_id: str):
        windows = self.availability_repository.get_windows_for_tutor(tutor_id, active_only=True)
        bookings = self.repository.get_active_bookings_for_tutor(tutor_id)
        return windows, bookings

    @BaseService.measure_operation("check_availability")
    def check_availability(
        self,
        tutor_id: str,
        scheduled_at: datetime,
        duration: int,
        exclude_booking_id: Optional[str] = None,
    ) -> AvailabilityCheckResult:
        """
        Check whether one proposed booking could be made.

        Args:
            tutor_id: Tutor to check
            scheduled_at: Proposed start
            duration: Length in minutes
            exclude_booking_id: Booking to ignore, e.g. the one being rescheduled

        Returns:
            AvailabilityCheckResult from the engine

        Raises:
            NotFoundException: Unknown tutor
        """
        tutor = self._get_tutor(tutor_id)
        if not tutor.is_bookable:
            result = AvailabilityCheckResult(available=False, reason=REASON_TUTOR_NOT_BOOKABLE)
        else:
            windows, bookings = self._snapshot(tutor_id)
            result = engine.check_time_slot_availability(
                scheduled_at,
                duration,
                windows,
                bookings,
                tutor_id,
                exclude_booking_id=exclude_booking_id,
            )

        prometheus_metrics.record_availability_check(result.available, result.reason)
        if not result.available:
            self.logger.debug(
                f"Slot unavailable for tutor {tutor_id} at {scheduled_at} ({duration}m): {result.reason}"
            )
        return result

    @BaseService.measure_operation("get_time_slots")
    def get_time_slots(self, tutor_id: str, day: date, duration: int) -> List[TimeSlot]:
        """Every candidate slot on ``day``; booked ones are flagged, not dropped."""
        tutor = self._get_tutor(tutor_id)
        if not tutor.is_bookable:
            return []
        windows, bookings = self._snapshot(tutor_id)
        return engine.get_available_time_slots(
            day,
            duration,
            windows,
            bookings,
            tutor_id,
            interval_minutes=settings.availability_slot_interval_minutes,
        )

    @BaseService.measure_operation("get_available_dates")
    def get_available_dates(
        self, tutor_id: str, start_date: date, end_date: date, duration: int
    ) -> List[date]:
        tutor = self._get_tutor(tutor_id)
        self._validate_range(start_date, end_date)
        if not tutor.is_bookable:
            return []
        windows, bookings = self._snapshot(tutor_id)
        return engine.get_available_dates(
            start_date,
            end_date,
            windows,
            bookings,
            tutor_id,
            duration,
            interval_minutes=settings.availability_slot_interval_minutes,
        )

    @staticmethod
    def _validate_range(start_date: date, end_date: date) -> None:
        if start_date > end_date:
            raise ValidationException("Start date must be before end date")
        if (end_date - start_date).days > settings.max_availability_range_days:
            raise ValidationException(
                f"Date range cannot exceed {settings.max_availability_range_days} days"
            )

    @BaseService.measure_operation("get_tutor_availability")
    def get_tutor_availability(
        self,
        tutor_id: str,
        duration: int,
        day: Optional[date] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> TutorAvailabilityResponse:
        """
        Slots for a single date, or available dates for a range.

        ``day`` wins when given. Without any date the range defaults to
        today through the configured number of days ahead (UTC).
        """
        tutor = self._get_tutor(tutor_id)

        if day is not None:
            if not tutor.is_bookable:
                return TutorAvailabilityResponse(
                    tutor_id=tutor_id,
                    duration=duration,
                    available=False,
                    reason=REASON_TUTOR_NOT_BOOKABLE,
                    date=day,
                    slots=[],
                )
            slots = self.get_time_slots(tutor_id, day, duration)
            return TutorAvailabilityResponse(
                tutor_id=tutor_id,
                duration=duration,
                date=day,
                slots=[slot.to_payload() for slot in slots],
            )

        today = to_utc_date(utc_now())
        range_start = start_date or today
        range_end = end_date or range_start + timedelta(days=settings.default_availability_range_days)
        self._validate_range(range_start, range_end)

        if not tutor.is_bookable:
            return TutorAvailabilityResponse(
                tutor_id=tutor_id,
                duration=duration,
                available=False,
                reason=REASON_TUTOR_NOT_BOOKABLE,
                start_date=range_start,
                end_date=range_end,
                available_dates=[],
            )

        dates = self.get_available_dates(tutor_id, range_start, range_end, duration)
        return TutorAvailabilityResponse(
            tutor_id=tutor_id,
            duration=duration,
            start_date=range_start,
            end_date=range_end,
            available_dates=dates,
        )
