# backend/linglix/services/booking_service.py
"""
Booking Service for the Linglix platform

Owns the booking lifecycle: create, read, list, cancel, reschedule and
status changes. Availability verdicts come from ConflictChecker. Writes
that place a booking on the calendar first lock the tutor row, then
re-check for overlapping bookings in the same transaction, so two
students racing for one slot are serialised and the second gets a 409.
"""

import logging
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.enums import BookingStatus
from ..core.exceptions import (
    BookingConflictException,
    BusinessRuleException,
    NotFoundException,
    RepositoryException,
    ValidationException,
)
from ..domain import booking_rules
from ..domain.availability_engine import REASON_BOOKING_CONFLICT, find_conflicting_booking
from ..models.booking import Booking
from ..repositories import RepositoryFactory
from ..repositories.booking_repository import BookingRepository
from ..schemas.booking import BookingCreate
from ..utils.time_utils import ensure_utc, utc_now
from .base import BaseService
from .conflict_checker import ConflictChecker

logger = logging.getLogger(__name__)

RACE_CONFLICT_MESSAGE = (
    "This time slot was just booked by another student. Please choose another time."
)

_LOCK_CONTENTION_MARKERS = (
    "database is locked",
    "deadlock detected",
    "could not obtain lock",
    "lock timeout",
)


class BookingService(BaseService):
    """
    Service layer for booking operations.

    Prices are fixed at creation from the tutor's hourly rate; later
    rate changes never touch existing bookings.
    """

    def __init__(
        self,
        db: Session,
        conflict_checker: Optional[ConflictChecker] = None,
        repository: Optional[BookingRepository] = None,
    ):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_booking_repository(db)
        self.tutor_repository = RepositoryFactory.create_tutor_profile_repository(db)
        self.conflict_checker = conflict_checker or ConflictChecker(db, repository=self.repository)

    def _get_booking_or_404(self, booking_id: str) -> Booking:
        booking = self.repository.get_by_id(booking_id)
        if not booking:
            raise NotFoundException("Booking not found")
        return booking

    def _validate_advance_window(self, scheduled_at: datetime, now: datetime) -> None:
        result = booking_rules.validate_booking_time(
            scheduled_at,
            now,
            min_advance_hours=settings.booking_min_advance_hours,
            max_advance_days=settings.booking_max_advance_days,
        )
        if not result.valid:
            raise ValidationException(result.error)

    def _ensure_slot_available(
        self,
        tutor_id: str,
        scheduled_at: datetime,
        duration: int,
        exclude_booking_id: Optional[str] = None,
    ) -> None:
        verdict = self.conflict_checker.check_availability(
            tutor_id, scheduled_at, duration, exclude_booking_id=exclude_booking_id
        )
        if verdict.available:
            return
        if verdict.conflicting_booking is not None:
            raise BookingConflictException(
                verdict.reason or REASON_BOOKING_CONFLICT,
                details={"conflicting_booking_id": verdict.conflicting_booking.id},
            )
        raise ValidationException(verdict.reason or "Time slot is not available")

    @staticmethod
    def _is_lock_contention(exc: RepositoryException) -> bool:
        message = str(exc).lower()
        return any(marker in message for marker in _LOCK_CONTENTION_MARKERS)

    def _lock_tutor_schedule(self, tutor_id: str) -> None:
        """Serialise booking writes for ``tutor_id``; must run inside ``transaction()``."""
        try:
            locked = self.tutor_repository.lock_for_booking(tutor_id)
        except RepositoryException as exc:
            if self._is_lock_contention(exc):
                self.logger.warning(f"Lock contention on tutor {tutor_id}: {exc}")
                raise BookingConflictException(RACE_CONFLICT_MESSAGE) from exc
            raise
        if not locked:
            raise NotFoundException("Tutor not found")

    def _recheck_for_race(
        self,
        tutor_id: str,
        start: datetime,
        duration: int,
        exclude_booking_id: Optional[str] = None,
    ) -> None:
        end = start + timedelta(minutes=duration)
        nearby = self.repository.get_active_bookings_near(tutor_id, start, end)
        conflict = find_conflicting_booking(
            start, end, nearby, tutor_id, exclude_booking_id=exclude_booking_id
        )
        if conflict is not None:
            self.logger.warning(
                f"Write-time conflict for tutor {tutor_id} at {start}: "
                f"booking {conflict.id} was created concurrently"
            )
            raise BookingConflictException(
                RACE_CONFLICT_MESSAGE,
                details={"conflicting_booking_id": conflict.id},
            )

    @BaseService.measure_operation("create_booking")
    def create_booking(self, data: BookingCreate) -> Booking:
        """
        Create a PENDING booking.

        Args:
            data: Validated request body

        Returns:
            The new booking

        Raises:
            NotFoundException: Unknown tutor
            ValidationException: Bad duration, tutor not bookable, outside the
                advance window or outside the tutor's availability
            BookingConflictException: Overlaps an active booking, including one
                committed by a concurrent request while this one waited
        """
        if data.duration not in booking_rules.VALID_DURATIONS:
            allowed = ", ".join(str(d) for d in booking_rules.VALID_DURATIONS)
            raise ValidationException(f"Duration must be one of {allowed} minutes")

        tutor = self.tutor_repository.get_by_id(data.tutor_id)
        if not tutor:
            raise NotFoundException("Tutor not found")
        if not tutor.is_active:
            raise ValidationException("Tutor profile is not active")
        if not tutor.is_bookable:
            raise ValidationException("Tutor profile is not approved")

        scheduled_at = ensure_utc(data.scheduled_at)
        self._validate_advance_window(scheduled_at, utc_now())
        self._ensure_slot_available(data.tutor_id, scheduled_at, data.duration)

        price = booking_rules.calculate_price(data.duration, tutor.hourly_rate)

        with self.transaction():
            self._lock_tutor_schedule(data.tutor_id)
            self._recheck_for_race(data.tutor_id, scheduled_at, data.duration)
            booking = self.repository.create(
                tutor_id=data.tutor_id,
                student_id=data.student_id,
                scheduled_at=scheduled_at,
                duration=data.duration,
                status=BookingStatus.PENDING.value,
                price=price,
                notes=data.notes,
            )

        self.logger.info(
            f"Created booking {booking.id} for tutor {data.tutor_id} at {scheduled_at} "
            f"({data.duration}m, {price})"
        )
        return booking

    @BaseService.measure_operation("get_booking")
    def get_booking(self, booking_id: str) -> Booking:
        return self._get_booking_or_404(booking_id)

    @BaseService.measure_operation("list_bookings")
    def list_bookings(
        self,
        *,
        tutor_id: Optional[str] = None,
        student_id: Optional[str] = None,
        status: Optional[BookingStatus] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Booking], int, int]:
        """
        Filtered page of bookings, newest first.

        Returns:
            (bookings, total matching, effective limit)
        """
        limit = max(1, min(limit, settings.max_page_size))
        offset = max(0, offset)
        status_value = status.value if isinstance(status, BookingStatus) else status
        bookings, total = self.repository.list_bookings(
            tutor_id=tutor_id,
            student_id=student_id,
            status=status_value,
            limit=limit,
            offset=offset,
        )
        return bookings, total, limit

    @BaseService.measure_operation("cancel_booking")
    def cancel_booking(self, booking_id: str, reason: Optional[str] = None) -> Booking:
        """Cancel a booking, flagging it late when inside the late-cancellation window."""
        booking = self._get_booking_or_404(booking_id)

        check = booking_rules.can_cancel_booking(booking)
        if not check.valid:
            raise BusinessRuleException(check.error)

        now = utc_now()
        late = booking_rules.is_late_cancellation(
            booking, now, threshold_hours=settings.late_cancellation_hours
        )

        with self.transaction():
            booking = self.repository.update(
                booking.id,
                status=BookingStatus.CANCELLED.value,
                cancelled_at=now,
                cancellation_reason=reason,
                is_late_cancellation=late,
            )

        if late:
            self.logger.info(f"Late cancellation of booking {booking_id}")
        else:
            self.logger.info(f"Cancelled booking {booking_id}")
        return booking

    @BaseService.measure_operation("reschedule_booking")
    def reschedule_booking(self, booking_id: str, new_scheduled_at: datetime) -> Booking:
        """
        Move a booking to a new start, keeping its duration and price.

        The booking's own interval is ignored when checking for conflicts, so
        shifting a session by less than its length is allowed.
        """
        booking = self._get_booking_or_404(booking_id)
        now = utc_now()

        check = booking_rules.can_reschedule_booking(
            booking, now, cutoff_hours=settings.reschedule_cutoff_hours
        )
        if not check.valid:
            raise BusinessRuleException(check.error)

        new_start = ensure_utc(new_scheduled_at)
        self._validate_advance_window(new_start, now)
        self._ensure_slot_available(
            booking.tutor_id, new_start, booking.duration, exclude_booking_id=booking.id
        )

        with self.transaction():
            self._lock_tutor_schedule(booking.tutor_id)
            self._recheck_for_race(
                booking.tutor_id, new_start, booking.duration, exclude_booking_id=booking.id
            )
            booking = self.repository.update(booking.id, scheduled_at=new_start)

        self.logger.info(f"Rescheduled booking {booking_id} to {new_start}")
        return booking

    @BaseService.measure_operation("update_status")
    def update_status(self, booking_id: str, new_status: BookingStatus) -> Booking:
        booking = self._get_booking_or_404(booking_id)

        check = booking_rules.validate_status_transition(booking.status, new_status)
        if not check.valid:
            raise BusinessRuleException(check.error)

        new_status = BookingStatus(new_status)
        changes = {"status": new_status.value}
        if new_status == BookingStatus.COMPLETED:
            changes["completed_at"] = utc_now()
        elif new_status == BookingStatus.CANCELLED:
            changes["cancelled_at"] = utc_now()

        with self.transaction():
            booking = self.repository.update(booking.id, **changes)

        self.logger.info(f"Booking {booking_id} moved to {new_status.value}")
        return booking
