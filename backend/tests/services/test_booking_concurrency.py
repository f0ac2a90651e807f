# backend/tests/services/test_booking_concurrency.py
"""
Two requests racing for the same tutor, each on its own Session.

Runs against a file-backed SQLite database so the sessions use separate
connections and only see each other's committed rows. A short busy
timeout keeps the blocked request from stalling the suite.
"""

from decimal import Decimal
from unittest.mock import patch

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from linglix.core.enums import ApprovalStatus, BookingStatus
from linglix.core.exceptions import BookingConflictException
from linglix.database import Base
from linglix.models import Booking, RecurringAvailability, TutorProfile
from linglix.schemas.booking import BookingCreate
from linglix.services.booking_service import RACE_CONFLICT_MESSAGE, BookingService


@pytest.fixture
def open_session(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'bookings.db'}",
        connect_args={"check_same_thread": False, "timeout": 0.2},
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)
    sessions = []

    def _open():
        session = factory()
        sessions.append(session)
        return session

    yield _open

    for session in sessions:
        session.rollback()
        session.close()
    engine.dispose()


@pytest.fixture
def shared_tutor(open_session) -> TutorProfile:
    """Approved tutor with 09:00-17:00 UTC every day, committed for all sessions."""
    session = open_session()
    tutor = TutorProfile(
        user_id="shared-tutor",
        display_name="Shared Tutor",
        hourly_rate=Decimal("60.00"),
        is_active=True,
        approval_status=ApprovalStatus.APPROVED.value,
    )
    session.add(tutor)
    session.flush()
    for day in range(7):
        session.add(
            RecurringAvailability(
                tutor_id=tutor.id, day_of_week=day, start_time="09:00", end_time="17:00"
            )
        )
    session.commit()
    return tutor


def _active_bookings(open_session, tutor_id):
    session = open_session()
    return (
        session.query(Booking)
        .filter(
            Booking.tutor_id == tutor_id,
            Booking.status.notin_([BookingStatus.CANCELLED.value, BookingStatus.REFUNDED.value]),
        )
        .all()
    )


@pytest.mark.integration
class TestConcurrentBookingWrites:
    def test_same_slot_from_two_sessions_books_once(self, open_session, shared_tutor, slot_at):
        first = BookingService(open_session())
        second = BookingService(open_session())

        def request(student_id):
            return BookingCreate(
                tutor_id=shared_tutor.id,
                student_id=student_id,
                scheduled_at=slot_at(10),
                duration=60,
            )

        rival = {}
        real_create = first.repository.create

        def create_after_rival(**kwargs):
            # The second request runs end to end after the first passed its re-check
            with pytest.raises(BookingConflictException) as exc:
                second.create_booking(request("student-b"))
            rival["error"] = exc.value
            return real_create(**kwargs)

        with patch.object(first.repository, "create", side_effect=create_after_rival):
            winner = first.create_booking(request("student-a"))

        assert rival["error"].status_code == 409
        assert rival["error"].message == RACE_CONFLICT_MESSAGE
        assert [b.id for b in _active_bookings(open_session, shared_tutor.id)] == [winner.id]

    def test_overlapping_slot_from_two_sessions_books_once(
        self, open_session, shared_tutor, slot_at
    ):
        first = BookingService(open_session())
        second = BookingService(open_session())

        rival = {}
        real_create = first.repository.create

        def create_after_rival(**kwargs):
            with pytest.raises(BookingConflictException) as exc:
                second.create_booking(
                    BookingCreate(
                        tutor_id=shared_tutor.id,
                        student_id="student-b",
                        scheduled_at=slot_at(10, 30),
                        duration=30,
                    )
                )
            rival["error"] = exc.value
            return real_create(**kwargs)

        with patch.object(first.repository, "create", side_effect=create_after_rival):
            winner = first.create_booking(
                BookingCreate(
                    tutor_id=shared_tutor.id,
                    student_id="student-a",
                    scheduled_at=slot_at(10),
                    duration=60,
                )
            )

        assert rival["error"].status_code == 409
        assert [b.id for b in _active_bookings(open_session, shared_tutor.id)] == [winner.id]

    def test_reschedule_races_create_for_same_slot(self, open_session, shared_tutor, slot_at):
        mover = BookingService(open_session())
        existing = mover.create_booking(
            BookingCreate(
                tutor_id=shared_tutor.id,
                student_id="student-a",
                scheduled_at=slot_at(13),
                duration=60,
            )
        )
        creator = BookingService(open_session())

        rival = {}
        real_update = mover.repository.update

        def update_after_rival(booking_id, **kwargs):
            with pytest.raises(BookingConflictException) as exc:
                creator.create_booking(
                    BookingCreate(
                        tutor_id=shared_tutor.id,
                        student_id="student-b",
                        scheduled_at=slot_at(10),
                        duration=60,
                    )
                )
            rival["error"] = exc.value
            return real_update(booking_id, **kwargs)

        with patch.object(mover.repository, "update", side_effect=update_after_rival):
            moved = mover.reschedule_booking(existing.id, slot_at(10))

        assert rival["error"].status_code == 409
        bookings = _active_bookings(open_session, shared_tutor.id)
        assert [b.id for b in bookings] == [moved.id]

    def test_second_request_after_commit_sees_first(self, open_session, shared_tutor, slot_at):
        first = BookingService(open_session())
        second = BookingService(open_session())
        booked = first.create_booking(
            BookingCreate(
                tutor_id=shared_tutor.id,
                student_id="student-a",
                scheduled_at=slot_at(10),
                duration=60,
            )
        )

        with pytest.raises(BookingConflictException) as exc:
            second.create_booking(
                BookingCreate(
                    tutor_id=shared_tutor.id,
                    student_id="student-b",
                    scheduled_at=slot_at(10),
                    duration=60,
                )
            )

        assert exc.value.details["conflicting_booking_id"] == booked.id
        assert len(_active_bookings(open_session, shared_tutor.id)) == 1
