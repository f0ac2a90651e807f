# backend/tests/services/test_availability_service.py
"""Integration tests for AvailabilityService against SQLite."""

import pytest
import ulid

from linglix.core.exceptions import (
    AvailabilityOverlapException,
    NotFoundException,
    ValidationException,
)
from linglix.schemas.availability import RecurringAvailabilityCreate, RecurringAvailabilityUpdate
from linglix.services.availability_service import AvailabilityService


@pytest.fixture
def service(db):
    return AvailabilityService(db)


def window(day=1, start="09:00", end="12:00", **kwargs):
    return RecurringAvailabilityCreate(day_of_week=day, start_time=start, end_time=end, **kwargs)


@pytest.mark.integration
class TestCreateWindow:
    def test_creates_window(self, service, tutor):
        created = service.create_window(tutor.id, window())
        assert created.id
        assert created.tutor_id == tutor.id
        assert created.timezone == "UTC"
        assert [w.id for w in service.list_windows(tutor.id)] == [created.id]

    def test_unknown_tutor(self, service):
        with pytest.raises(NotFoundException) as exc:
            service.create_window(str(ulid.ULID()), window())
        assert exc.value.message == "Tutor not found"

    @pytest.mark.parametrize("start, end", [("12:00", "09:00"), ("09:00", "09:00")])
    def test_end_must_be_after_start(self, service, tutor, start, end):
        with pytest.raises(ValidationException) as exc:
            service.create_window(tutor.id, window(start=start, end=end))
        assert exc.value.message == "End time must be after start time"
        assert exc.value.status_code == 400

    def test_overlap_rejected(self, service, tutor):
        service.create_window(tutor.id, window(start="09:00", end="12:00"))
        with pytest.raises(AvailabilityOverlapException) as exc:
            service.create_window(tutor.id, window(start="11:00", end="14:00"))
        assert exc.value.status_code == 409
        assert exc.value.message == "Availability slot overlaps with existing slot"
        assert exc.value.details["conflicting_slot"] == "09:00-12:00"

    def test_touching_windows_allowed(self, service, tutor):
        service.create_window(tutor.id, window(start="09:00", end="12:00"))
        service.create_window(tutor.id, window(start="12:00", end="15:00"))
        assert len(service.list_windows(tutor.id)) == 2

    def test_same_hours_on_another_day_allowed(self, service, tutor):
        service.create_window(tutor.id, window(day=1))
        service.create_window(tutor.id, window(day=2))
        assert len(service.list_windows(tutor.id)) == 2

    def test_inactive_windows_do_not_block(self, service, tutor):
        service.create_window(tutor.id, window(is_active=False))
        service.create_window(tutor.id, window())
        assert len(service.list_windows(tutor.id)) == 2

    def test_other_tutors_windows_do_not_block(self, service, tutor, make_tutor):
        other = make_tutor()
        service.create_window(other.id, window())
        service.create_window(tutor.id, window())
        assert len(service.list_windows(tutor.id)) == 1


@pytest.mark.integration
class TestUpdateAndDelete:
    def test_partial_update(self, service, tutor):
        created = service.create_window(tutor.id, window())
        updated = service.update_window(
            tutor.id, created.id, RecurringAvailabilityUpdate(end_time="13:00")
        )
        assert updated.start_time == "09:00"
        assert updated.end_time == "13:00"

    def test_update_rechecks_order(self, service, tutor):
        created = service.create_window(tutor.id, window())
        with pytest.raises(ValidationException):
            service.update_window(
                tutor.id, created.id, RecurringAvailabilityUpdate(start_time="12:30")
            )

    def test_update_does_not_conflict_with_itself(self, service, tutor):
        created = service.create_window(tutor.id, window(start="09:00", end="12:00"))
        updated = service.update_window(
            tutor.id, created.id, RecurringAvailabilityUpdate(start_time="10:00")
        )
        assert updated.start_time == "10:00"

    def test_reactivating_into_overlap_is_rejected(self, service, tutor):
        inactive = service.create_window(tutor.id, window(is_active=False))
        service.create_window(tutor.id, window(start="10:00", end="11:00"))
        with pytest.raises(AvailabilityOverlapException):
            service.update_window(
                tutor.id, inactive.id, RecurringAvailabilityUpdate(is_active=True)
            )

    def test_update_other_tutors_window_is_not_found(self, service, tutor, make_tutor):
        other = make_tutor()
        foreign = service.create_window(other.id, window())
        with pytest.raises(NotFoundException) as exc:
            service.update_window(tutor.id, foreign.id, RecurringAvailabilityUpdate(end_time="13:00"))
        assert exc.value.message == "Availability not found"

    def test_delete(self, service, tutor):
        created = service.create_window(tutor.id, window())
        service.delete_window(tutor.id, created.id)
        assert service.list_windows(tutor.id) == []

    def test_delete_missing(self, service, tutor):
        with pytest.raises(NotFoundException):
            service.delete_window(tutor.id, str(ulid.ULID()))
