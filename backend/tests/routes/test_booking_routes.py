# backend/tests/routes/test_booking_routes.py
"""HTTP tests for /api/v1/bookings."""

from datetime import timedelta

import pytest
import ulid

from linglix.utils.time_utils import to_utc_date, utc_now


@pytest.fixture
def create_booking(client, weekly_availability, slot_at):
    def _create(hour=10, minute=0, duration=60, student_id="student-1"):
        return client.post(
            "/api/v1/bookings",
            json={
                "tutor_id": weekly_availability.id,
                "student_id": student_id,
                "scheduled_at": slot_at(hour, minute).isoformat(),
                "duration": duration,
            },
        )

    return _create


@pytest.mark.integration
class TestCreateBookingRoute:
    def test_created(self, create_booking):
        response = create_booking()
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Booking created successfully. Please complete payment."
        assert body["booking"]["status"] == "PENDING"
        assert body["booking"]["price"] == 60.0

    def test_conflict_is_409_with_reason(self, create_booking):
        create_booking(hour=10)
        response = create_booking(hour=10, minute=30, duration=30, student_id="student-2")
        assert response.status_code == 409
        assert response.json()["detail"] == "Time slot conflicts with an existing booking"
        assert response.json()["code"] == "BOOKING_CONFLICT"

    def test_outside_window_is_400(self, create_booking):
        response = create_booking(hour=8)
        assert response.status_code == 400
        assert response.json()["detail"] == "Time slot must be between 09:00 and 17:00 UTC"

    def test_invalid_duration(self, create_booking):
        assert create_booking(duration=45).status_code == 422


@pytest.mark.integration
class TestAvailabilityQueries:
    def test_check_availability(self, client, create_booking, weekly_availability, slot_at):
        booking_id = create_booking(hour=10).json()["booking"]["id"]
        response = client.post(
            "/api/v1/bookings/check-availability",
            json={
                "tutor_id": weekly_availability.id,
                "scheduled_at": slot_at(10, 30).isoformat(),
                "duration": 30,
            },
        )
        body = response.json()
        assert response.status_code == 200
        assert body["available"] is False
        assert body["reason"] == "Time slot conflicts with an existing booking"
        assert body["conflicting_booking"]["id"] == booking_id

    def test_check_availability_free(self, client, weekly_availability, slot_at):
        response = client.post(
            "/api/v1/bookings/check-availability",
            json={
                "tutor_id": weekly_availability.id,
                "scheduled_at": slot_at(11).isoformat(),
                "duration": 60,
            },
        )
        assert response.json() == {"available": True, "reason": None, "conflicting_booking": None}

    def test_slots_for_date(self, client, create_booking, weekly_availability, booking_day):
        create_booking(hour=9)
        response = client.get(
            "/api/v1/bookings/availability",
            params={"tutor_id": weekly_availability.id, "date": booking_day.isoformat(), "duration": 60},
        )
        body = response.json()
        assert response.status_code == 200
        assert body["date"] == booking_day.isoformat()
        flags = [slot["available"] for slot in body["slots"]]
        assert flags[:3] == [False, False, True]
        assert body["slots"][0]["reason"] == "Time slot is already booked"

    def test_default_date_range(self, client, weekly_availability):
        response = client.get(
            "/api/v1/bookings/availability", params={"tutor_id": weekly_availability.id}
        )
        body = response.json()
        today = to_utc_date(utc_now())
        assert body["start_date"] == today.isoformat()
        assert body["end_date"] == (today + timedelta(days=7)).isoformat()
        assert len(body["available_dates"]) == 8

    def test_range_too_long(self, client, weekly_availability, booking_day):
        response = client.get(
            "/api/v1/bookings/availability",
            params={
                "tutor_id": weekly_availability.id,
                "start_date": booking_day.isoformat(),
                "end_date": (booking_day + timedelta(days=45)).isoformat(),
            },
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Date range cannot exceed 30 days"

    def test_unknown_tutor(self, client):
        response = client.get("/api/v1/bookings/availability", params={"tutor_id": str(ulid.ULID())})
        assert response.status_code == 404


@pytest.mark.integration
class TestBookingLifecycleRoutes:
    def test_get_and_list(self, client, create_booking):
        booking_id = create_booking().json()["booking"]["id"]
        assert client.get(f"/api/v1/bookings/{booking_id}").json()["id"] == booking_id

        listed = client.get("/api/v1/bookings", params={"student_id": "student-1"}).json()
        assert listed["pagination"] == {"total": 1, "limit": 20, "offset": 0, "has_more": False}
        assert listed["bookings"][0]["id"] == booking_id

    def test_get_missing(self, client):
        response = client.get(f"/api/v1/bookings/{ulid.ULID()}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Booking not found"

    def test_cancel(self, client, create_booking):
        booking_id = create_booking().json()["booking"]["id"]
        response = client.post(f"/api/v1/bookings/{booking_id}/cancel", json={"reason": "Travel"})
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"

        again = client.post(f"/api/v1/bookings/{booking_id}/cancel")
        assert again.status_code == 422
        assert again.json()["detail"] == "Booking is already cancelled"

    def test_reschedule(self, client, create_booking, slot_at):
        booking_id = create_booking(hour=10).json()["booking"]["id"]
        response = client.post(
            f"/api/v1/bookings/{booking_id}/reschedule",
            json={"scheduled_at": slot_at(15).isoformat()},
        )
        assert response.status_code == 200

    def test_status_change(self, client, create_booking):
        booking_id = create_booking().json()["booking"]["id"]
        response = client.patch(f"/api/v1/bookings/{booking_id}/status", json={"status": "CONFIRMED"})
        assert response.status_code == 200
        assert response.json()["status"] == "CONFIRMED"

        bad = client.patch(f"/api/v1/bookings/{booking_id}/status", json={"status": "PENDING"})
        assert bad.status_code == 422


@pytest.mark.integration
def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert client.get("/api/v1/health").status_code == 200


@pytest.mark.integration
def test_prometheus_metrics_exposed(client, create_booking):
    create_booking()
    response = client.get("/metrics/prometheus")
    assert response.status_code == 200
    assert "linglix_service_operations_total" in response.text
