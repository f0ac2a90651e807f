# backend/tests/routes/test_availability_routes.py
"""HTTP tests for /api/v1/tutors/{tutor_id}/availability."""

import pytest
import ulid


def _url(tutor_id, window_id=None):
    base = f"/api/v1/tutors/{tutor_id}/availability"
    return f"{base}/{window_id}" if window_id else base


@pytest.mark.integration
class TestAvailabilityRoutes:
    def test_create_and_list(self, client, tutor):
        response = client.post(
            _url(tutor.id), json={"day_of_week": 1, "start_time": "09:00", "end_time": "12:00"}
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Availability created successfully"
        assert body["availability"]["start_time"] == "09:00"
        assert body["availability"]["timezone"] == "UTC"

        listed = client.get(_url(tutor.id)).json()["availability"]
        assert [w["id"] for w in listed] == [body["availability"]["id"]]

    @pytest.mark.parametrize(
        "payload",
        [
            {"day_of_week": 7, "start_time": "09:00", "end_time": "12:00"},
            {"day_of_week": 1, "start_time": "9:00", "end_time": "12:00"},
            {"day_of_week": 1, "start_time": "09:00", "end_time": "24:00"},
            {"day_of_week": 1, "start_time": "09:00"},
            {"day_of_week": 1, "start_time": "09:00", "end_time": "12:00", "extra": True},
        ],
    )
    def test_shape_validation(self, client, tutor, payload):
        response = client.post(_url(tutor.id), json=payload)
        assert response.status_code == 422
        assert response.json()["code"] == "validation_error"

    def test_end_before_start(self, client, tutor):
        response = client.post(
            _url(tutor.id), json={"day_of_week": 1, "start_time": "12:00", "end_time": "09:00"}
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "End time must be after start time"

    def test_overlap_conflict(self, client, tutor):
        client.post(_url(tutor.id), json={"day_of_week": 1, "start_time": "09:00", "end_time": "12:00"})
        response = client.post(
            _url(tutor.id), json={"day_of_week": 1, "start_time": "11:00", "end_time": "13:00"}
        )
        assert response.status_code == 409
        body = response.json()
        assert body["detail"] == "Availability slot overlaps with existing slot"
        assert body["code"] == "AVAILABILITY_OVERLAP"
        assert body["status"] == 409
        assert body["instance"] == _url(tutor.id)

    def test_unknown_tutor(self, client):
        response = client.get(_url(str(ulid.ULID())))
        assert response.status_code == 404
        assert response.json()["detail"] == "Tutor not found"

    def test_update_and_delete(self, client, tutor):
        created = client.post(
            _url(tutor.id), json={"day_of_week": 3, "start_time": "09:00", "end_time": "12:00"}
        ).json()["availability"]

        patched = client.patch(_url(tutor.id, created["id"]), json={"is_active": False})
        assert patched.status_code == 200
        assert patched.json()["availability"]["is_active"] is False

        deleted = client.delete(_url(tutor.id, created["id"]))
        assert deleted.status_code == 200
        assert deleted.json() == {"success": True, "message": "Availability deleted successfully"}

        assert client.delete(_url(tutor.id, created["id"])).status_code == 404
