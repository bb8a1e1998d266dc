"""
Tests for the booking and session API endpoints.
"""
import pytest
from fastapi.testclient import TestClient

from tutor_booking.common.exceptions import DataSourceError
from tutor_booking.core import booking as booking_core
from tests.database.factories import SessionFactory
from tests.constants import MONDAY, TEST_SESSION_ID, TEST_STUDENT_ID, TEST_TUTOR_ID


def booking_payload(start: str = "10:00 AM", end: str = "11:00 AM", **extra) -> dict:
    payload = {
        "student_id": TEST_STUDENT_ID,
        "tutor_id": TEST_TUTOR_ID,
        "session_date": MONDAY.isoformat(),
        "start_time": start,
        "end_time": end,
    }
    payload.update(extra)
    return payload


@pytest.mark.anyio
class TestBookingsAPIValidate:
    """POST /bookings/validate"""

    async def test_available(self, client: TestClient, mock_data_source):
        response = client.post("/bookings/validate", json=booking_payload())

        assert response.status_code == 200
        assert response.json() == {"available": True}
        mock_data_source.persist_session.assert_not_awaited()

    async def test_conflict(self, client: TestClient, mock_data_source):
        mock_data_source.sessions_for.return_value = [SessionFactory()]

        response = client.post("/bookings/validate", json=booking_payload())

        assert response.status_code == 200
        assert response.json() == {
            "available": False,
            "conflict": "Requested time conflicts with an existing session (10:00:00-11:00:00)",
        }

    async def test_unable_to_verify(self, client: TestClient, mock_data_source):
        mock_data_source.availability.side_effect = DataSourceError("down")
        response = client.post("/bookings/validate", json=booking_payload())
        assert response.json() == {"available": False, "conflict": booking_core.UNABLE_TO_VERIFY}


@pytest.mark.anyio
class TestBookingsAPIBook:
    """POST /bookings"""

    async def test_created(self, client: TestClient, mock_data_source):
        mock_data_source.persist_session.side_effect = lambda s: s.model_copy(update={"id": TEST_SESSION_ID})

        response = client.post("/bookings", json=booking_payload(subject="Math"))

        assert response.status_code == 201
        body = response.json()
        assert body["verdict"]["available"] is True
        assert body["session"]["id"] == TEST_SESSION_ID
        assert body["session"]["start_time"] == "10:00:00"
        assert body["session"]["subject"] == "Math"

    async def test_rejected(self, client: TestClient, mock_data_source):
        response = client.post("/bookings", json=booking_payload("5:00 PM", "6:00 PM", subject="Math"))

        assert response.status_code == 409
        assert response.json()["verdict"]["conflict"] == booking_core.TUTOR_UNAVAILABLE
        mock_data_source.persist_session.assert_not_awaited()

    async def test_persist_failure(self, client: TestClient, mock_data_source):
        mock_data_source.persist_session.side_effect = DataSourceError("down")
        response = client.post("/bookings", json=booking_payload(subject="Math"))
        assert response.status_code == 503
        assert response.json()["session"] is None

    async def test_missing_subject(self, client: TestClient):
        assert client.post("/bookings", json=booking_payload()).status_code == 422


@pytest.mark.anyio
class TestSessionsAPI:
    """/sessions"""

    async def test_list(self, client: TestClient, mock_data_source):
        mock_data_source.sessions_for.return_value = [SessionFactory(id=TEST_SESSION_ID)]

        response = client.get("/sessions", params={"student_id": TEST_STUDENT_ID})

        assert response.status_code == 200
        assert [s["id"] for s in response.json()] == [TEST_SESSION_ID]
        mock_data_source.sessions_for.assert_awaited_once_with(student_id=TEST_STUDENT_ID, tutor_id=None)

    async def test_list_for_tutor(self, client: TestClient, mock_data_source):
        response = client.get("/sessions", params={"tutor_id": TEST_TUTOR_ID})
        assert response.status_code == 200
        mock_data_source.sessions_for.assert_awaited_once_with(student_id=None, tutor_id=TEST_TUTOR_ID)

    async def test_list_without_user(self, client: TestClient):
        response = client.get("/sessions")
        assert response.status_code == 200
        assert response.json() == []

    async def test_overdue(self, client: TestClient, mock_data_source):
        mock_data_source.most_overdue_session.return_value = SessionFactory(id=TEST_SESSION_ID)
        response = client.get("/sessions/overdue")
        assert response.status_code == 200
        assert response.json()["id"] == TEST_SESSION_ID

    async def test_overdue_none(self, client: TestClient):
        response = client.get("/sessions/overdue")
        assert response.status_code == 200
        assert response.json() is None

    async def test_overdue_failure(self, client: TestClient, mock_data_source):
        mock_data_source.most_overdue_session.side_effect = DataSourceError("down")
        assert client.get("/sessions/overdue").status_code == 503

    async def test_delete(self, client: TestClient, mock_data_source):
        mock_data_source.get_session.return_value = SessionFactory(id=TEST_SESSION_ID)
        response = client.delete(f"/sessions/{TEST_SESSION_ID}")
        assert response.status_code == 204

    async def test_delete_missing(self, client: TestClient):
        response = client.delete(f"/sessions/{TEST_SESSION_ID}")
        assert response.status_code == 404
        assert response.json()["detail"] == "Session not found in database"

    async def test_delete_failure(self, client: TestClient, mock_data_source):
        mock_data_source.get_session.return_value = SessionFactory(id=TEST_SESSION_ID)
        mock_data_source.delete_session.side_effect = DataSourceError("down")
        assert client.delete(f"/sessions/{TEST_SESSION_ID}").status_code == 503
