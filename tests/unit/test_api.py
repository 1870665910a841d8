"""Router tests: request parsing and error-to-status mapping."""

from datetime import date
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.core.database import get_db
from app.core.exceptions import (
    AuthorizationError, BookingConflictError, InvalidTransitionError, NotFoundError
)
from app.core.security import get_current_user
from app.main import app
from app.models.academic_entry import EntryStatus
from app.services.academic_entry_service import WorkflowResult
from app.services.side_effects import SideEffectOutcome
from tests.conftest import make_booking, make_summary, make_user


@pytest.fixture
def client(mock_db):
    user = make_user(department="MATH")

    async def override_db():
        yield mock_db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_current_user] = lambda: user
    yield TestClient(app), user
    app.dependency_overrides.clear()


def _booking_body(**extra):
    body = {
        "kind": "quiz",
        "date": "2026-09-08",
        "period": 3,
        "class_id": str(uuid4()),
        "subject_id": str(uuid4()),
    }
    body.update(extra)
    return body


class TestBookingsApi:

    def test_create_booking(self, client):
        http, user = client
        booking = make_booking(uuid4(), date(2026, 9, 8), period=3, created_by_id=user.id)

        with patch("app.api.v1.bookings.BookingService.create_booking", AsyncMock(return_value=booking)):
            response = http.post("/api/v1/bookings", json=_booking_body())

        assert response.status_code == 201
        assert response.json()["period"] == 3

    def test_conflict_maps_to_400(self, client):
        http, _ = client
        error = BookingConflictError("Period slot already booked for this class. Please choose another period.",
                                     reason="SLOT_ALREADY_BOOKED")

        with patch("app.api.v1.bookings.BookingService.create_booking", AsyncMock(side_effect=error)):
            response = http.post("/api/v1/bookings", json=_booking_body())

        assert response.status_code == 400
        assert "slot already booked" in response.json()["detail"]

    @pytest.mark.parametrize("error,status_code", [
        (AuthorizationError("You can only modify your own bookings"), 403),
        (NotFoundError("Booking not found"), 404),
    ])
    def test_cancel_errors(self, client, error, status_code):
        http, _ = client
        with patch("app.api.v1.bookings.BookingService.cancel_booking", AsyncMock(side_effect=error)):
            response = http.patch(f"/api/v1/bookings/{uuid4()}/cancel")

        assert response.status_code == status_code

    def test_null_period_rejected_before_service(self, client):
        http, _ = client
        update = AsyncMock()
        with patch("app.api.v1.bookings.BookingService.update_booking", update):
            response = http.patch(f"/api/v1/bookings/{uuid4()}", json={"period": None})

        assert response.status_code == 422
        update.assert_not_called()

    def test_list_bookings(self, client):
        http, _ = client
        bookings = [make_booking(uuid4(), date(2026, 9, 8), period=p) for p in (1, 2)]

        with patch("app.api.v1.bookings.BookingService.list_bookings", AsyncMock(return_value=bookings)) as listing:
            response = http.get("/api/v1/bookings", params={"week_start": "2026-09-09"})

        assert response.status_code == 200
        assert response.json()["total"] == 2
        assert listing.call_args.kwargs["week_start"] == date(2026, 9, 9)


class TestEntriesApi:

    def test_submit_reports_side_effects(self, client):
        http, user = client
        entry = make_summary(user, status=EntryStatus.APPROVED)
        result = WorkflowResult(entry=entry, side_effects=[
            SideEffectOutcome(name="notification", ok=False, error="Resend unavailable")
        ])

        with patch("app.api.v1.entries.AcademicEntryService.submit", AsyncMock(return_value=result)):
            response = http.post(f"/api/v1/learning-summaries/{entry.id}/submit")

        assert response.status_code == 200
        body = response.json()
        assert body["entry"]["status"] == "approved"
        assert body["side_effects"] == [{"name": "notification", "ok": False, "error": "Resend unavailable"}]

    def test_invalid_transition_maps_to_409(self, client):
        http, _ = client
        error = InvalidTransitionError("Cannot approve an entry that is approved", reason="INVALID_TRANSITION")

        with patch("app.api.v1.entries.AcademicEntryService.approve", AsyncMock(side_effect=error)):
            response = http.post(f"/api/v1/learning-support/{uuid4()}/approve", json={"comments": "ok"})

        assert response.status_code == 409

    def test_bad_teams_link_rejected_by_schema(self, client):
        http, _ = client
        response = http.post("/api/v1/learning-support", json={
            "term": "TERM_1",
            "week_number": 2,
            "grade": "10",
            "class_id": str(uuid4()),
            "subject_id": str(uuid4()),
            "teams_link": "teams.microsoft.com/l/meetup",
        })

        assert response.status_code == 422


class TestCalendarApi:

    def test_friday_periods(self, client):
        http, _ = client
        response = http.get("/api/v1/calendar/periods", params={"date": "2026-09-11", "class_name": "A11 [AMT]/1"})

        body = response.json()
        assert body["is_short_day"] is True
        assert body["grade_band"] == "G11_12"
        assert [p["period"] for p in body["periods"]] == [1, 2, 3, 4]

    def test_week_range(self, client):
        http, _ = client
        response = http.get("/api/v1/calendar/weeks/TERM_1/1", params={"reference_date": "2026-09-02"})

        body = response.json()
        assert body["start_date"] == "2026-09-01"
        assert body["end_date"] == "2026-09-07"
        assert body["label"] == "Term 1 Week 1"

    def test_week_out_of_range(self, client):
        http, _ = client
        response = http.get("/api/v1/calendar/weeks/TERM_1/16")
        assert response.status_code == 400


def test_health():
    response = TestClient(app).get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
