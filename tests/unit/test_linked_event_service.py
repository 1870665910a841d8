"""Unit tests for linked booking creation and cancellation."""

from datetime import date
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest

from app.models.academic_entry import EntryStatus
from app.models.booking import BookingKind, BookingStatus
from app.services.linked_event_service import (
    LinkedEventService, build_linked_booking, linked_booking_period
)
from tests.conftest import make_booking, make_summary, make_support

TUESDAY = date(2026, 9, 8)


class TestBuildLinkedBooking:

    def test_summary_creates_quiz(self, teacher):
        entry = make_summary(teacher, scheduled_date=TUESDAY, scheduled_slot="2", upcoming_topics="Limits")
        booking = build_linked_booking(entry)

        assert booking.kind == BookingKind.QUIZ
        assert booking.title == "Quiz - MATH10"
        assert booking.period == 2
        assert booking.notes == "Auto-created from Learning Summary. Topics: Limits"
        assert booking.status == BookingStatus.SCHEDULED

    def test_support_creates_session(self, teacher):
        entry = make_support(teacher, scheduled_date=TUESDAY, scheduled_slot="3")
        booking = build_linked_booking(entry)

        assert booking.kind == BookingKind.HOMEWORK
        assert booking.title == "Support session - MATH10"

    def test_support_sessions_can_be_switched_off(self, teacher):
        entry = make_support(teacher, scheduled_date=TUESDAY)
        with patch("app.services.linked_event_service.settings") as mock_settings:
            mock_settings.MATERIALIZE_SUPPORT_SESSIONS = False
            assert build_linked_booking(entry) is None

    @pytest.mark.parametrize("slot,period", [
        ("5", 5),
        ("13:40", 7),
        ("12:20", 1),   # lunch break for Grades 9-10
        (None, 1),
    ])
    def test_period_from_slot(self, teacher, slot, period):
        entry = make_summary(teacher, scheduled_date=TUESDAY, scheduled_slot=slot)
        assert linked_booking_period(entry) == period

    def test_grade_band_follows_class(self, teacher):
        # 12:20 falls in period 6 for Grades 11-12
        entry = make_summary(teacher, class_name="A12 [AMT]/2", scheduled_date=TUESDAY, scheduled_slot="12:20")
        assert linked_booking_period(entry) == 6


class TestMaterialize:

    @pytest.mark.asyncio
    async def test_nothing_to_do_without_sub_event(self, mock_db, teacher):
        entry = make_summary(teacher, status=EntryStatus.APPROVED)
        assert await LinkedEventService(mock_db).materialize(entry) is None
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_already_linked(self, mock_db, teacher):
        entry = make_summary(teacher, scheduled_date=TUESDAY, linked_booking_id=uuid4())
        assert await LinkedEventService(mock_db).materialize(entry) is None

    @pytest.mark.asyncio
    async def test_creates_and_links(self, mock_db, teacher):
        entry = make_summary(teacher, scheduled_date=TUESDAY)
        outcome = await LinkedEventService(mock_db).materialize(entry)

        assert outcome.ok
        booking = mock_db.add.call_args.args[0]
        assert entry.linked_booking_id == booking.id
        mock_db.begin_nested.assert_called_once()
        mock_db.commit.assert_called_once()


class TestCancel:

    @pytest.mark.asyncio
    async def test_cancels_and_clears_reference(self, mock_db, teacher):
        booking = make_booking(uuid4(), TUESDAY, kind=BookingKind.QUIZ)
        entry = make_summary(teacher, scheduled_date=TUESDAY, linked_booking_id=booking.id)
        result = MagicMock()
        result.scalar_one_or_none.return_value = booking
        mock_db.execute.return_value = result

        outcome = await LinkedEventService(mock_db).cancel(entry)

        assert outcome.ok
        assert booking.status == BookingStatus.CANCELLED
        assert entry.linked_booking_id is None

    @pytest.mark.asyncio
    async def test_failure_is_reported(self, mock_db, teacher):
        entry = make_summary(teacher, linked_booking_id=uuid4())
        mock_db.execute.side_effect = RuntimeError("connection lost")

        outcome = await LinkedEventService(mock_db).cancel(entry)

        assert outcome.ok is False
        assert outcome.error == "connection lost"
        mock_db.rollback.assert_called_once()

    @pytest.mark.asyncio
    async def test_no_link(self, mock_db, teacher):
        assert await LinkedEventService(mock_db).cancel(make_summary(teacher)) is None
