"""Unit tests for the booking service."""

from datetime import date
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest

from app.core.exceptions import AuthorizationError, BookingConflictError, NotFoundError
from app.models.booking import BookingKind, BookingStatus
from app.schemas.booking import BookingCreate, BookingUpdate
from app.services import conflict_rules
from app.services.booking_service import BookingService, week_bounds
from tests.conftest import make_booking, make_user, MONDAY, FRIDAY

TUESDAY = date(2026, 9, 8)


@pytest.fixture
def service(mock_db):
    return BookingService(db=mock_db, revalidate_updates=False)


def _create_request(class_id, booking_date=TUESDAY, period=3, kind=BookingKind.HOMEWORK, **extra):
    return BookingCreate(
        kind=kind, date=booking_date, period=period, class_id=class_id, subject_id=uuid4(), **extra
    )


class TestCreateBooking:

    @pytest.mark.asyncio
    async def test_create_booking_success(self, service, mock_db, teacher):
        class_id = uuid4()
        with patch.object(service, "_bookings_for_class_day", AsyncMock(return_value=[])):
            booking = await service.create_booking(_create_request(class_id), teacher)

        mock_db.add.assert_called_once()
        mock_db.commit.assert_called_once()
        assert booking.created_by_id == teacher.id
        assert booking.status == BookingStatus.SCHEDULED
        assert booking.title == "Homework"

    @pytest.mark.asyncio
    async def test_create_booking_keeps_given_title(self, service, teacher):
        with patch.object(service, "_bookings_for_class_day", AsyncMock(return_value=[])):
            booking = await service.create_booking(
                _create_request(uuid4(), title="Unit 3 worksheet"), teacher
            )
        assert booking.title == "Unit 3 worksheet"

    @pytest.mark.asyncio
    async def test_slot_taken(self, service, mock_db, teacher):
        class_id = uuid4()
        existing = [make_booking(class_id, TUESDAY, period=3)]

        with patch.object(service, "_bookings_for_class_day", AsyncMock(return_value=existing)):
            with pytest.raises(BookingConflictError) as exc:
                await service.create_booking(_create_request(class_id), teacher)

        assert exc.value.reason == conflict_rules.SLOT_ALREADY_BOOKED
        mock_db.add.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_second_quiz_rejected_homework_admitted(self, service, teacher):
        class_id = uuid4()
        existing = [make_booking(class_id, TUESDAY, period=1, kind=BookingKind.QUIZ)]

        with patch.object(service, "_bookings_for_class_day", AsyncMock(return_value=existing)):
            with pytest.raises(BookingConflictError) as exc:
                await service.create_booking(_create_request(class_id, period=2, kind=BookingKind.QUIZ), teacher)
            assert exc.value.reason == conflict_rules.DAILY_QUIZ_CAP

            booking = await service.create_booking(_create_request(class_id, period=3), teacher)
            assert booking.kind == BookingKind.HOMEWORK

    @pytest.mark.asyncio
    async def test_friday_period_five(self, service, teacher):
        with patch.object(service, "_bookings_for_class_day", AsyncMock(return_value=[])):
            with pytest.raises(BookingConflictError) as exc:
                await service.create_booking(_create_request(uuid4(), booking_date=FRIDAY, period=5), teacher)

        assert exc.value.reason == conflict_rules.PERIOD_EXCEEDS_DAY


class TestUpdateBooking:

    @pytest.mark.asyncio
    async def test_not_found(self, service, teacher):
        with patch.object(service, "_get_booking", AsyncMock(return_value=None)):
            with pytest.raises(NotFoundError):
                await service.update_booking(uuid4(), BookingUpdate(notes="x"), teacher)

    @pytest.mark.asyncio
    async def test_only_creator_or_admin(self, service, teacher):
        booking = make_booking(uuid4(), created_by_id=uuid4())
        with patch.object(service, "_get_booking", AsyncMock(return_value=booking)):
            with pytest.raises(AuthorizationError):
                await service.update_booking(booking.id, BookingUpdate(notes="x"), teacher)

    @pytest.mark.asyncio
    async def test_admin_can_update(self, service, admin):
        booking = make_booking(uuid4(), created_by_id=uuid4())
        with patch.object(service, "_get_booking", AsyncMock(return_value=booking)):
            result = await service.update_booking(booking.id, BookingUpdate(notes="Bring calculators"), admin)

        assert result.notes == "Bring calculators"

    @pytest.mark.asyncio
    async def test_move_without_revalidation_is_applied(self, service, teacher):
        class_id = uuid4()
        booking = make_booking(class_id, TUESDAY, period=3, created_by_id=teacher.id)
        lookup = AsyncMock(return_value=[make_booking(class_id, TUESDAY, period=4)])

        with patch.object(service, "_get_booking", AsyncMock(return_value=booking)), \
                patch.object(service, "_bookings_for_class_day", lookup):
            result = await service.update_booking(booking.id, BookingUpdate(period=4), teacher)

        assert result.period == 4
        lookup.assert_not_called()

    @pytest.mark.asyncio
    async def test_move_with_revalidation_rejected(self, mock_db, teacher):
        service = BookingService(db=mock_db, revalidate_updates=True)
        class_id = uuid4()
        booking = make_booking(class_id, TUESDAY, period=3, created_by_id=teacher.id)
        others = [booking, make_booking(class_id, TUESDAY, period=4)]

        with patch.object(service, "_get_booking", AsyncMock(return_value=booking)), \
                patch.object(service, "_bookings_for_class_day", AsyncMock(return_value=others)):
            with pytest.raises(BookingConflictError) as exc:
                await service.update_booking(booking.id, BookingUpdate(period=4), teacher)

        assert exc.value.reason == conflict_rules.SLOT_ALREADY_BOOKED
        assert booking.period == 3
        mock_db.commit.assert_not_called()


class TestCancelBooking:

    @pytest.mark.asyncio
    async def test_creator_cancels(self, service, mock_db, teacher):
        booking = make_booking(uuid4(), created_by_id=teacher.id)
        with patch.object(service, "_get_booking", AsyncMock(return_value=booking)):
            result = await service.cancel_booking(booking.id, teacher)

        assert result.status == BookingStatus.CANCELLED
        mock_db.commit.assert_called_once()

    @pytest.mark.asyncio
    async def test_other_teacher_cannot_cancel(self, service, teacher):
        booking = make_booking(uuid4(), created_by_id=uuid4())
        with patch.object(service, "_get_booking", AsyncMock(return_value=booking)):
            with pytest.raises(AuthorizationError):
                await service.cancel_booking(booking.id, make_user())


class TestWeekBounds:

    def test_mid_week_day_maps_to_monday(self):
        assert week_bounds(date(2026, 9, 10)) == (MONDAY, date(2026, 9, 13))

    def test_monday_is_kept(self):
        assert week_bounds(MONDAY)[0] == MONDAY
