import logging
from datetime import date, timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.exceptions import AuthorizationError, BookingConflictError, NotFoundError
from app.models.booking import Booking, BookingStatus
from app.models.user import User
from app.schemas.booking import BookingCreate, BookingUpdate
from app.services.approval_workflow import can_modify_booking
from app.services.conflict_rules import BookingCandidate, validate_booking

logger = logging.getLogger(__name__)

# Fields that move a booking within the grid
SCHEDULING_FIELDS = ("date", "period", "class_id", "kind")


def week_bounds(week_start: date):
    """Monday-to-Sunday range of the week containing week_start."""
    monday = week_start - timedelta(days=week_start.weekday())
    return monday, monday + timedelta(days=6)


class BookingService:
    """Admits, changes and cancels bookings in the master schedule."""

    def __init__(self, db: AsyncSession, revalidate_updates: Optional[bool] = None):
        self.db = db
        self.revalidate_updates = (
            settings.REVALIDATE_BOOKING_UPDATES if revalidate_updates is None else revalidate_updates
        )

    # ========== Data access ==========

    async def _get_booking(self, booking_id: UUID) -> Optional[Booking]:
        result = await self.db.execute(select(Booking).where(Booking.id == booking_id))
        return result.scalar_one_or_none()

    async def _bookings_for_class_day(self, class_id: UUID, booking_date: date) -> List[Booking]:
        result = await self.db.execute(
            select(Booking).where(
                and_(
                    Booking.class_id == class_id,
                    Booking.date == booking_date,
                    Booking.status == BookingStatus.SCHEDULED
                )
            )
        )
        return list(result.scalars().all())

    async def _get_modifiable(self, booking_id: UUID, user: User) -> Booking:
        booking = await self._get_booking(booking_id)
        if not booking:
            raise NotFoundError("Booking not found")
        if not can_modify_booking(user, booking):
            raise AuthorizationError("You can only modify your own bookings")
        return booking

    # ========== Operations ==========

    async def create_booking(self, data: BookingCreate, user: User) -> Booking:
        """
        Validate and store a booking owned by the requesting user.

        Raises:
            BookingConflictError: If a conflict rule rejects the booking
        """
        candidate = BookingCandidate(
            date=data.date,
            period=data.period,
            class_id=data.class_id,
            kind=data.kind
        )
        logger.info(
            f"Booking attempt by {user.id}: class {data.class_id} {data.date} "
            f"period {data.period} ({data.kind.value})"
        )

        existing = await self._bookings_for_class_day(data.class_id, data.date)
        try:
            validate_booking(candidate, existing)
        except BookingConflictError as e:
            logger.info(f"Booking rejected for class {data.class_id} on {data.date}: {e.reason}")
            raise

        booking = Booking(
            title=data.title or data.kind.value.capitalize(),
            kind=data.kind,
            date=data.date,
            period=data.period,
            class_id=data.class_id,
            subject_id=data.subject_id,
            created_by_id=user.id,
            status=BookingStatus.SCHEDULED,
            notes=data.notes
        )
        self.db.add(booking)
        await self.db.commit()
        await self.db.refresh(booking)

        logger.info(f"Booking created: {booking.id}")
        return booking

    async def update_booking(self, booking_id: UUID, data: BookingUpdate, user: User) -> Booking:
        """
        Apply a partial update. Only the creator or an admin may do this.

        The conflict rules are re-run only when revalidation is switched on.
        """
        booking = await self._get_modifiable(booking_id, user)
        update_data = data.model_dump(exclude_unset=True)

        moved = [
            field for field in SCHEDULING_FIELDS
            if field in update_data and update_data[field] != getattr(booking, field)
        ]

        if moved:
            if self.revalidate_updates:
                candidate = BookingCandidate(
                    date=update_data.get("date", booking.date),
                    period=update_data.get("period", booking.period),
                    class_id=update_data.get("class_id", booking.class_id),
                    kind=update_data.get("kind", booking.kind),
                    id=booking.id
                )
                existing = await self._bookings_for_class_day(candidate.class_id, candidate.date)
                validate_booking(candidate, existing)
            else:
                logger.warning(
                    f"Booking {booking.id} scheduling fields changed without revalidation: {', '.join(moved)}"
                )

        for field, value in update_data.items():
            setattr(booking, field, value)

        await self.db.commit()
        await self.db.refresh(booking)
        return booking

    async def cancel_booking(self, booking_id: UUID, user: User) -> Booking:
        booking = await self._get_modifiable(booking_id, user)
        booking.status = BookingStatus.CANCELLED

        await self.db.commit()
        await self.db.refresh(booking)

        logger.info(f"Booking cancelled: {booking.id}")
        return booking

    async def list_bookings(
        self,
        week_start: Optional[date] = None,
        class_id: Optional[UUID] = None,
        teacher_id: Optional[UUID] = None
    ) -> List[Booking]:
        """Scheduled bookings, optionally narrowed to one week, class or teacher."""
        conditions = [Booking.status == BookingStatus.SCHEDULED]

        if week_start:
            start, end = week_bounds(week_start)
            conditions.append(Booking.date >= start)
            conditions.append(Booking.date <= end)
        if class_id:
            conditions.append(Booking.class_id == class_id)
        if teacher_id:
            conditions.append(Booking.created_by_id == teacher_id)

        result = await self.db.execute(
            select(Booking)
            .where(and_(*conditions))
            .order_by(Booking.date, Booking.period)
        )
        return list(result.scalars().all())
