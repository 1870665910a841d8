"""
Linked events: the master schedule booking that mirrors an approved entry's
quiz or support session.

Bookings created here skip the booking conflict rules; the entry rules
already ran when the entry was saved.
"""
import logging
import uuid
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.models.booking import Booking, BookingKind, BookingStatus
from app.models.academic_entry import LearningSummary
from app.services.calendar_grid import get_grade_band, resolve_period
from app.services.side_effects import SideEffectOutcome

logger = logging.getLogger(__name__)

MATERIALIZE_EFFECT = "linked_booking"
CANCEL_EFFECT = "linked_booking_cancel"

DEFAULT_PERIOD = 1


def linked_booking_period(entry) -> int:
    """Bell period for the entry's sub-event, falling back to the first period."""
    class_name = entry.class_info.name if entry.class_info is not None else None
    period = resolve_period(entry.scheduled_slot, get_grade_band(class_name), entry.scheduled_date)
    return period or DEFAULT_PERIOD


def build_linked_booking(entry) -> Optional[Booking]:
    """
    Booking mirroring the entry's sub-event, or None when the entry kind does
    not produce one.
    """
    subject_code = entry.subject.code if entry.subject is not None else ""

    if isinstance(entry, LearningSummary):
        kind = BookingKind.QUIZ
        title = f"Quiz - {subject_code}"
        notes = "Auto-created from Learning Summary."
        if entry.upcoming_topics:
            notes = f"{notes} Topics: {entry.upcoming_topics}"
    else:
        if not settings.MATERIALIZE_SUPPORT_SESSIONS:
            return None
        kind = BookingKind.HOMEWORK
        title = f"Support session - {subject_code}"
        notes = "Auto-created from Learning Support."
        if entry.session_type:
            notes = f"{notes} Session: {entry.session_type}"

    return Booking(
        id=uuid.uuid4(),
        title=title,
        kind=kind,
        date=entry.scheduled_date,
        period=linked_booking_period(entry),
        class_id=entry.class_id,
        subject_id=entry.subject_id,
        created_by_id=entry.teacher_id,
        status=BookingStatus.SCHEDULED,
        notes=notes
    )


class LinkedEventService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def materialize(self, entry) -> Optional[SideEffectOutcome]:
        """
        Create the linked booking for an approved entry.

        Returns None when there is nothing to do (no sub-event, already
        linked, or the kind produces no booking).
        """
        if not entry.has_sub_event or entry.linked_booking_id is not None:
            return None

        booking = build_linked_booking(entry)
        if booking is None:
            return None

        entry_id = entry.id

        try:
            async with self.db.begin_nested():
                self.db.add(booking)
                await self.db.flush()
                entry.linked_booking_id = booking.id
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to create linked booking for entry {entry_id}: {str(e)}")
            return SideEffectOutcome(name=MATERIALIZE_EFFECT, ok=False, error=str(e))

        logger.info(
            f"Created linked {booking.kind.value} booking {booking.id} for entry {entry_id} "
            f"on {booking.date} period {booking.period}"
        )
        return SideEffectOutcome(name=MATERIALIZE_EFFECT, ok=True)

    async def release(self, entry) -> None:
        """
        Mark the linked booking cancelled and clear the reference, inside the
        caller's transaction.
        """
        result = await self.db.execute(select(Booking).where(Booking.id == entry.linked_booking_id))
        booking = result.scalar_one_or_none()
        if booking is not None:
            booking.status = BookingStatus.CANCELLED
        entry.linked_booking_id = None

    async def cancel(self, entry) -> Optional[SideEffectOutcome]:
        """Cancel the entry's linked booking as a best-effort step of its own."""
        if entry.linked_booking_id is None:
            return None

        entry_id, booking_id = entry.id, entry.linked_booking_id
        try:
            async with self.db.begin_nested():
                await self.release(entry)
            await self.db.commit()
        except Exception as e:
            await self.db.rollback()
            logger.error(f"Failed to cancel linked booking {booking_id} for entry {entry_id}: {str(e)}")
            return SideEffectOutcome(name=CANCEL_EFFECT, ok=False, error=str(e))

        logger.info(f"Cancelled linked booking {booking_id} for entry {entry_id}")
        return SideEffectOutcome(name=CANCEL_EFFECT, ok=True)
