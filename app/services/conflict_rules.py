"""
Conflict rules for the master schedule and for academic planning entries.

Every rule is a small pure predicate over the candidate and the rows already
stored for the same scope, so each invariant can be checked on its own. The
validate_* functions run the rules in a fixed order and raise on the first
one that fails; that rule's reason is the only one reported.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from app.core.exceptions import BookingConflictError, EntryConflictError
from app.models.booking import BookingKind, BookingStatus
from app.services.calendar_grid import max_period


# Booking rejection reasons
PERIOD_EXCEEDS_DAY = "PERIOD_EXCEEDS_DAY"
SLOT_ALREADY_BOOKED = "SLOT_ALREADY_BOOKED"
DAILY_QUIZ_CAP = "DAILY_QUIZ_CAP"

# Entry rejection reasons
DUPLICATE_CLASS_SUBJECT = "DUPLICATE_CLASS_SUBJECT"
CLASS_DAY_TAKEN = "CLASS_DAY_TAKEN"
TEACHER_CLASS_DAY_TAKEN = "TEACHER_CLASS_DAY_TAKEN"
TEACHER_SLOT_TAKEN = "TEACHER_SLOT_TAKEN"


@dataclass
class BookingCandidate:
    """A booking proposed for the master schedule."""
    date: date
    period: int
    class_id: UUID
    kind: BookingKind
    id: Optional[UUID] = None


@dataclass
class EntryCandidate:
    """
    The state an academic entry would have after a create or update.

    id is None on create. On update it is the entry's own id, which keeps the
    entry from conflicting with its stored self.
    """
    class_id: UUID
    subject_id: UUID
    teacher_id: UUID
    scheduled_date: Optional[date] = None
    scheduled_slot: Optional[str] = None
    id: Optional[UUID] = None


# ========== Booking rules ==========

def exceeds_period_bound(candidate: BookingCandidate) -> bool:
    return candidate.period < 1 or candidate.period > max_period(candidate.date)


def _active_on_class_day(candidate: BookingCandidate, existing: Iterable) -> list:
    return [
        booking for booking in existing
        if booking.status == BookingStatus.SCHEDULED
        and booking.class_id == candidate.class_id
        and booking.date == candidate.date
        and (candidate.id is None or booking.id != candidate.id)
    ]


def find_slot_occupant(candidate: BookingCandidate, existing: Iterable):
    """Scheduled booking already holding (date, period, class), if any."""
    for booking in _active_on_class_day(candidate, existing):
        if booking.period == candidate.period:
            return booking
    return None


def count_quizzes_on_day(candidate: BookingCandidate, existing: Iterable) -> int:
    return sum(
        1 for booking in _active_on_class_day(candidate, existing)
        if booking.kind == BookingKind.QUIZ
    )


def exceeds_daily_quiz_cap(candidate: BookingCandidate, existing: Iterable) -> bool:
    # Homework has no daily cap
    if candidate.kind != BookingKind.QUIZ:
        return False
    return count_quizzes_on_day(candidate, existing) >= 1


def validate_booking(candidate: BookingCandidate, existing: Iterable) -> None:
    """
    Decide whether a booking can be admitted.

    Args:
        candidate: Proposed booking
        existing: Bookings stored for the same class and day

    Raises:
        BookingConflictError: With the reason of the first failing rule
    """
    existing = list(existing)

    if exceeds_period_bound(candidate):
        limit = max_period(candidate.date)
        raise BookingConflictError(
            f"Invalid period: period exceeds day's period count "
            f"({candidate.date.strftime('%A')} has {limit} periods)",
            reason=PERIOD_EXCEEDS_DAY
        )

    if find_slot_occupant(candidate, existing) is not None:
        raise BookingConflictError(
            "Period slot already booked for this class. Please choose another period.",
            reason=SLOT_ALREADY_BOOKED
        )

    if exceeds_daily_quiz_cap(candidate, existing):
        raise BookingConflictError(
            "This class already has a quiz that day. Only one quiz is allowed per class per day.",
            reason=DAILY_QUIZ_CAP
        )


# ========== Academic entry rules ==========

def _others(candidate: EntryCandidate, existing: Iterable) -> list:
    return [entry for entry in existing if candidate.id is None or entry.id != candidate.id]


def find_class_subject_duplicate(candidate: EntryCandidate, existing: Iterable):
    for entry in _others(candidate, existing):
        if entry.class_id == candidate.class_id and entry.subject_id == candidate.subject_id:
            return entry
    return None


def find_class_day_clash(candidate: EntryCandidate, existing: Iterable):
    """Another entry for the same class with a sub-event on the same date."""
    if candidate.scheduled_date is None:
        return None
    for entry in _others(candidate, existing):
        if entry.class_id == candidate.class_id and entry.scheduled_date == candidate.scheduled_date:
            return entry
    return None


def find_teacher_class_day_clash(candidate: EntryCandidate, existing: Iterable):
    """Another entry by the same teacher for the same class on the same date."""
    if candidate.scheduled_date is None:
        return None
    for entry in _others(candidate, existing):
        if (
            entry.teacher_id == candidate.teacher_id
            and entry.class_id == candidate.class_id
            and entry.scheduled_date == candidate.scheduled_date
        ):
            return entry
    return None


def find_teacher_slot_clash(candidate: EntryCandidate, existing: Iterable):
    """Another entry by the same teacher at the same date and slot, in any class."""
    if candidate.scheduled_date is None or not candidate.scheduled_slot:
        return None
    for entry in _others(candidate, existing):
        if (
            entry.teacher_id == candidate.teacher_id
            and entry.scheduled_date == candidate.scheduled_date
            and entry.scheduled_slot
            and entry.scheduled_slot == candidate.scheduled_slot
        ):
            return entry
    return None


def validate_entry(
    candidate: EntryCandidate,
    existing: Iterable,
    week_number: Optional[int] = None,
    event_label: str = "sub-event"
) -> None:
    """
    Decide whether an academic entry can be created or updated.

    Args:
        candidate: Proposed entry state
        existing: Entries of the same kind stored for the same term and week
        week_number: Used in the error message only
        event_label: "quiz" or "support session", used in error messages

    Raises:
        EntryConflictError: With the reason of the first failing rule
    """
    existing = list(existing)
    week_text = f"Week {week_number}" if week_number else "this week"

    if find_class_subject_duplicate(candidate, existing) is not None:
        raise EntryConflictError(
            f"An entry already exists for this class/subject this week ({week_text})",
            reason=DUPLICATE_CLASS_SUBJECT
        )

    if candidate.scheduled_date is None:
        return

    day_text = candidate.scheduled_date.isoformat()

    if find_class_day_clash(candidate, existing) is not None:
        raise EntryConflictError(
            f"This class already has a sub-event that day ({day_text}). "
            f"Each class can only have one {event_label} per day.",
            reason=CLASS_DAY_TAKEN
        )

    if find_teacher_class_day_clash(candidate, existing) is not None:
        raise EntryConflictError(
            f"You already have an entry for this class that day ({day_text})",
            reason=TEACHER_CLASS_DAY_TAKEN
        )

    if find_teacher_slot_clash(candidate, existing) is not None:
        raise EntryConflictError(
            f"You already have a {event_label} at that time ({day_text}, {candidate.scheduled_slot})",
            reason=TEACHER_SLOT_TAKEN
        )
