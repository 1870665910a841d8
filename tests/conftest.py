"""Pytest configuration and shared fixtures."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from app.models.academic_entry import AcademicTerm, EntryStatus, LearningSummary, LearningSupport
from app.models.booking import Booking, BookingKind, BookingStatus
from app.models.class_model import Class
from app.models.subject import Subject
from app.models.user import User, UserRole


# A Monday and the Friday of the same week
MONDAY = date(2026, 9, 7)
FRIDAY = date(2026, 9, 11)


def make_user(role=UserRole.TEACHER, department=None, **overrides):
    user_id = overrides.pop("id", uuid4())
    return User(
        id=user_id,
        email=overrides.pop("email", f"user-{user_id.hex[:8]}@school.ae"),
        username=overrides.pop("username", f"user-{user_id.hex[:8]}"),
        full_name=overrides.pop("full_name", "Sam Teacher"),
        role=role,
        department=department,
        is_active=True,
        **overrides
    )


def make_booking(class_id, booking_date=MONDAY, period=1, kind=BookingKind.HOMEWORK,
                 status=BookingStatus.SCHEDULED, **overrides):
    return Booking(
        id=overrides.pop("id", uuid4()),
        title=overrides.pop("title", kind.value.capitalize()),
        kind=kind,
        date=booking_date,
        period=period,
        class_id=class_id,
        subject_id=overrides.pop("subject_id", uuid4()),
        created_by_id=overrides.pop("created_by_id", uuid4()),
        status=status,
        **overrides
    )


def _make_entry(model, teacher, status, class_name, subject_code, **overrides):
    class_info = Class(id=uuid4(), name=class_name)
    subject = Subject(id=uuid4(), name="Mathematics", code=subject_code)
    entry = model(
        id=overrides.pop("id", uuid4()),
        term=overrides.pop("term", AcademicTerm.TERM_1),
        week_number=overrides.pop("week_number", 2),
        week_start_date=overrides.pop("week_start_date", MONDAY),
        week_end_date=overrides.pop("week_end_date", date(2026, 9, 13)),
        grade=overrides.pop("grade", "10"),
        class_id=overrides.pop("class_id", class_info.id),
        subject_id=overrides.pop("subject_id", subject.id),
        teacher_id=teacher.id,
        status=status,
        **overrides
    )
    entry.teacher = teacher
    entry.class_info = class_info
    entry.subject = subject
    return entry


def make_summary(teacher, status=EntryStatus.DRAFT, class_name="A10 [AMT]/1", subject_code="MATH10", **overrides):
    return _make_entry(LearningSummary, teacher, status, class_name, subject_code, **overrides)


def make_support(teacher, status=EntryStatus.DRAFT, class_name="A10 [AMT]/1", subject_code="MATH10", **overrides):
    return _make_entry(LearningSupport, teacher, status, class_name, subject_code, **overrides)


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.begin_nested = MagicMock()
    return db


@pytest.fixture
def teacher():
    return make_user(UserRole.TEACHER, department="MATH")


@pytest.fixture
def admin():
    return make_user(UserRole.ADMIN)
