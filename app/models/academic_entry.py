"""
Academic planning entries.

Learning summaries (weekly topics plus an optional quiz) and learning support
entries (an optional tutoring session) share the same shape and the same
approval workflow, so the common columns live on a mixin.
"""

from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, Text, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship, declared_attr
import uuid
import enum

from app.core.database import Base


class AcademicTerm(enum.Enum):
    """The three ordinal terms of the academic year."""
    TERM_1 = "TERM_1"
    TERM_2 = "TERM_2"
    TERM_3 = "TERM_3"


class EntryStatus(enum.Enum):
    """Approval status of a planning entry."""
    DRAFT = "draft"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"


class AcademicEntryMixin:
    """Columns shared by learning summaries and learning support entries."""

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    term = Column(SQLEnum(AcademicTerm), nullable=False)
    week_number = Column(Integer, nullable=False)
    week_start_date = Column(Date, nullable=False)
    week_end_date = Column(Date, nullable=False)
    grade = Column(String(10), nullable=False)

    # Scheduled sub-event: the quiz of a summary or the session of a support entry
    scheduled_day = Column(String(20), nullable=True)  # e.g. "Tuesday"
    scheduled_date = Column(Date, nullable=True)
    scheduled_slot = Column(String(20), nullable=True)  # period number ("3") or time of day ("14:30")

    status = Column(SQLEnum(EntryStatus), nullable=False, default=EntryStatus.DRAFT)
    approval_comments = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    @declared_attr
    def class_id(cls):
        return Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)

    @declared_attr
    def subject_id(cls):
        return Column(UUID(as_uuid=True), ForeignKey("subjects.id"), nullable=False)

    @declared_attr
    def teacher_id(cls):
        return Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    @declared_attr
    def approved_by_id(cls):
        return Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    @declared_attr
    def linked_booking_id(cls):
        return Column(UUID(as_uuid=True), ForeignKey("bookings.id", ondelete="SET NULL"), nullable=True)

    @declared_attr
    def class_info(cls):
        return relationship("Class")

    @declared_attr
    def subject(cls):
        return relationship("Subject")

    @declared_attr
    def teacher(cls):
        return relationship("User", foreign_keys=f"{cls.__name__}.teacher_id")

    @property
    def has_sub_event(self) -> bool:
        return self.scheduled_date is not None


class LearningSummary(AcademicEntryMixin, Base):
    """Weekly learning summary with an optional quiz."""
    __tablename__ = "learning_summaries"

    upcoming_topics = Column(Text, nullable=True)

    def __repr__(self):
        return f"<LearningSummary(term='{self.term}', week={self.week_number}, class_id='{self.class_id}')>"


class LearningSupport(AcademicEntryMixin, Base):
    """Learning support (SAPET) entry with an optional tutoring session."""
    __tablename__ = "learning_support"

    session_type = Column(String(50), nullable=True)  # e.g. "online", "in_person"
    teams_link = Column(String(500), nullable=True)
    location = Column(String(255), nullable=True)

    attendance = relationship(
        "SupportAttendance",
        back_populates="learning_support",
        cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<LearningSupport(term='{self.term}', week={self.week_number}, class_id='{self.class_id}')>"
