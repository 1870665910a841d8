"""
Master schedule bookings.

A booking places a homework or quiz for one class into one bell period of one
school day. Cancelled bookings stay in the table so history is kept.
"""

from sqlalchemy import Column, String, Integer, Date, DateTime, ForeignKey, Text, Index, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid
import enum

from app.core.database import Base


class BookingKind(enum.Enum):
    """What the booked period is used for."""
    HOMEWORK = "homework"
    QUIZ = "quiz"


class BookingStatus(enum.Enum):
    """Booking lifecycle status."""
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"


class Booking(Base):
    """A homework or quiz slot in the master schedule."""
    __tablename__ = "bookings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    kind = Column(SQLEnum(BookingKind), nullable=False)
    date = Column(Date, nullable=False)
    period = Column(Integer, nullable=False)

    class_id = Column(UUID(as_uuid=True), ForeignKey("classes.id", ondelete="CASCADE"), nullable=False)
    subject_id = Column(UUID(as_uuid=True), ForeignKey("subjects.id"), nullable=False)
    created_by_id = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    status = Column(SQLEnum(BookingStatus), nullable=False, default=BookingStatus.SCHEDULED)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), default=func.now())
    updated_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    # Relationships
    class_info = relationship("Class")
    subject = relationship("Subject")
    creator = relationship("User", foreign_keys=[created_by_id])

    __table_args__ = (
        Index("ix_bookings_class_date", "class_id", "date"),
    )

    def __repr__(self):
        return f"<Booking(class_id='{self.class_id}', date='{self.date}', period={self.period}, kind='{self.kind}')>"
