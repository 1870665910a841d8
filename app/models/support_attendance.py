from sqlalchemy import Column, DateTime, ForeignKey, UniqueConstraint, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid
import enum

from app.core.database import Base


class AttendanceStatus(enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"


class SupportAttendance(Base):
    """Attendance of one student at one learning support session."""
    __tablename__ = "support_attendance"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    learning_support_id = Column(UUID(as_uuid=True), ForeignKey("learning_support.id", ondelete="CASCADE"), nullable=False)
    student_id = Column(UUID(as_uuid=True), ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    status = Column(SQLEnum(AttendanceStatus), nullable=False, default=AttendanceStatus.ABSENT)
    marked_by_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    marked_at = Column(DateTime(timezone=True), default=func.now(), onupdate=func.now())

    learning_support = relationship("LearningSupport", back_populates="attendance")
    student = relationship("Student")

    __table_args__ = (
        UniqueConstraint("learning_support_id", "student_id", name="uq_support_attendance_student"),
    )

    def __repr__(self):
        return f"<SupportAttendance(student_id='{self.student_id}', status='{self.status}')>"
