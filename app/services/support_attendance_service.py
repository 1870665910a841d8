import logging
from typing import List
from uuid import UUID

from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from app.models.academic_entry import LearningSupport
from app.models.student import Student, StudentStatus
from app.models.support_attendance import SupportAttendance, AttendanceStatus
from app.models.user import User
from app.schemas.academic_entry import AttendanceMark
from app.services.approval_workflow import can_manage_attendance

logger = logging.getLogger(__name__)


class SupportAttendanceService:
    """Attendance of the class's students at a learning support session."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_support_entry(self, support_id: UUID) -> LearningSupport:
        result = await self.db.execute(select(LearningSupport).where(LearningSupport.id == support_id))
        entry = result.scalar_one_or_none()
        if not entry:
            raise NotFoundError("Learning support entry not found")
        return entry

    async def _get_accessible_entry(self, support_id: UUID, user: User) -> LearningSupport:
        entry = await self._get_support_entry(support_id)
        if not can_manage_attendance(user, entry):
            raise AuthorizationError("You can only manage attendance for your own sessions")
        return entry

    async def _class_students(self, class_id: UUID) -> List[Student]:
        result = await self.db.execute(
            select(Student)
            .where(and_(Student.class_id == class_id, Student.status == StudentStatus.ACTIVE))
            .order_by(Student.name)
        )
        return list(result.scalars().all())

    async def _attendance_rows(self, support_id: UUID) -> List[SupportAttendance]:
        result = await self.db.execute(
            select(SupportAttendance)
            .options(selectinload(SupportAttendance.student))
            .where(SupportAttendance.learning_support_id == support_id)
        )
        return list(result.scalars().all())

    async def list_attendance(self, support_id: UUID, user: User) -> List[SupportAttendance]:
        await self._get_accessible_entry(support_id, user)
        return await self._attendance_rows(support_id)

    async def list_students(self, support_id: UUID, user: User) -> List[Student]:
        """Students of the session's class."""
        entry = await self._get_accessible_entry(support_id, user)
        return await self._class_students(entry.class_id)

    async def save_attendance(
        self,
        support_id: UUID,
        records: List[AttendanceMark],
        user: User
    ) -> List[SupportAttendance]:
        """
        Record attendance for the given students.

        Each student keeps a single row per session; saving again overwrites it.

        Raises:
            ValidationError: If a student is not in the session's class
        """
        entry = await self._get_accessible_entry(support_id, user)

        class_student_ids = {student.id for student in await self._class_students(entry.class_id)}
        unknown = [str(record.student_id) for record in records if record.student_id not in class_student_ids]
        if unknown:
            raise ValidationError(f"Students not in this class: {', '.join(unknown)}")

        existing = {row.student_id: row for row in await self._attendance_rows(support_id)}

        for record in records:
            status = AttendanceStatus(record.status)
            row = existing.get(record.student_id)
            if row:
                row.status = status
                row.marked_by_id = user.id
            else:
                row = SupportAttendance(
                    learning_support_id=support_id,
                    student_id=record.student_id,
                    status=status,
                    marked_by_id=user.id
                )
                self.db.add(row)
                existing[record.student_id] = row

        await self.db.commit()
        logger.info(f"Attendance saved for support session {support_id}: {len(records)} students by {user.id}")

        return await self._attendance_rows(support_id)
