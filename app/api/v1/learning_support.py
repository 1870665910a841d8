"""
Learning support (SAPET) entries and attendance at their sessions.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from uuid import UUID

from app.core.database import get_db
from app.core.exceptions import SchedulingError
from app.core.security import get_current_user
from app.models.user import User
from app.services.academic_entry_service import EntryKind
from app.services.support_attendance_service import SupportAttendanceService
from app.schemas.academic_entry import (
    LearningSupportCreate, LearningSupportUpdate, LearningSupportResponse,
    LearningSupportWorkflowResponse, AttendanceSaveRequest, AttendanceResponse
)
from .entries import build_entry_router
from .errors import to_http_exception

router = build_entry_router(
    EntryKind.SUPPORT,
    prefix="/learning-support",
    tag="learning-support",
    create_schema=LearningSupportCreate,
    update_schema=LearningSupportUpdate,
    response_schema=LearningSupportResponse,
    workflow_schema=LearningSupportWorkflowResponse
)


def _attendance_response(row) -> AttendanceResponse:
    return AttendanceResponse(
        id=row.id,
        learning_support_id=row.learning_support_id,
        student_id=row.student_id,
        status=row.status.value,
        marked_by_id=row.marked_by_id,
        marked_at=row.marked_at,
        student_name=row.student.name if row.student else None
    )


@router.get("/{support_id}/attendance", response_model=List[AttendanceResponse])
async def get_attendance(
    support_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = SupportAttendanceService(db)
    try:
        rows = await service.list_attendance(support_id, current_user)
    except SchedulingError as e:
        raise to_http_exception(e)
    return [_attendance_response(row) for row in rows]


@router.post("/{support_id}/attendance", response_model=List[AttendanceResponse])
async def save_attendance(
    support_id: UUID,
    data: AttendanceSaveRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Mark students present or absent for a support session."""
    service = SupportAttendanceService(db)
    try:
        rows = await service.save_attendance(support_id, data.attendance, current_user)
    except SchedulingError as e:
        raise to_http_exception(e)
    return [_attendance_response(row) for row in rows]


@router.get("/{support_id}/students", response_model=List[dict])
async def get_session_students(
    support_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Students of the session's class."""
    service = SupportAttendanceService(db)
    try:
        students = await service.list_students(support_id, current_user)
    except SchedulingError as e:
        raise to_http_exception(e)
    return [
        {"id": str(s.id), "name": s.name, "student_code": s.student_code}
        for s in students
    ]
