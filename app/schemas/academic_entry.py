"""
Pydantic schemas for academic planning entries (learning summaries and learning support).
"""

import re
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import date, datetime
from uuid import UUID

from app.models.academic_entry import AcademicTerm, EntryStatus
from app.schemas.common import SchoolDate, reject_null

_URL_PATTERN = re.compile(r"^https?://.+", re.IGNORECASE)


class ScheduledEventFields(BaseModel):
    """Optional quiz / session slot carried by an entry."""
    scheduled_day: Optional[str] = Field(None, max_length=20)
    scheduled_date: Optional[SchoolDate] = None
    scheduled_slot: Optional[str] = Field(None, max_length=20)


class AcademicEntryCreate(ScheduledEventFields):
    term: AcademicTerm
    week_number: int = Field(..., ge=1, le=15)
    grade: str = Field(..., min_length=1, max_length=10)
    class_id: UUID
    subject_id: UUID


class AcademicEntryUpdate(ScheduledEventFields):
    grade: Optional[str] = Field(None, min_length=1, max_length=10)
    class_id: Optional[UUID] = None
    subject_id: Optional[UUID] = None

    @field_validator("grade", "class_id", "subject_id")
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)


# ========== Learning Summary ==========

class LearningSummaryCreate(AcademicEntryCreate):
    upcoming_topics: Optional[str] = None


class LearningSummaryUpdate(AcademicEntryUpdate):
    upcoming_topics: Optional[str] = None


# ========== Learning Support ==========

def _check_teams_link(value: Optional[str]) -> Optional[str]:
    if value and not _URL_PATTERN.match(value):
        raise ValueError("Invalid Teams link URL")
    return value


class LearningSupportCreate(AcademicEntryCreate):
    session_type: Optional[str] = Field(None, max_length=50)
    teams_link: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=255)

    @field_validator("teams_link")
    @classmethod
    def validate_teams_link(cls, v):
        return _check_teams_link(v)


class LearningSupportUpdate(AcademicEntryUpdate):
    session_type: Optional[str] = Field(None, max_length=50)
    teams_link: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=255)

    @field_validator("teams_link")
    @classmethod
    def validate_teams_link(cls, v):
        return _check_teams_link(v)


# ========== Workflow ==========

class ReviewRequest(BaseModel):
    comments: Optional[str] = None


class SideEffectResponse(BaseModel):
    name: str
    ok: bool
    error: Optional[str] = None


# ========== Responses ==========

class AcademicEntryResponse(BaseModel):
    id: UUID
    term: AcademicTerm
    week_number: int
    week_start_date: date
    week_end_date: date
    grade: str
    class_id: UUID
    subject_id: UUID
    teacher_id: UUID
    scheduled_day: Optional[str] = None
    scheduled_date: Optional[date] = None
    scheduled_slot: Optional[str] = None
    status: EntryStatus
    approved_by_id: Optional[UUID] = None
    approval_comments: Optional[str] = None
    linked_booking_id: Optional[UUID] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LearningSummaryResponse(AcademicEntryResponse):
    upcoming_topics: Optional[str] = None


class LearningSupportResponse(AcademicEntryResponse):
    session_type: Optional[str] = None
    teams_link: Optional[str] = None
    location: Optional[str] = None


class LearningSummaryWorkflowResponse(BaseModel):
    entry: LearningSummaryResponse
    side_effects: List[SideEffectResponse] = []


class LearningSupportWorkflowResponse(BaseModel):
    entry: LearningSupportResponse
    side_effects: List[SideEffectResponse] = []


# ========== Attendance ==========

class AttendanceMark(BaseModel):
    student_id: UUID
    status: str = Field(..., pattern="^(present|absent)$")


class AttendanceSaveRequest(BaseModel):
    attendance: List[AttendanceMark]


class AttendanceResponse(BaseModel):
    id: UUID
    learning_support_id: UUID
    student_id: UUID
    status: str
    marked_by_id: Optional[UUID] = None
    marked_at: Optional[datetime] = None
    student_name: Optional[str] = None

    class Config:
        from_attributes = True
