from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
import datetime
from uuid import UUID

from app.models.booking import BookingKind, BookingStatus
from app.schemas.common import SchoolDate, reject_null


class BookingBase(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    kind: BookingKind
    date: SchoolDate
    period: int
    class_id: UUID
    subject_id: UUID
    notes: Optional[str] = None


class BookingCreate(BookingBase):
    pass


class BookingUpdate(BaseModel):
    title: Optional[str] = Field(None, max_length=255)
    kind: Optional[BookingKind] = None
    date: Optional[SchoolDate] = None
    period: Optional[int] = None
    class_id: Optional[UUID] = None
    subject_id: Optional[UUID] = None
    notes: Optional[str] = None

    @field_validator("title", "kind", "date", "period", "class_id", "subject_id")
    @classmethod
    def validate_not_null(cls, v):
        return reject_null(v)


class BookingResponse(BaseModel):
    id: UUID
    title: str
    kind: BookingKind
    date: datetime.date
    period: int
    class_id: UUID
    subject_id: UUID
    created_by_id: UUID
    status: BookingStatus
    notes: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None

    class Config:
        from_attributes = True


class BookingListResponse(BaseModel):
    bookings: List[BookingResponse]
    total: int
