from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
from uuid import UUID
from datetime import date

from app.core.database import get_db
from app.core.exceptions import SchedulingError
from app.core.security import get_current_user
from app.models.user import User
from app.services.booking_service import BookingService
from app.schemas.booking import BookingCreate, BookingUpdate, BookingResponse, BookingListResponse
from .errors import to_http_exception

router = APIRouter(prefix="/bookings", tags=["bookings"])


@router.get("", response_model=BookingListResponse)
async def list_bookings(
    week_start: Optional[date] = Query(None, description="Any day of the week to show"),
    class_id: Optional[UUID] = None,
    teacher_id: Optional[UUID] = None,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Scheduled bookings of the master schedule."""
    service = BookingService(db)
    bookings = await service.list_bookings(week_start=week_start, class_id=class_id, teacher_id=teacher_id)
    return BookingListResponse(
        bookings=[BookingResponse.model_validate(b) for b in bookings],
        total=len(bookings)
    )


@router.post("", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = BookingService(db)
    try:
        return await service.create_booking(data, current_user)
    except SchedulingError as e:
        raise to_http_exception(e)


@router.patch("/{booking_id}", response_model=BookingResponse)
async def update_booking(
    booking_id: UUID,
    data: BookingUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Update a booking. Only its creator or an admin may do this."""
    service = BookingService(db)
    try:
        return await service.update_booking(booking_id, data, current_user)
    except SchedulingError as e:
        raise to_http_exception(e)


@router.patch("/{booking_id}/cancel", response_model=BookingResponse)
async def cancel_booking(
    booking_id: UUID,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    service = BookingService(db)
    try:
        return await service.cancel_booking(booking_id, current_user)
    except SchedulingError as e:
        raise to_http_exception(e)
