from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import Optional
from datetime import date

from app.core.security import get_current_user
from app.models.academic_entry import AcademicTerm
from app.models.user import User
from app.services.academic_calendar_service import calendar_service
from app.services import calendar_grid

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/weeks/{term}/{week_number}")
async def get_week(
    term: AcademicTerm,
    week_number: int,
    reference_date: Optional[date] = None,
    current_user: User = Depends(get_current_user)
):
    """Date range of a term week."""
    try:
        week = calendar_service.get_week_info(term, week_number, reference_date)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    return {
        "term": week.term.value,
        "week_number": week.week_number,
        "start_date": week.start_date,
        "end_date": week.end_date,
        "label": calendar_service.get_week_label(term, week_number),
        "display": calendar_service.format_week_date_range(term, week_number, reference_date)
    }


@router.get("/periods")
async def get_periods(
    target_date: date = Query(..., alias="date"),
    class_name: Optional[str] = None,
    current_user: User = Depends(get_current_user)
):
    """Bookable periods of a day, with times for the class's grade band."""
    band = calendar_grid.get_grade_band(class_name)
    periods = []
    for period in range(1, calendar_grid.max_period(target_date) + 1):
        time_range = calendar_grid.get_period_time_range(band, target_date, period)
        if not time_range:
            continue
        start, end = time_range
        periods.append({
            "period": period,
            "start": start.strftime("%H:%M"),
            "end": end.strftime("%H:%M"),
            "label": calendar_grid.format_period(band, target_date, period)
        })

    return {
        "date": target_date,
        "grade_band": band,
        "is_short_day": calendar_grid.is_short_day(target_date),
        "max_period": calendar_grid.max_period(target_date),
        "periods": periods
    }
