from datetime import date, datetime
from typing import Annotated

from pydantic import BeforeValidator

from app.services.academic_calendar_service import calendar_service


def coerce_school_date(value):
    """
    Accept a plain date or an ISO datetime and keep only the school-local day.

    Browsers tend to send midnight timestamps in UTC; converting them in the
    school timezone keeps them on the day the user picked.
    """
    if isinstance(value, str) and "T" in value:
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, datetime):
        return calendar_service.to_school_date(value)
    return value


SchoolDate = Annotated[date, BeforeValidator(coerce_school_date)]


def reject_null(value):
    """For patch fields that may be left out but not cleared."""
    if value is None:
        raise ValueError("Field cannot be null")
    return value
