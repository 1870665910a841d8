"""
Payload handed to the notification sink when an entry is confirmed.
"""

from pydantic import BaseModel, EmailStr
from typing import Optional


class BookingNotification(BaseModel):
    """Booking confirmation sent to the entry's teacher."""
    teacher_name: str
    teacher_email: EmailStr
    entry_type: str  # "learning_summary" or "learning_support"
    class_name: str
    subject_name: str
    grade: str
    term: str
    week_number: int
    topics: Optional[str] = None
    scheduled_day: Optional[str] = None
    scheduled_date: Optional[str] = None
    scheduled_slot: Optional[str] = None
    session_type: Optional[str] = None
    teams_link: Optional[str] = None
