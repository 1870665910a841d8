"""
Academic Calendar Service

Maps the (term, week) addressing used by academic planning entries onto dates.
- Three terms, each anchored to the first day of a configured month
  (Term 1: September, Term 2: January, Term 3: May)
- Up to 15 weeks per term, 7 days each
- Terms 2 and 3 belong to the following calendar year once the reference
  date has reached the Term 1 month
"""

from datetime import date, datetime, timedelta
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass
from zoneinfo import ZoneInfo

from app.core.config import settings
from app.models.academic_entry import AcademicTerm


@dataclass
class AcademicWeekInfo:
    """Information about an academic week."""
    term: AcademicTerm
    week_number: int
    start_date: date
    end_date: date


class AcademicCalendarService:
    """
    Service for term/week calculations.

    "Today" is always evaluated in the school's timezone, which is passed in
    explicitly instead of relying on the process timezone.
    """

    def __init__(
        self,
        term_start_months: Optional[Dict[AcademicTerm, int]] = None,
        timezone: Optional[str] = None,
        max_week: Optional[int] = None
    ):
        self.term_start_months = term_start_months or {
            AcademicTerm.TERM_1: settings.TERM_1_START_MONTH,
            AcademicTerm.TERM_2: settings.TERM_2_START_MONTH,
            AcademicTerm.TERM_3: settings.TERM_3_START_MONTH,
        }
        self.timezone = ZoneInfo(timezone or settings.SCHOOL_TIMEZONE)
        self.max_week = max_week or settings.MAX_WEEK_NUMBER

    def today(self) -> date:
        """Current calendar date in the school's timezone."""
        return datetime.now(self.timezone).date()

    def to_school_date(self, value) -> date:
        """
        Normalize a date or datetime to a school calendar day.

        Aware datetimes are converted to the school timezone first so that a
        late-evening UTC timestamp lands on the right local day.
        """
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(self.timezone)
            return value.date()
        return value

    def get_term_start(self, term: AcademicTerm, reference_date: Optional[date] = None) -> date:
        """
        Get the anchor date of a term.

        Args:
            term: Academic term
            reference_date: Date the calculation is made on. Uses today if not provided.

        Returns:
            First day of the term's anchor month
        """
        if reference_date is None:
            reference_date = self.today()

        term_1_month = self.term_start_months[AcademicTerm.TERM_1]
        year = reference_date.year
        if term != AcademicTerm.TERM_1 and reference_date.month >= term_1_month:
            year += 1

        return date(year, self.term_start_months[term], 1)

    def get_week_info(
        self,
        term: AcademicTerm,
        week_number: int,
        reference_date: Optional[date] = None
    ) -> AcademicWeekInfo:
        """
        Get detailed information about a specific week of a term.

        Raises:
            ValueError: If week_number is out of range
        """
        if week_number < 1 or week_number > self.max_week:
            raise ValueError(f"Week number must be between 1 and {self.max_week}")

        start_date = self.get_term_start(term, reference_date) + timedelta(days=(week_number - 1) * 7)
        end_date = start_date + timedelta(days=6)

        return AcademicWeekInfo(
            term=term,
            week_number=week_number,
            start_date=start_date,
            end_date=end_date
        )

    def get_week_date_range(
        self,
        term: AcademicTerm,
        week_number: int,
        reference_date: Optional[date] = None
    ) -> Tuple[date, date]:
        """Get the (start_date, end_date) of a term week."""
        week_info = self.get_week_info(term, week_number, reference_date)
        return (week_info.start_date, week_info.end_date)

    def get_term_weeks(self, term: AcademicTerm, reference_date: Optional[date] = None) -> List[AcademicWeekInfo]:
        return [self.get_week_info(term, week, reference_date) for week in range(1, self.max_week + 1)]

    def get_week_label(self, term: AcademicTerm, week_number: int) -> str:
        """
        Get the display label for a week, e.g. "Term 1 Week 3".
        """
        if week_number < 1 or week_number > self.max_week:
            return "Invalid Week"
        return f"{term.value.replace('TERM_', 'Term ')} Week {week_number}"

    def format_week_date_range(
        self,
        term: AcademicTerm,
        week_number: int,
        reference_date: Optional[date] = None,
        format_str: str = "%b %d, %Y"
    ) -> str:
        """
        Format a week's date range as a string (e.g., "Sep 01, 2026 - Sep 07, 2026").
        """
        week_info = self.get_week_info(term, week_number, reference_date)
        return f"{week_info.start_date.strftime(format_str)} - {week_info.end_date.strftime(format_str)}"


# Create singleton instance
calendar_service = AcademicCalendarService()
