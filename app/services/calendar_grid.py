"""
Calendar Grid

The fixed weekly bell schedule:
- 8 periods Monday to Thursday, 4 periods on the short day (Friday)
- Two grade bands (Grades 9-10 and Grades 11-12) with different period times
"""

import re
from datetime import date, time
from typing import Dict, Optional, Tuple

from app.core.config import settings


G9_10 = "G9_10"
G11_12 = "G11_12"

# Period number -> (start, end). Breaks are not bookable and are left out.
BELL_SCHEDULES: Dict[str, Dict[str, Dict[int, Tuple[time, time]]]] = {
    G9_10: {
        "regular": {
            1: (time(7, 30), time(8, 20)),
            2: (time(8, 25), time(9, 15)),
            3: (time(9, 30), time(10, 20)),
            4: (time(10, 25), time(11, 15)),
            5: (time(11, 20), time(12, 10)),
            6: (time(12, 40), time(13, 30)),
            7: (time(13, 35), time(14, 25)),
            8: (time(14, 30), time(15, 10)),
        },
        "short": {
            1: (time(7, 30), time(8, 20)),
            2: (time(8, 25), time(9, 15)),
            3: (time(9, 25), time(10, 15)),
            4: (time(10, 20), time(11, 10)),
        },
    },
    G11_12: {
        "regular": {
            1: (time(7, 30), time(8, 20)),
            2: (time(8, 25), time(9, 15)),
            3: (time(9, 20), time(10, 10)),
            4: (time(10, 25), time(11, 15)),
            5: (time(11, 20), time(12, 10)),
            6: (time(12, 15), time(13, 5)),
            7: (time(13, 35), time(14, 25)),
            8: (time(14, 30), time(15, 10)),
        },
        "short": {
            1: (time(7, 30), time(8, 20)),
            2: (time(8, 25), time(9, 15)),
            3: (time(9, 20), time(10, 10)),
            4: (time(10, 20), time(11, 10)),
        },
    },
}

_GRADE_PATTERN = re.compile(r"A(10|11|12|9)")
_TIME_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})")


def is_short_day(target_date: date) -> bool:
    return target_date.weekday() == settings.SHORT_WEEKDAY


def max_period(target_date: date) -> int:
    """Number of bookable periods on the given day."""
    if is_short_day(target_date):
        return settings.SHORT_DAY_MAX_PERIOD
    return settings.MAX_PERIOD


def is_valid_period(target_date: date, period: int) -> bool:
    return 1 <= period <= max_period(target_date)


def get_grade_band(class_name: Optional[str]) -> str:
    """
    Derive the grade band from a class name such as "A10 [AMT]/1".

    Names without a recognizable grade fall back to the Grades 9-10 schedule.
    """
    match = _GRADE_PATTERN.search(class_name or "")
    if match and int(match.group(1)) > 10:
        return G11_12
    return G9_10


def _day_schedule(grade_band: str, target_date: date) -> Dict[int, Tuple[time, time]]:
    day_key = "short" if is_short_day(target_date) else "regular"
    return BELL_SCHEDULES.get(grade_band, BELL_SCHEDULES[G9_10])[day_key]


def get_period_time_range(grade_band: str, target_date: date, period: int) -> Optional[Tuple[time, time]]:
    """Start and end time of a period, or None if the period does not exist that day."""
    if not is_valid_period(target_date, period):
        return None
    return _day_schedule(grade_band, target_date).get(period)


def format_period(grade_band: str, target_date: date, period: int) -> str:
    time_range = get_period_time_range(grade_band, target_date, period)
    if not time_range:
        return f"Period {period}"
    start, end = time_range
    return f"Period {period} ({start.strftime('%H:%M')}–{end.strftime('%H:%M')})"


def resolve_period(slot: Optional[str], grade_band: str, target_date: date) -> Optional[int]:
    """
    Turn a sub-event slot into a bell period.

    Slots are either a period number ("3") or a time of day ("10:30"). A time
    resolves to the period it falls in; times in a break or outside the school
    day resolve to None.
    """
    if not slot:
        return None

    slot = slot.strip()
    if slot.isdigit():
        period = int(slot)
        return period if is_valid_period(target_date, period) else None

    match = _TIME_PATTERN.match(slot)
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        return None
    slot_time = time(hour, minute)

    for period, (start, end) in sorted(_day_schedule(grade_band, target_date).items()):
        if start <= slot_time < end:
            return period
    return None
