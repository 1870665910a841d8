"""Unit tests for the bell schedule grid."""

from datetime import date, time

import pytest

from app.services import calendar_grid
from app.services.calendar_grid import G9_10, G11_12
from tests.conftest import MONDAY, FRIDAY


class TestPeriodBounds:

    def test_regular_day_has_eight_periods(self):
        assert calendar_grid.max_period(MONDAY) == 8
        assert not calendar_grid.is_short_day(MONDAY)

    def test_friday_is_short(self):
        assert calendar_grid.is_short_day(FRIDAY)
        assert calendar_grid.max_period(FRIDAY) == 4

    @pytest.mark.parametrize("period", range(1, 9))
    def test_all_periods_valid_on_regular_day(self, period):
        assert calendar_grid.is_valid_period(MONDAY, period)

    @pytest.mark.parametrize("period", [5, 6, 7, 8])
    def test_late_periods_invalid_on_friday(self, period):
        assert not calendar_grid.is_valid_period(FRIDAY, period)

    @pytest.mark.parametrize("period", [0, -1, 9])
    def test_out_of_range_periods_invalid(self, period):
        assert not calendar_grid.is_valid_period(MONDAY, period)


class TestGradeBand:

    @pytest.mark.parametrize("class_name,band", [
        ("A9 [AMT]/1", G9_10),
        ("A10 [AMT]/2", G9_10),
        ("A11 [AMT]/1", G11_12),
        ("A12 [AMT]/3", G11_12),
        ("Unknown", G9_10),
        (None, G9_10),
    ])
    def test_band_from_class_name(self, class_name, band):
        assert calendar_grid.get_grade_band(class_name) == band


class TestPeriodTimes:

    def test_period_time_range(self):
        assert calendar_grid.get_period_time_range(G11_12, MONDAY, 6) == (time(12, 15), time(13, 5))
        assert calendar_grid.get_period_time_range(G9_10, MONDAY, 6) == (time(12, 40), time(13, 30))

    def test_period_time_range_for_missing_period(self):
        assert calendar_grid.get_period_time_range(G9_10, FRIDAY, 6) is None

    def test_format_period(self):
        assert calendar_grid.format_period(G9_10, MONDAY, 1) == "Period 1 (07:30–08:20)"
        assert calendar_grid.format_period(G9_10, FRIDAY, 7) == "Period 7"


class TestResolvePeriod:

    def test_period_number_slot(self):
        assert calendar_grid.resolve_period("3", G9_10, MONDAY) == 3

    def test_period_number_beyond_day(self):
        assert calendar_grid.resolve_period("6", G9_10, FRIDAY) is None

    def test_time_slot_inside_period(self):
        assert calendar_grid.resolve_period("10:30", G9_10, MONDAY) == 4

    def test_time_slot_in_break(self):
        assert calendar_grid.resolve_period("09:20", G9_10, MONDAY) is None

    @pytest.mark.parametrize("slot", [None, "", "after lunch", "25:00"])
    def test_unusable_slots(self, slot):
        assert calendar_grid.resolve_period(slot, G9_10, MONDAY) is None

    def test_date_has_expected_weekdays(self):
        # Guard the fixtures the other tests rely on
        assert MONDAY.weekday() == 0
        assert FRIDAY == date(2026, 9, 11) and FRIDAY.weekday() == 4
