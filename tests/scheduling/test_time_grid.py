import pytest
from datetime import date, datetime, time

from shiftdesk.services.scheduling.errors import ValidationError
from shiftdesk.services.scheduling.time_grid import (
    SUNDAY,
    date_range,
    days_in_month,
    format_hhmm,
    minutes_between,
    month_bounds,
    month_grid,
    parse_date_key,
    parse_hhmm,
    shift_week,
    to_date_key,
    week_days,
    week_start,
)

from conftest import get_test_monday


class TestWeekStart:
    def test_monday_is_its_own_week_start(self):
        monday = get_test_monday()
        assert week_start(monday) == monday

    def test_sunday_belongs_to_previous_monday(self):
        assert week_start(date(2025, 3, 9)) == date(2025, 3, 3)

    def test_sunday_first_weeks(self):
        assert week_start(date(2025, 3, 5), week_starts_on=SUNDAY) == date(2025, 3, 2)

    def test_week_days_are_seven_consecutive_days(self):
        days = week_days(date(2025, 3, 6))
        assert days[0] == date(2025, 3, 3)
        assert days[-1] == date(2025, 3, 9)
        assert len(days) == 7

    def test_shift_week_moves_whole_weeks(self):
        assert shift_week(date(2025, 3, 6), 1) == date(2025, 3, 10)
        assert shift_week(date(2025, 3, 6), -1) == date(2025, 2, 24)


class TestDateKeys:
    def test_round_trip(self):
        assert parse_date_key(to_date_key(date(2025, 10, 27))) == date(2025, 10, 27)

    def test_iso_timestamp_is_normalised_to_its_date(self):
        assert parse_date_key("2025-10-27T00:00:00.000Z") == date(2025, 10, 27)

    def test_offset_timestamp_uses_utc_date(self):
        assert parse_date_key("2025-10-27T23:30:00-02:00") == date(2025, 10, 28)

    def test_date_and_datetime_pass_through(self):
        assert parse_date_key(date(2025, 1, 1)) == date(2025, 1, 1)
        assert parse_date_key(datetime(2025, 1, 1, 15, 0)) == date(2025, 1, 1)

    @pytest.mark.parametrize("bad", ["", "27/10/2025", "2025-13-01", None, 20251027])
    def test_bad_dates_rejected(self, bad):
        with pytest.raises(ValidationError):
            parse_date_key(bad)


class TestClockTimes:
    def test_parse_hhmm(self):
        assert parse_hhmm("08:30") == time(8, 30)

    def test_parse_accepts_seconds(self):
        assert parse_hhmm("17:00:00") == time(17, 0)

    def test_format_hhmm_zero_pads(self):
        assert format_hhmm(time(7, 5)) == "07:05"

    @pytest.mark.parametrize("bad", ["8", "25:00", "ab:cd", None])
    def test_bad_times_rejected(self, bad):
        with pytest.raises(ValidationError):
            parse_hhmm(bad)

    def test_minutes_between(self):
        assert minutes_between(time(8, 0), time(12, 30)) == 270


class TestMonthHelpers:
    def test_days_in_month_handles_leap_years(self):
        assert days_in_month(2024, 2) == 29
        assert days_in_month(2025, 2) == 28

    def test_month_bounds(self):
        assert month_bounds(2025, 4) == (date(2025, 4, 1), date(2025, 4, 30))

    def test_date_range_is_inclusive(self):
        assert date_range(date(2025, 3, 30), date(2025, 4, 2)) == [
            date(2025, 3, 30), date(2025, 3, 31), date(2025, 4, 1), date(2025, 4, 2),
        ]


class TestMonthGrid:
    @pytest.mark.parametrize("year,month", [
        (2025, 2), (2024, 2), (2025, 9), (2025, 12), (2026, 3), (2021, 2),
    ])
    def test_length_is_multiple_of_seven(self, year, month):
        assert len(month_grid(year, month)) % 7 == 0

    @pytest.mark.parametrize("year,month", [(2025, 1), (2025, 6), (2024, 2)])
    def test_current_month_days_ascend_from_one(self, year, month):
        days = [c.day for c in month_grid(year, month) if c.is_current_month]
        assert days == list(range(1, days_in_month(year, month) + 1))

    def test_month_starting_on_monday_has_no_leading_pad(self):
        # September 2025 starts on a Monday
        cells = month_grid(2025, 9)
        assert cells[0].is_current_month
        assert cells[0].date_key == "2025-09-01"

    def test_leading_cells_come_from_previous_month(self):
        # March 2025 starts on a Saturday
        cells = month_grid(2025, 3)
        leading = [c for c in cells[:5]]
        assert all(not c.is_current_month for c in leading)
        assert [c.day for c in leading] == [24, 25, 26, 27, 28]
        assert cells[5].date_key == "2025-03-01"

    def test_trailing_cells_come_from_next_month(self):
        cells = month_grid(2025, 4)
        assert cells[-1].is_current_month is False
        assert cells[-1].date_key.startswith("2025-05-")

    def test_february_on_monday_fills_exactly_four_rows(self):
        # February 2021 starts on Monday and has 28 days
        cells = month_grid(2021, 2)
        assert len(cells) == 28
        assert all(c.is_current_month for c in cells)

    def test_invalid_month(self):
        with pytest.raises(ValidationError):
            month_grid(2025, 13)

    def test_last_representable_month(self):
        with pytest.raises(ValidationError, match="last representable date"):
            month_grid(9999, 12)
        assert len(month_grid(9998, 12)) % 7 == 0
