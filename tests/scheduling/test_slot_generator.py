import pytest
from datetime import date, time

from shiftdesk.services.scheduling.errors import ValidationError
from shiftdesk.services.scheduling.slot_generator import (
    count_slots,
    expand_window,
    plan_slots,
    validate_slot_window,
)

from conftest import get_test_monday


class TestValidateSlotWindow:
    def test_valid_window_returns_parsed_times(self):
        assert validate_slot_window("08:00", "12:00", 60) == (time(8, 0), time(12, 0))

    def test_start_must_be_before_end(self):
        with pytest.raises(ValidationError):
            validate_slot_window("12:00", "12:00", 30)

    @pytest.mark.parametrize("duration", [0, -15, 1.5, "60", True, None])
    def test_duration_must_be_positive_int(self, duration):
        with pytest.raises(ValidationError):
            validate_slot_window("08:00", "12:00", duration)


class TestExpandWindow:
    def test_exact_fit(self):
        steps = expand_window(time(8, 0), time(10, 0), 30)
        assert steps == [
            (time(8, 0), time(8, 30)),
            (time(8, 30), time(9, 0)),
            (time(9, 0), time(9, 30)),
            (time(9, 30), time(10, 0)),
        ]

    def test_trailing_remainder_is_dropped(self):
        steps = expand_window(time(8, 0), time(9, 50), 30)
        assert len(steps) == 3
        assert steps[-1] == (time(9, 0), time(9, 30))

    def test_duration_longer_than_window(self):
        assert expand_window(time(8, 0), time(8, 45), 60) == []

    def test_window_ending_at_midnight_edge(self):
        steps = expand_window(time(22, 0), time(23, 59), 60)
        assert steps == [(time(22, 0), time(23, 0))]

    @pytest.mark.parametrize("start,end,duration", [
        (time(8, 0), time(17, 0), 60),
        (time(8, 0), time(17, 0), 45),
        (time(9, 15), time(11, 0), 20),
        (time(0, 0), time(23, 0), 7),
    ])
    def test_count_is_floor_of_window_over_duration(self, start, end, duration):
        assert len(expand_window(start, end, duration)) == count_slots(start, end, duration)


class TestPlanSlots:
    def test_two_dates_two_hours(self):
        monday = get_test_monday()
        dates = [monday, date(2025, 3, 4)]

        plan = plan_slots(set(), [1], dates, "08:00", "10:00", 60)

        assert plan.created == 4
        assert plan.skipped == 0
        assert [(s.slot_date, s.start_time) for s in plan.slots] == [
            (monday, time(8, 0)),
            (monday, time(9, 0)),
            (date(2025, 3, 4), time(8, 0)),
            (date(2025, 3, 4), time(9, 0)),
        ]

    def test_four_hour_window_gives_four_hourly_slots_per_day(self):
        dates = [get_test_monday(), date(2025, 3, 4)]
        plan = plan_slots(set(), [1], dates, "08:00", "12:00", 60)
        assert plan.created == 8

    def test_existing_keys_are_skipped(self):
        monday = get_test_monday()
        existing = {(1, monday, time(8, 0))}

        plan = plan_slots(existing, [1], [monday], "08:00", "10:00", 60)

        assert plan.created == 1
        assert plan.skipped == 1
        assert plan.slots[0].start_time == time(9, 0)

    def test_second_run_creates_nothing(self):
        monday = get_test_monday()
        first = plan_slots(set(), [1, 2], [monday], "08:00", "12:00", 60)
        keys = {s.natural_key for s in first.slots}

        second = plan_slots(keys, [1, 2], [monday], "08:00", "12:00", 60)

        assert second.created == 0
        assert second.skipped == first.created == 8

    def test_duplicate_dates_in_one_request_counted_once(self):
        monday = get_test_monday()
        plan = plan_slots(set(), [1], [monday, monday], "08:00", "09:00", 30)
        assert plan.created == 2
        assert plan.skipped == 2

    def test_capacity_is_carried(self):
        plan = plan_slots(set(), [1], [get_test_monday()], "08:00", "09:00", 60, capacity=3)
        assert plan.slots[0].capacity == 3
        assert plan.slots[0].booked_count == 0

    def test_invalid_window_rejected_before_planning(self):
        with pytest.raises(ValidationError):
            plan_slots(set(), [1], [get_test_monday()], "10:00", "08:00", 60)
