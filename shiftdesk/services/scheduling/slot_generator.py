"""
Slot generation: expands a shift window into fixed-duration bookable slots.
"""

import logging
from datetime import date, time, timedelta, datetime
from typing import Iterable, Union

from .errors import ValidationError
from .time_grid import minutes_of_day, parse_hhmm
from .types import Slot, SlotPlan


logger = logging.getLogger(__name__)


def validate_slot_window(
    start_time: Union[str, time],
    end_time: Union[str, time],
    duration_minutes: int,
) -> tuple[time, time]:
    """
    Usage checks done before any slot request is issued.

    Returns the parsed (start, end) pair.
    """
    start = parse_hhmm(start_time)
    end = parse_hhmm(end_time)
    if start >= end:
        raise ValidationError("Start time must be before end time")
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise ValidationError(f"Slot duration must be a whole number of minutes, got {duration_minutes!r}")
    if duration_minutes <= 0:
        raise ValidationError("Slot duration must be positive")
    return start, end


def expand_window(start: time, end: time, duration_minutes: int) -> list[tuple[time, time]]:
    """
    Consecutive [start, end) steps of `duration_minutes` inside the window.
    A trailing remainder shorter than one step is dropped.
    """
    steps = []
    step = timedelta(minutes=duration_minutes)
    anchor = date.min
    current = datetime.combine(anchor, start)
    window_end = datetime.combine(anchor, end)

    while current + step <= window_end:
        steps.append((current.time(), (current + step).time()))
        current += step

    return steps


def count_slots(start: time, end: time, duration_minutes: int) -> int:
    return (minutes_of_day(end) - minutes_of_day(start)) // duration_minutes


def plan_slots(
    existing_keys: Iterable[tuple[int, date, time]],
    center_ids: list[int],
    dates: list[date],
    start_time: Union[str, time],
    end_time: Union[str, time],
    duration_minutes: int,
    capacity: int = 1,
) -> SlotPlan:
    """
    Work out which slots a generate request would create.

    Slots whose (center, date, start) already exists are counted as skipped,
    including repeats inside the same request.
    """
    start, end = validate_slot_window(start_time, end_time, duration_minutes)
    steps = expand_window(start, end, duration_minutes)
    seen = set(existing_keys)
    plan = SlotPlan()

    for center_id in center_ids:
        for slot_date in dates:
            for slot_start, slot_end in steps:
                key = (center_id, slot_date, slot_start)
                if key in seen:
                    plan.skipped += 1
                    continue
                seen.add(key)
                plan.slots.append(Slot(
                    center_id=center_id,
                    slot_date=slot_date,
                    start_time=slot_start,
                    end_time=slot_end,
                    capacity=capacity,
                ))
                plan.created += 1

    logger.debug(f"Planned {plan.created} slots, skipped {plan.skipped} for centers {center_ids}")
    return plan
