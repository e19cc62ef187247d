"""
Calendar arithmetic used by the wizard, the slot generator and the month view.
Weeks start on Monday unless told otherwise.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from .errors import ValidationError


MONDAY = 0
SUNDAY = 6
DAY_NAMES = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


@dataclass(frozen=True)
class GridCell:
    """One cell of a 7-column month grid."""
    day: Optional[int]
    is_current_month: bool
    date_key: str


def to_date_key(d: date) -> str:
    return d.strftime("%Y-%m-%d")


def parse_date_key(value: Union[str, date]) -> date:
    """
    Parse a calendar date.

    Accepts YYYY-MM-DD as well as full ISO timestamps like
    2025-10-27T00:00:00.000Z, which are normalised to their UTC date.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"Invalid date: {value!r}")
    text = value.strip()
    if not text:
        raise ValidationError("Empty date")
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise ValidationError(f"Invalid date: {value!r}")
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date()


def parse_hhmm(value: Union[str, time]) -> time:
    """Parse an HH:MM wall-clock string."""
    if isinstance(value, time):
        return value
    try:
        hours, minutes = value.strip().split(":")[:2]
        return time(int(hours), int(minutes))
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid time: {value!r}, expected HH:MM")


def format_hhmm(t: time) -> str:
    return t.strftime("%H:%M")


def minutes_of_day(t: time) -> int:
    return t.hour * 60 + t.minute


def minutes_between(start: time, end: time) -> int:
    return minutes_of_day(end) - minutes_of_day(start)


def week_start(d: date, week_starts_on: int = MONDAY) -> date:
    return d - timedelta(days=(d.weekday() - week_starts_on) % 7)


def shift_week(d: date, offset: int, week_starts_on: int = MONDAY) -> date:
    """Start of the week `offset` weeks away from the week containing d."""
    return week_start(d, week_starts_on) + timedelta(weeks=offset)


def week_days(d: date, week_starts_on: int = MONDAY) -> list[date]:
    start = week_start(d, week_starts_on)
    return [start + timedelta(days=i) for i in range(7)]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, days_in_month(year, month))


def date_range(start: date, end: date) -> list[date]:
    """All dates from start to end, inclusive."""
    return [start + timedelta(days=i) for i in range((end - start).days + 1)]


def month_grid(year: int, month: int) -> list[GridCell]:
    """
    Monday-first grid for a month.

    Leading and trailing cells are filled from the adjacent months so that
    every row has 7 cells.
    """
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")

    first, last = month_bounds(year, month)
    cells: list[GridCell] = []

    for back in range(first.weekday(), 0, -1):
        d = first - timedelta(days=back)
        cells.append(GridCell(day=d.day, is_current_month=False, date_key=to_date_key(d)))

    for d in date_range(first, last):
        cells.append(GridCell(day=d.day, is_current_month=True, date_key=to_date_key(d)))

    if last == date.max and len(cells) % 7 != 0:
        raise ValidationError(f"Month grid for {year}-{month:02d} runs past the last representable date")

    d = last
    while len(cells) % 7 != 0:
        d += timedelta(days=1)
        cells.append(GridCell(day=d.day, is_current_month=False, date_key=to_date_key(d)))

    return cells
