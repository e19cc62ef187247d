"""
Calendar aggregation for the month view.
Turns shifts, assignments and members into day buckets and weekday stats.
Everything here is derived; call again after each confirmed change.
"""

from dataclasses import dataclass, field
from datetime import date, time
from typing import Iterable, Optional

from .time_grid import DAY_NAMES, month_grid, parse_hhmm, to_date_key
from .types import Member, MemberRole, ShiftAssignment, ShiftCategory, WorkShift


@dataclass
class CalendarAssignment:
    """An assignment joined with its shift and member."""
    key: str
    system_user_id: int
    shift_code: str
    member_name: str
    member_email: str
    role: MemberRole
    shift_date: date
    category: ShiftCategory
    start_time: time
    end_time: time


@dataclass
class CalendarDay:
    day: Optional[int]
    is_current_month: bool
    date_key: str
    buckets: dict[ShiftCategory, list[CalendarAssignment]] = field(
        default_factory=lambda: {c: [] for c in ShiftCategory}
    )

    @property
    def total(self) -> int:
        return sum(len(v) for v in self.buckets.values())


def classify_shift(start_time) -> ShiftCategory:
    """
    Category by start hour only:
    morning 07:00-<13:00, afternoon 13:00-<18:00, night otherwise.
    """
    hour = parse_hhmm(start_time).hour
    if 7 <= hour < 13:
        return ShiftCategory.MORNING
    if 13 <= hour < 18:
        return ShiftCategory.AFTERNOON
    return ShiftCategory.NIGHT


def filter_shifts_for_month(shifts: Iterable[WorkShift], year: int, month: int) -> list[WorkShift]:
    return [s for s in shifts if s.shift_date.year == year and s.shift_date.month == month]


def resolve_assignments(
    shifts: Iterable[WorkShift],
    assignments: Iterable[ShiftAssignment],
    members: Iterable[Member],
    role: Optional[MemberRole] = None,
) -> list[CalendarAssignment]:
    """
    Join assignments to their shift and member.
    Assignments whose shift or member is unknown are left out, as are
    members outside the role filter.
    """
    shifts_by_id = {s.id: s for s in shifts}
    members_by_id = {
        m.system_user_id: m for m in members
        if m.role in (MemberRole.STAFF, MemberRole.TECHNICIAN)
    }

    resolved = []
    for a in assignments:
        shift = shifts_by_id.get(a.workshift_id)
        member = members_by_id.get(a.system_user_id)
        if shift is None or member is None:
            continue
        if role is not None and member.role != role:
            continue
        resolved.append(CalendarAssignment(
            key=f"{shift.id}-{member.system_user_id}",
            system_user_id=member.system_user_id,
            shift_code=shift.shift_code,
            member_name=member.name or (member.email.split("@")[0] if member.email else "Unknown"),
            member_email=member.email,
            role=member.role,
            shift_date=shift.shift_date,
            category=classify_shift(shift.start_time),
            start_time=shift.start_time,
            end_time=shift.end_time,
        ))
    return resolved


def build_month_calendar(year: int, month: int, resolved: Iterable[CalendarAssignment]) -> list[CalendarDay]:
    by_date: dict[str, list[CalendarAssignment]] = {}
    for a in resolved:
        by_date.setdefault(to_date_key(a.shift_date), []).append(a)

    days = []
    for cell in month_grid(year, month):
        day = CalendarDay(day=cell.day, is_current_month=cell.is_current_month, date_key=cell.date_key)
        if cell.is_current_month:
            for a in by_date.get(cell.date_key, []):
                day.buckets[a.category].append(a)
        days.append(day)
    return days


def attendance_stats(resolved: Iterable[CalendarAssignment]) -> dict[str, dict[ShiftCategory, int]]:
    """Assignment counts per weekday (Mon..Sun) and category."""
    stats = {name: {c: 0 for c in ShiftCategory} for name in DAY_NAMES}
    for a in resolved:
        stats[DAY_NAMES[a.shift_date.weekday()]][a.category] += 1
    return stats


def max_attendance(stats: dict[str, dict[ShiftCategory, int]]) -> int:
    # chart scale only plots morning and night bars
    values = [
        counts[c]
        for counts in stats.values()
        for c in (ShiftCategory.MORNING, ShiftCategory.NIGHT)
    ]
    return max(values + [1])


def recent_assignments(resolved: Iterable[CalendarAssignment], limit: int = 5) -> list[CalendarAssignment]:
    return sorted(resolved, key=lambda a: a.shift_date, reverse=True)[:limit]
