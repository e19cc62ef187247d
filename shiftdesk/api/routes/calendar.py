from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shiftdesk.api.deps import get_db
from shiftdesk.schemas.calendar import CalendarAssignmentResponse, CalendarDayResponse, MonthCalendarResponse
from shiftdesk.services.scheduling import repository
from shiftdesk.services.scheduling.calendar_view import (
    attendance_stats,
    build_month_calendar,
    max_attendance,
    recent_assignments,
    resolve_assignments,
)
from shiftdesk.services.scheduling.time_grid import month_bounds
from shiftdesk.services.scheduling.types import MemberRole, ShiftCategory

router = APIRouter(prefix="/calendar", tags=["calendar"])


@router.get("/month", response_model=MonthCalendarResponse)
def get_month_calendar(
    year: int = Query(..., ge=1, le=9998),
    month: int = Query(..., ge=1, le=12),
    center_id: Optional[int] = None,
    role: Optional[MemberRole] = None,
    db: Session = Depends(get_db),
):
    """Month grid with morning/afternoon/night buckets and weekday attendance."""
    first, last = month_bounds(year, month)
    shifts = repository.list_workshifts(db, center_id, first, last)
    assignments = repository.list_assignments_for_shifts(db, [s.id for s in shifts])
    members = repository.list_members(db)

    resolved = resolve_assignments(shifts, assignments, members, role)
    stats = attendance_stats(resolved)

    days = []
    for cell in build_month_calendar(year, month, resolved):
        buckets = {
            c.value: [CalendarAssignmentResponse.model_validate(a) for a in cell.buckets[c]]
            for c in ShiftCategory
        }
        days.append(CalendarDayResponse(
            day=cell.day,
            is_current_month=cell.is_current_month,
            date_key=cell.date_key,
            total=cell.total,
            **buckets,
        ))

    return MonthCalendarResponse(
        year=year,
        month=month,
        days=days,
        attendance={day: {c.value: n for c, n in counts.items()} for day, counts in stats.items()},
        max_attendance=max_attendance(stats),
        recent=[CalendarAssignmentResponse.model_validate(a) for a in recent_assignments(resolved)],
    )
