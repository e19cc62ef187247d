from pydantic import BaseModel, field_serializer
from datetime import date, time
from typing import Dict, List, Optional

from shiftdesk.services.scheduling.types import MemberRole, ShiftCategory
from shiftdesk.schemas._fields import hhmm


class CalendarAssignmentResponse(BaseModel):
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

    @field_serializer("start_time", "end_time")
    def serialize_time(self, t: time) -> str:
        return hhmm(t)

    class Config:
        from_attributes = True


class CalendarDayResponse(BaseModel):
    day: Optional[int]
    is_current_month: bool
    date_key: str
    morning: List[CalendarAssignmentResponse] = []
    afternoon: List[CalendarAssignmentResponse] = []
    night: List[CalendarAssignmentResponse] = []
    total: int = 0


class MonthCalendarResponse(BaseModel):
    year: int
    month: int
    days: List[CalendarDayResponse]
    # weekday name -> shift category -> assignment count
    attendance: Dict[str, Dict[str, int]]
    max_attendance: int
    recent: List[CalendarAssignmentResponse]
