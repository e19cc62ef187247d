from pydantic import BaseModel, Field, field_serializer, field_validator
from datetime import date, time
from typing import List

from shiftdesk.services.scheduling.types import ShiftStatus
from shiftdesk.schemas._fields import coerce_date, hhmm


class WorkShiftBulkCreate(BaseModel):
    center_id: int
    shift_dates: List[date] = Field(min_length=1)
    start_time: time
    end_time: time
    status: ShiftStatus = ShiftStatus.ACTIVE

    @field_validator("shift_dates", mode="before")
    @classmethod
    def parse_dates(cls, v):
        if not isinstance(v, list):
            return v
        return [coerce_date(d) for d in v]


class WorkShiftResponse(BaseModel):
    id: int
    shift_code: str
    shift_date: date
    start_time: time
    end_time: time
    center_id: int
    status: ShiftStatus

    @field_serializer("start_time", "end_time")
    def serialize_time(self, t: time) -> str:
        return hhmm(t)

    class Config:
        from_attributes = True
