from pydantic import BaseModel, Field, field_serializer, field_validator
from datetime import date, time
from typing import List

from shiftdesk.schemas._fields import coerce_date, hhmm


class GenerateSlotsRequest(BaseModel):
    center_ids: List[int] = Field(min_length=1)
    dates: List[date] = Field(min_length=1)
    start_time: time
    end_time: time
    duration: int  # minutes

    @field_validator("dates", mode="before")
    @classmethod
    def parse_dates(cls, v):
        if not isinstance(v, list):
            return v
        return [coerce_date(d) for d in v]


class SlotResponse(BaseModel):
    id: int
    center_id: int
    slot_date: date
    start_time: time
    end_time: time
    capacity: int
    booked_count: int
    status: str

    @field_serializer("start_time", "end_time")
    def serialize_time(self, t: time) -> str:
        return hhmm(t)

    class Config:
        from_attributes = True


class GenerateSlotsResponse(BaseModel):
    created: int
    skipped: int
    slots: List[SlotResponse] = []
