from pydantic import BaseModel, Field
from typing import List


class AssignShiftsRequest(BaseModel):
    system_user_id: int
    workshift_ids: List[int] = Field(min_length=1)


class ShiftAssignmentResponse(BaseModel):
    id: int
    system_user_id: int
    workshift_id: int

    class Config:
        from_attributes = True
