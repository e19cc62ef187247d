from pydantic import BaseModel

from shiftdesk.services.scheduling.types import MemberRole


class MemberResponse(BaseModel):
    id: int
    name: str
    email: str
    role: MemberRole
    center_id: int
