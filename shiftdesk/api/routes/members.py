from typing import List, Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shiftdesk.api.deps import get_db
from shiftdesk.schemas.members import MemberResponse
from shiftdesk.services.scheduling import repository
from shiftdesk.services.scheduling.types import MemberRole

router = APIRouter(prefix="/members", tags=["members"])


@router.get("", response_model=List[MemberResponse])
def list_members(
    role: Optional[MemberRole] = None,
    center_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    """Staff and technicians, optionally narrowed to one role and center."""
    members = repository.list_members(db, role=role, center_id=center_id)
    return [
        MemberResponse(
            id=m.system_user_id,
            name=m.name,
            email=m.email,
            role=m.role,
            center_id=m.center_id,
        )
        for m in members
    ]
