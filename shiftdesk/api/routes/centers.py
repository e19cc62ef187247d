from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shiftdesk.api.deps import get_db
from shiftdesk.schemas.centers import CenterResponse
from shiftdesk.services.scheduling import repository

router = APIRouter(prefix="/centers", tags=["centers"])


@router.get("", response_model=List[CenterResponse])
def list_centers(db: Session = Depends(get_db)):
    return [CenterResponse.model_validate(c) for c in repository.list_centers(db)]
