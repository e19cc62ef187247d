from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from datetime import date

from shiftdesk.api.deps import get_db
from shiftdesk.schemas.workshifts import WorkShiftBulkCreate, WorkShiftResponse
from shiftdesk.services.scheduling import repository
from shiftdesk.services.scheduling.errors import NotFoundError, ValidationError

router = APIRouter(prefix="/workshifts", tags=["workshifts"])


@router.post("", response_model=List[WorkShiftResponse], status_code=status.HTTP_201_CREATED)
def create_workshifts(
    payload: WorkShiftBulkCreate,
    db: Session = Depends(get_db),
):
    """Create one workshift per date for a center."""
    try:
        shifts = repository.create_workshifts_bulk(
            db,
            payload.center_id,
            payload.shift_dates,
            payload.start_time,
            payload.end_time,
            payload.status,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return [WorkShiftResponse.model_validate(s) for s in shifts]


@router.get("", response_model=List[WorkShiftResponse])
def list_workshifts(
    center_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    shifts = repository.list_workshifts(db, center_id, start_date, end_date)
    return [WorkShiftResponse.model_validate(s) for s in shifts]


@router.delete("/{workshift_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_workshift(
    workshift_id: int,
    db: Session = Depends(get_db),
):
    """Delete a workshift together with its assignments."""
    try:
        repository.delete_workshift(db, workshift_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return None
