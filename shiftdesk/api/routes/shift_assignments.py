from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from shiftdesk.api.deps import get_db
from shiftdesk.schemas.shift_assignments import AssignShiftsRequest, ShiftAssignmentResponse
from shiftdesk.services.scheduling import repository
from shiftdesk.services.scheduling.errors import NotFoundError, ValidationError

router = APIRouter(prefix="/shift-assignments", tags=["shift-assignments"])


@router.post("/assign", response_model=List[ShiftAssignmentResponse], status_code=status.HTTP_201_CREATED)
def assign_member(
    payload: AssignShiftsRequest,
    db: Session = Depends(get_db),
):
    """Bind a member to several workshifts. Existing bindings are returned unchanged."""
    try:
        assignments = repository.assign_member_to_shifts(db, payload.system_user_id, payload.workshift_ids)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return [ShiftAssignmentResponse.model_validate(a) for a in assignments]


@router.get("/user/{system_user_id}", response_model=List[ShiftAssignmentResponse])
def list_assignments_by_member(
    system_user_id: int,
    db: Session = Depends(get_db),
):
    assignments = repository.list_assignments_by_member(db, system_user_id)
    return [ShiftAssignmentResponse.model_validate(a) for a in assignments]


@router.get("/shift/{workshift_id}", response_model=List[ShiftAssignmentResponse])
def list_assignments_by_shift(
    workshift_id: int,
    db: Session = Depends(get_db),
):
    assignments = repository.list_assignments_by_shift(db, workshift_id)
    return [ShiftAssignmentResponse.model_validate(a) for a in assignments]


@router.delete("/{assignment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_assignment(
    assignment_id: int,
    db: Session = Depends(get_db),
):
    try:
        repository.delete_assignment(db, assignment_id)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return None
