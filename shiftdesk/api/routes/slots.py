from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from shiftdesk.api.deps import get_db
from shiftdesk.core.config import settings
from shiftdesk.schemas.slots import GenerateSlotsRequest, GenerateSlotsResponse, SlotResponse
from shiftdesk.services.scheduling import repository
from shiftdesk.services.scheduling.errors import NotFoundError, ValidationError

router = APIRouter(prefix="/slots", tags=["slots"])


@router.post("/generate", response_model=GenerateSlotsResponse)
def generate_slots(
    payload: GenerateSlotsRequest,
    db: Session = Depends(get_db),
):
    """
    Expand the time window into slots for every center and date.
    Slots that already exist are skipped, so the call can be repeated.
    """
    try:
        plan = repository.generate_slots(
            db,
            payload.center_ids,
            payload.dates,
            payload.start_time,
            payload.end_time,
            payload.duration,
            settings.DEFAULT_SLOT_CAPACITY,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return GenerateSlotsResponse(
        created=plan.created,
        skipped=plan.skipped,
        slots=[SlotResponse.model_validate(s) for s in plan.slots],
    )


@router.get("", response_model=List[SlotResponse])
def list_slots(
    center_id: Optional[int] = None,
    db: Session = Depends(get_db),
):
    return [SlotResponse.model_validate(s) for s in repository.list_slots(db, center_id)]
