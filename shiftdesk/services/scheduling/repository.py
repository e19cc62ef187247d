"""
Database operations behind the scheduling backend.
Reads and writes SQLAlchemy rows and converts them to internal types.
"""

import logging
from datetime import date, time
from typing import Optional, Union

from sqlalchemy import select, and_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from shiftdesk.db.models.centers import Centers
from shiftdesk.db.models.members import Members, MemberRole as DBMemberRole
from shiftdesk.db.models.workshifts import WorkShifts, WorkShiftStatus
from shiftdesk.db.models.shift_assignments import ShiftAssignments
from shiftdesk.db.models.slots import Slots

from .errors import NotFoundError, ValidationError
from .slot_generator import plan_slots
from .time_grid import parse_hhmm
from .types import (
    Center,
    Member,
    MemberRole,
    ShiftAssignment,
    ShiftStatus,
    Slot,
    SlotPlan,
    WorkShift,
)


logger = logging.getLogger(__name__)


def shift_code_for(center_id: int, shift_date: date, start_time: time) -> str:
    return f"WS-{center_id}-{shift_date:%Y%m%d}-{start_time:%H%M}"


def to_workshift(row: WorkShifts) -> WorkShift:
    return WorkShift(
        id=row.id,
        shift_code=row.shift_code,
        shift_date=row.shift_date,
        start_time=row.start_time,
        end_time=row.end_time,
        center_id=row.center_id,
        status=ShiftStatus(row.status.value),
    )


def to_assignment(row: ShiftAssignments) -> ShiftAssignment:
    return ShiftAssignment(id=row.id, system_user_id=row.system_user_id, workshift_id=row.workshift_id)


def to_member(row: Members) -> Member:
    return Member(
        system_user_id=row.id,
        name=row.name,
        role=MemberRole(row.role.value),
        center_id=row.center_id,
        email=row.email,
    )


def to_slot(row: Slots) -> Slot:
    return Slot(
        id=row.id,
        center_id=row.center_id,
        slot_date=row.slot_date,
        start_time=row.start_time,
        end_time=row.end_time,
        capacity=row.capacity,
        booked_count=row.booked_count,
        status=row.status,
    )


def to_center(row: Centers) -> Center:
    return Center(id=row.id, name=row.name, address=row.address)


def _require_center(db: Session, center_id: int) -> Centers:
    center = db.get(Centers, center_id)
    if not center:
        raise NotFoundError(f"Center {center_id} not found")
    return center


# ---------- work shifts ----------

def create_workshifts_bulk(
    db: Session,
    center_id: int,
    dates: list[date],
    start_time: Union[str, time],
    end_time: Union[str, time],
    status: ShiftStatus = ShiftStatus.ACTIVE,
) -> list[WorkShift]:
    """Create one work shift per distinct date."""
    start = parse_hhmm(start_time)
    end = parse_hhmm(end_time)
    if start >= end:
        raise ValidationError("Start time must be before end time")
    unique_dates = sorted(set(dates))
    if not unique_dates:
        raise ValidationError("At least one shift date is required")
    _require_center(db, center_id)

    rows = [
        WorkShifts(
            shift_code=shift_code_for(center_id, d, start),
            shift_date=d,
            start_time=start,
            end_time=end,
            status=WorkShiftStatus(status.value),
            center_id=center_id,
        )
        for d in unique_dates
    ]
    db.add_all(rows)
    db.commit()
    for row in rows:
        db.refresh(row)

    logger.info(f"Created {len(rows)} workshifts for center {center_id}")
    return [to_workshift(r) for r in rows]


def list_workshifts(
    db: Session,
    center_id: Optional[int] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[WorkShift]:
    stmt = select(WorkShifts)
    if center_id is not None:
        stmt = stmt.where(WorkShifts.center_id == center_id)
    if start_date is not None:
        stmt = stmt.where(WorkShifts.shift_date >= start_date)
    if end_date is not None:
        stmt = stmt.where(WorkShifts.shift_date <= end_date)
    stmt = stmt.order_by(WorkShifts.shift_date, WorkShifts.start_time, WorkShifts.id)
    return [to_workshift(r) for r in db.execute(stmt).scalars().all()]


def delete_workshift(db: Session, workshift_id: int) -> None:
    row = db.get(WorkShifts, workshift_id)
    if not row:
        raise NotFoundError(f"Workshift {workshift_id} not found")
    db.delete(row)
    db.commit()


# ---------- assignments ----------

def assign_member_to_shifts(
    db: Session,
    system_user_id: int,
    workshift_ids: list[int],
) -> list[ShiftAssignment]:
    """
    Bind a member to every given shift.

    Pairs that already exist are returned as they are, so repeating the call
    is harmless.
    """
    if not workshift_ids:
        raise ValidationError("At least one workshift id is required")
    if not db.get(Members, system_user_id):
        raise NotFoundError(f"Member {system_user_id} not found")

    wanted = list(dict.fromkeys(workshift_ids))
    found = set(db.execute(select(WorkShifts.id).where(WorkShifts.id.in_(wanted))).scalars().all())
    missing = [wid for wid in wanted if wid not in found]
    if missing:
        raise NotFoundError(f"Workshifts not found: {missing}")

    results = []
    for workshift_id in wanted:
        existing = _find_assignment(db, system_user_id, workshift_id)
        if existing:
            results.append(existing)
            continue
        try:
            with db.begin_nested():
                row = ShiftAssignments(system_user_id=system_user_id, workshift_id=workshift_id)
                db.add(row)
        except IntegrityError:
            # lost a race with another writer, the pair exists now
            row = _find_assignment(db, system_user_id, workshift_id)
        results.append(row)

    db.commit()
    return [to_assignment(r) for r in results]


def _find_assignment(db: Session, system_user_id: int, workshift_id: int) -> Optional[ShiftAssignments]:
    stmt = select(ShiftAssignments).where(
        and_(
            ShiftAssignments.system_user_id == system_user_id,
            ShiftAssignments.workshift_id == workshift_id,
        )
    )
    return db.execute(stmt).scalars().first()


def list_assignments_by_member(db: Session, system_user_id: int) -> list[ShiftAssignment]:
    stmt = select(ShiftAssignments).where(ShiftAssignments.system_user_id == system_user_id).order_by(ShiftAssignments.id)
    return [to_assignment(r) for r in db.execute(stmt).scalars().all()]


def list_assignments_by_shift(db: Session, workshift_id: int) -> list[ShiftAssignment]:
    stmt = select(ShiftAssignments).where(ShiftAssignments.workshift_id == workshift_id).order_by(ShiftAssignments.id)
    return [to_assignment(r) for r in db.execute(stmt).scalars().all()]


def list_assignments_for_shifts(db: Session, workshift_ids: list[int]) -> list[ShiftAssignment]:
    if not workshift_ids:
        return []
    stmt = select(ShiftAssignments).where(ShiftAssignments.workshift_id.in_(workshift_ids)).order_by(ShiftAssignments.id)
    return [to_assignment(r) for r in db.execute(stmt).scalars().all()]


def delete_assignment(db: Session, assignment_id: int) -> None:
    row = db.get(ShiftAssignments, assignment_id)
    if not row:
        raise NotFoundError(f"Assignment {assignment_id} not found")
    db.delete(row)
    db.commit()


# ---------- slots ----------

def generate_slots(
    db: Session,
    center_ids: list[int],
    dates: list[date],
    start_time: Union[str, time],
    end_time: Union[str, time],
    duration_minutes: int,
    capacity: int = 1,
) -> SlotPlan:
    """
    Expand the window into slots for every (center, date) and persist the new
    ones. Existing slots are counted as skipped.
    """
    if not center_ids:
        raise ValidationError("At least one center is required")
    if not dates:
        raise ValidationError("At least one date is required")
    for center_id in center_ids:
        _require_center(db, center_id)

    stmt = select(Slots.center_id, Slots.slot_date, Slots.start_time).where(
        and_(
            Slots.center_id.in_(center_ids),
            Slots.slot_date.in_(dates),
        )
    )
    existing_keys = {tuple(r) for r in db.execute(stmt).all()}

    plan = plan_slots(existing_keys, center_ids, dates, start_time, end_time, duration_minutes, capacity)

    persisted = []
    for slot in plan.slots:
        try:
            with db.begin_nested():
                row = Slots(
                    center_id=slot.center_id,
                    slot_date=slot.slot_date,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    capacity=slot.capacity,
                    booked_count=0,
                    status=slot.status,
                )
                db.add(row)
        except IntegrityError:
            # created concurrently since we read the existing keys
            plan.created -= 1
            plan.skipped += 1
            continue
        persisted.append(row)

    db.commit()
    for row in persisted:
        db.refresh(row)
    plan.slots = [to_slot(r) for r in persisted]

    logger.info(f"Slot generation for centers {center_ids}: created={plan.created} skipped={plan.skipped}")
    return plan


def list_slots(db: Session, center_id: Optional[int] = None) -> list[Slot]:
    stmt = select(Slots)
    if center_id is not None:
        stmt = stmt.where(Slots.center_id == center_id)
    stmt = stmt.order_by(Slots.slot_date, Slots.start_time, Slots.center_id)
    return [to_slot(r) for r in db.execute(stmt).scalars().all()]


# ---------- members ----------

def list_members(
    db: Session,
    role: Optional[MemberRole] = None,
    center_id: Optional[int] = None,
) -> list[Member]:
    stmt = select(Members)
    if role is not None:
        stmt = stmt.where(Members.role == DBMemberRole(role.value))
    if center_id is not None:
        stmt = stmt.where(Members.center_id == center_id)
    stmt = stmt.order_by(Members.name, Members.id)
    return [to_member(r) for r in db.execute(stmt).scalars().all()]


# ---------- centers ----------

def list_centers(db: Session) -> list[Center]:
    stmt = select(Centers).order_by(Centers.name, Centers.id)
    return [to_center(r) for r in db.execute(stmt).scalars().all()]
