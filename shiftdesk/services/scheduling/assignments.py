"""
Assignment manager: binds staff and technicians to work shifts.
"""

import logging
from typing import Iterable

from .backend import SchedulingBackend
from .errors import NotFoundError, SchedulingError, ValidationError
from .types import (
    BatchResult,
    ItemOutcome,
    ShiftAssignment,
    WorkItem,
    WorkShift,
)


logger = logging.getLogger(__name__)


class AssignmentManager:
    """
    Many-to-many bindings between members and shifts.

    Binding several members is not transactional: each member is one backend
    call, every member is attempted, and earlier successes are kept when a
    later call fails.
    """

    def __init__(self, backend: SchedulingBackend):
        self.backend = backend

    def assign(self, member_ids: Iterable[int], shift_ids: Iterable[int]) -> BatchResult:
        members = list(dict.fromkeys(member_ids))
        shifts = list(dict.fromkeys(shift_ids))
        if not shifts:
            raise ValidationError("No workshifts to assign")
        if not members:
            raise ValidationError("Select at least one user")

        result = BatchResult()
        for member_id in members:
            try:
                self.backend.assign_member_to_shifts(member_id, shifts)
            except SchedulingError as e:
                logger.warning(f"Assigning member {member_id} to {len(shifts)} shifts failed: {e}")
                result.outcomes.append(ItemOutcome(item_id=member_id, success=False, error=str(e)))
                continue
            result.outcomes.append(ItemOutcome(item_id=member_id, success=True))

        logger.info(f"Assigned {len(result.succeeded)}/{len(members)} members to {len(shifts)} shifts")
        return result

    def remove(self, assignment_id: int) -> None:
        self.backend.delete_assignment(assignment_id)

    def retarget(self, system_user_id: int, from_workshift_id: int, to_workshift_id: int) -> ShiftAssignment:
        """Move a member's binding from one shift to another."""
        current = next(
            (a for a in self.backend.list_assignments_by_member(system_user_id)
             if a.workshift_id == from_workshift_id),
            None,
        )
        if current is None:
            raise NotFoundError(
                f"Member {system_user_id} is not assigned to workshift {from_workshift_id}"
            )

        if from_workshift_id == to_workshift_id:
            return current

        # bind the new shift first so a failed call leaves the old binding in place
        created = self.backend.assign_member_to_shifts(system_user_id, [to_workshift_id])
        self.backend.delete_assignment(current.id)
        return next(a for a in created if a.workshift_id == to_workshift_id)


def work_items_from_assignments(
    shifts: Iterable[WorkShift],
    assignments: Iterable[ShiftAssignment],
) -> list[WorkItem]:
    """One work item per (member, assigned shift)."""
    shifts_by_id = {s.id: s for s in shifts}
    items = []
    for a in assignments:
        shift = shifts_by_id.get(a.workshift_id)
        if shift is None:
            continue
        items.append(WorkItem(
            person_id=a.system_user_id,
            start=shift.start_datetime,
            end=shift.end_datetime,
            id=f"assignment-{a.id}",
        ))
    return items
