from shiftdesk.db.database import Base

# Import models
from shiftdesk.db.models.centers import Centers
from shiftdesk.db.models.members import Members, MemberRole
from shiftdesk.db.models.workshifts import WorkShifts, WorkShiftStatus
from shiftdesk.db.models.shift_assignments import ShiftAssignments
from shiftdesk.db.models.slots import Slots

__all__ = [
    "Base",
    # Models
    "Centers",
    "Members",
    "WorkShifts",
    "ShiftAssignments",
    "Slots",
    # Enums
    "MemberRole",
    "WorkShiftStatus",
]
