"""
Internal data types for scheduling logic.
decoupled from SQLAlchemy models for cleaner logic.
"""

from dataclasses import dataclass, field
from datetime import date, time, datetime, timedelta
from enum import Enum
from typing import Optional


class ShiftStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MemberRole(str, Enum):
    STAFF = "STAFF"
    TECHNICIAN = "TECHNICIAN"


class EventStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class ShiftCategory(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
    NIGHT = "night"


@dataclass
class Center:
    id: int
    name: str
    address: str = ""


@dataclass
class Member:
    """A staff member or technician who can be put on a shift."""
    system_user_id: int
    name: str
    role: MemberRole
    center_id: int
    email: str = ""


@dataclass
class WorkShift:
    """An operating window for a center on one calendar date."""
    id: int
    shift_code: str
    shift_date: date
    start_time: time  # wall clock, no timezone
    end_time: time
    center_id: int
    status: ShiftStatus = ShiftStatus.ACTIVE

    @property
    def start_datetime(self) -> datetime:
        return datetime.combine(self.shift_date, self.start_time)

    @property
    def end_datetime(self) -> datetime:
        return datetime.combine(self.shift_date, self.end_time)


@dataclass
class ShiftAssignment:
    id: int
    system_user_id: int
    workshift_id: int


@dataclass
class Slot:
    """A fixed-duration bookable interval derived from a shift window."""
    center_id: int
    slot_date: date
    start_time: time
    end_time: time
    capacity: int = 1
    booked_count: int = 0
    status: str = "active"
    id: Optional[int] = None

    @property
    def natural_key(self) -> tuple[int, date, time]:
        return self.center_id, self.slot_date, self.start_time


@dataclass
class WorkItem:
    """
    Canonical bookable work item: one person busy over [start, end).
    Both calendar events and assigned shifts are reduced to this before
    conflict checks.
    """
    person_id: int
    start: datetime
    end: datetime
    id: Optional[str] = None

    @property
    def duration(self) -> timedelta:
        return self.end - self.start


@dataclass
class ScheduledEvent:
    """A technician's work item on the interactive calendar."""
    id: str
    technician_id: int
    start: datetime
    end: datetime
    title: str = ""
    status: EventStatus = EventStatus.SCHEDULED

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def as_work_item(self) -> WorkItem:
        return WorkItem(person_id=self.technician_id, start=self.start, end=self.end, id=self.id)


@dataclass
class SlotGenerationSummary:
    created: int
    skipped: int


@dataclass
class SlotPlan:
    """Output of slot planning, before persistence."""
    created: int = 0
    skipped: int = 0
    slots: list[Slot] = field(default_factory=list)

    def summary(self) -> SlotGenerationSummary:
        return SlotGenerationSummary(created=self.created, skipped=self.skipped)


@dataclass
class ItemOutcome:
    item_id: int
    success: bool
    error: Optional[str] = None


@dataclass
class BatchResult:
    """Per-item outcomes of a non-transactional multi-call operation."""
    outcomes: list[ItemOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> list[int]:
        return [o.item_id for o in self.outcomes if o.success]

    @property
    def failed(self) -> list[int]:
        return [o.item_id for o in self.outcomes if not o.success]

    @property
    def ok(self) -> bool:
        return all(o.success for o in self.outcomes)

    def errors(self) -> dict[int, str]:
        return {o.item_id: o.error or "" for o in self.outcomes if not o.success}
