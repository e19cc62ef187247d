"""
Interactive scheduler: technician work items on a week/day calendar.

Every gesture is an explicit command (resize, move, create, status change)
validated against the current event set before it is applied, so no two
events of one technician ever overlap.
"""

import csv
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from io import StringIO
from itertools import count
from typing import Callable, Iterable, Optional, Union

from shiftdesk.core.config import settings

from .assignments import work_items_from_assignments
from .errors import (
    ConflictError,
    NotFoundError,
    PastTimeError,
    PermissionDeniedError,
    ValidationError,
)
from .overlap import find_conflicts
from .types import EventStatus, Member, ScheduledEvent, ShiftAssignment, WorkItem, WorkShift


logger = logging.getLogger(__name__)

STATUS_ORDER = [
    EventStatus.SCHEDULED,
    EventStatus.IN_PROGRESS,
    EventStatus.COMPLETED,
    EventStatus.CANCELLED,
]


def normalize_status(value: Optional[str]) -> EventStatus:
    """Map free-form status text onto a known status, defaulting to scheduled."""
    key = "-".join((value or "scheduled").lower().split())
    try:
        return EventStatus(key)
    except ValueError:
        return EventStatus.SCHEDULED


@dataclass
class ResizeEvent:
    event_id: str
    new_end: datetime


@dataclass
class MoveEvent:
    event_id: str
    new_start: datetime
    new_end: Optional[datetime] = None  # None keeps the current duration
    new_person_id: Optional[int] = None


@dataclass
class CreateEvent:
    person_id: int
    start: datetime
    end: Optional[datetime] = None
    title: str = "New Job"


@dataclass
class ChangeStatus:
    event_id: str
    status: Union[EventStatus, str]


Command = Union[ResizeEvent, MoveEvent, CreateEvent, ChangeStatus]


@dataclass
class EventFilter:
    technician_id: Optional[int] = None  # None means all technicians
    text: str = ""
    statuses: list[EventStatus] = field(default_factory=lambda: list(STATUS_ORDER))

    def matches(self, event: ScheduledEvent) -> bool:
        if self.technician_id is not None and event.technician_id != self.technician_id:
            return False
        needle = self.text.strip().lower()
        if needle and needle not in event.title.lower() and needle not in event.status.value:
            return False
        return event.status in self.statuses


class InteractiveScheduler:
    """Owns the event set of one mounted calendar view."""

    def __init__(
        self,
        events: Optional[Iterable[ScheduledEvent]] = None,
        technicians: Optional[Iterable[Member]] = None,
        is_admin: bool = False,
        clock: Callable[[], datetime] = datetime.now,
        default_duration: Optional[timedelta] = None,
    ):
        self.events: list[ScheduledEvent] = list(events or [])
        self.technicians: list[Member] = list(technicians or [])
        self.is_admin = is_admin
        self.clock = clock
        self.default_duration = default_duration or timedelta(minutes=settings.DEFAULT_EVENT_DURATION_MINUTES)
        self._ids = count(1)

    @classmethod
    def from_assignments(
        cls,
        shifts: Iterable[WorkShift],
        assignments: Iterable[ShiftAssignment],
        technicians: Iterable[Member],
        **kwargs,
    ) -> "InteractiveScheduler":
        """Seed the calendar with the technicians' assigned shifts."""
        technicians = list(technicians)
        tech_ids = {t.system_user_id for t in technicians}
        shifts = list(shifts)
        assignments = list(assignments)
        by_shift = {s.id: s for s in shifts}
        titles = {
            f"assignment-{a.id}": by_shift[a.workshift_id].shift_code
            for a in assignments if a.workshift_id in by_shift
        }

        events = [
            ScheduledEvent(
                id=item.id,
                technician_id=item.person_id,
                start=item.start,
                end=item.end,
                title=titles[item.id],
            )
            for item in work_items_from_assignments(shifts, assignments)
            if item.person_id in tech_ids
        ]
        return cls(events=events, technicians=technicians, **kwargs)

    # ---------- queries ----------

    def get(self, event_id: str) -> ScheduledEvent:
        for event in self.events:
            if event.id == event_id:
                return event
        raise NotFoundError(f"Event {event_id} not found")

    def work_items(self) -> list[WorkItem]:
        return [e.as_work_item() for e in self.events]

    def filtered(self, view: Optional[EventFilter] = None) -> list[ScheduledEvent]:
        """Events visible under a filter. Never changes the event set."""
        view = view or EventFilter()
        return [e for e in self.events if view.matches(e)]

    # ---------- commands ----------

    def apply(self, command: Command) -> ScheduledEvent:
        handlers = {
            ResizeEvent: self._resize,
            MoveEvent: self._move,
            CreateEvent: self._create,
            ChangeStatus: self._change_status,
        }
        handler = handlers.get(type(command))
        if handler is None:
            raise ValidationError(f"Unsupported command: {type(command).__name__}")
        return handler(command)

    def resize(self, event_id: str, new_end: datetime) -> ScheduledEvent:
        return self.apply(ResizeEvent(event_id=event_id, new_end=new_end))

    def move(
        self,
        event_id: str,
        new_start: datetime,
        new_end: Optional[datetime] = None,
        new_person_id: Optional[int] = None,
    ) -> ScheduledEvent:
        return self.apply(MoveEvent(event_id, new_start, new_end, new_person_id))

    def create(self, person_id: int, start: datetime, end: Optional[datetime] = None, title: str = "New Job") -> ScheduledEvent:
        return self.apply(CreateEvent(person_id=person_id, start=start, end=end, title=title))

    def set_status(self, event_id: str, status: Union[EventStatus, str]) -> ScheduledEvent:
        return self.apply(ChangeStatus(event_id=event_id, status=status))

    def quick_slot(self) -> ScheduledEvent:
        """One default-length event at the next full hour for the first technician."""
        if not self.technicians:
            raise ValidationError("No technicians to schedule")
        now = self.clock()
        start = now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1)
        return self.apply(CreateEvent(
            person_id=self.technicians[0].system_user_id,
            start=start,
            end=start + self.default_duration,
            title="Quick slot",
        ))

    def _resize(self, cmd: ResizeEvent) -> ScheduledEvent:
        event = self.get(cmd.event_id)
        candidate = WorkItem(person_id=event.technician_id, start=event.start, end=cmd.new_end, id=event.id)
        _require_valid_interval(candidate)
        self._require_free(candidate)

        event.end = cmd.new_end
        logger.debug(f"Resized event {event.id} to end at {cmd.new_end}")
        return event

    def _move(self, cmd: MoveEvent) -> ScheduledEvent:
        event = self.get(cmd.event_id)
        new_end = cmd.new_end if cmd.new_end is not None else cmd.new_start + event.duration
        person_id = cmd.new_person_id if cmd.new_person_id is not None else event.technician_id
        candidate = WorkItem(person_id=person_id, start=cmd.new_start, end=new_end, id=event.id)
        _require_valid_interval(candidate)
        if cmd.new_start < self.clock():
            raise PastTimeError("Cannot move event to the past")
        self._require_free(candidate)

        event.start = cmd.new_start
        event.end = new_end
        event.technician_id = person_id
        logger.debug(f"Moved event {event.id} to {cmd.new_start} for technician {person_id}")
        return event

    def _create(self, cmd: CreateEvent) -> ScheduledEvent:
        end = cmd.end if cmd.end is not None and cmd.end > cmd.start else cmd.start + self.default_duration
        if cmd.start < self.clock():
            raise PastTimeError("Cannot create in the past")
        candidate = WorkItem(person_id=cmd.person_id, start=cmd.start, end=end)
        self._require_free(candidate)

        event = ScheduledEvent(
            id=self._next_id(),
            technician_id=cmd.person_id,
            start=cmd.start,
            end=end,
            title=cmd.title,
        )
        self.events.append(event)
        logger.debug(f"Created event {event.id} for technician {cmd.person_id}")
        return event

    def _change_status(self, cmd: ChangeStatus) -> ScheduledEvent:
        if not self.is_admin:
            raise PermissionDeniedError("Only admins can change event status")
        event = self.get(cmd.event_id)
        event.status = cmd.status if isinstance(cmd.status, EventStatus) else normalize_status(cmd.status)
        return event

    def _next_id(self) -> str:
        taken = {e.id for e in self.events}
        while True:
            candidate = f"new_{next(self._ids)}"
            if candidate not in taken:
                return candidate

    def _require_free(self, candidate: WorkItem) -> None:
        clashes = find_conflicts(candidate, self.work_items())
        if clashes:
            raise ConflictError("Overlap detected for this technician", clashes)

    # ---------- export ----------

    def export_csv(self) -> str:
        buffer = StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
        writer.writerow(["ID", "Title", "Start", "End", "Technician"])
        for e in self.events:
            writer.writerow([e.id, e.title, e.start.isoformat(), e.end.isoformat(), e.technician_id])
        return buffer.getvalue()


def _require_valid_interval(item: WorkItem) -> None:
    if item.end <= item.start:
        raise ValidationError("Event must end after it starts")
