"""
Scheduling service package.

Usage:
    from shiftdesk.services.scheduling import DatabaseBackend, SchedulingWizard

    # Run the wizard in-process against a database session
    wizard = SchedulingWizard(DatabaseBackend(db))
    wizard.open()
    wizard.select_center(1)
    wizard.toggle_date("2025-03-03")
    wizard.submit()   # stage 1 -> 2, shifts created

    # Or drive the technician calendar directly
    from shiftdesk.services.scheduling import InteractiveScheduler

    scheduler = InteractiveScheduler(technicians=techs)
    scheduler.create(person_id=7, start=datetime(2025, 3, 3, 9, 0))
"""

from .types import (
    Center,
    Member,
    MemberRole,
    WorkShift,
    ShiftStatus,
    ShiftAssignment,
    Slot,
    SlotPlan,
    SlotGenerationSummary,
    WorkItem,
    ScheduledEvent,
    EventStatus,
    ShiftCategory,
    BatchResult,
    ItemOutcome,
)
from .errors import (
    SchedulingError,
    ValidationError,
    ConflictError,
    PastTimeError,
    PermissionDeniedError,
    NotFoundError,
    WizardError,
    RemoteError,
    PartialFailureError,
)
from .overlap import conflicts, find_conflicts
from .slot_generator import plan_slots, validate_slot_window
from .backend import SchedulingBackend, DatabaseBackend, HttpBackend, get_backend
from .provisioning import provision_shifts
from .assignments import AssignmentManager, work_items_from_assignments
from .wizard import SchedulingWizard, WizardStage
from .scheduler import InteractiveScheduler, EventFilter
from .calendar_view import build_month_calendar, attendance_stats, resolve_assignments

__all__ = [
    # Types
    "Center",
    "Member",
    "MemberRole",
    "WorkShift",
    "ShiftStatus",
    "ShiftAssignment",
    "Slot",
    "SlotPlan",
    "SlotGenerationSummary",
    "WorkItem",
    "ScheduledEvent",
    "EventStatus",
    "ShiftCategory",
    "BatchResult",
    "ItemOutcome",
    # Errors
    "SchedulingError",
    "ValidationError",
    "ConflictError",
    "PastTimeError",
    "PermissionDeniedError",
    "NotFoundError",
    "WizardError",
    "RemoteError",
    "PartialFailureError",
    # Backends
    "SchedulingBackend",
    "DatabaseBackend",
    "HttpBackend",
    "get_backend",
    # Main entry points
    "SchedulingWizard",
    "WizardStage",
    "InteractiveScheduler",
    "EventFilter",
    "AssignmentManager",
    "provision_shifts",
    # Lower-level functions
    "conflicts",
    "find_conflicts",
    "plan_slots",
    "validate_slot_window",
    "work_items_from_assignments",
    "build_month_calendar",
    "attendance_stats",
    "resolve_assignments",
]
