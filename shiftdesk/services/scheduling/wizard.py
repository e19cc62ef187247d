"""
Scheduling wizard - staged orchestration of provisioning, assignment and
slot generation.

Stages:
    1. CREATE_SHIFTS     - one shift per selected date for a center
    2. ASSIGN_PERSONNEL  - bind selected staff/technicians to those shifts
    3. GENERATE_SLOTS    - expand the shift window into bookable slots
    4. DONE

Only `submit` has side effects. `back` restores the previous stage but never
undoes what earlier stages already created on the backend.
"""

import logging
from dataclasses import dataclass
from datetime import date
from enum import IntEnum
from typing import Callable, Optional, Union

from shiftdesk.core.config import settings

from .assignments import AssignmentManager
from .backend import SchedulingBackend
from .errors import PartialFailureError, RemoteError, ValidationError, WizardError
from .provisioning import normalize_dates, provision_shifts
from .slot_generator import validate_slot_window
from .time_grid import format_hhmm, parse_date_key, parse_hhmm
from .types import BatchResult, Center, Member, MemberRole, SlotGenerationSummary, WorkShift


logger = logging.getLogger(__name__)


class WizardStage(IntEnum):
    CREATE_SHIFTS = 1
    ASSIGN_PERSONNEL = 2
    GENERATE_SLOTS = 3
    DONE = 4


@dataclass
class Notice:
    level: str  # "success" | "error" | "info"
    message: str


class SchedulingWizard:
    """State for one open wizard instance."""

    def __init__(
        self,
        backend: SchedulingBackend,
        on_completed: Optional[Callable[[], None]] = None,
    ):
        self.backend = backend
        self.assignment_manager = AssignmentManager(backend)
        self.on_completed = on_completed
        self.is_open = False
        self.busy = False
        # bumped on every open/close so late results can be told apart
        self._session = 0
        self._reset()

    def _reset(self) -> None:
        self.stage = WizardStage.CREATE_SHIFTS
        self.centers: list[Center] = []
        self.center_id: Optional[int] = None
        self.shift_dates: list[date] = []
        self.start_time = settings.DEFAULT_SHIFT_START
        self.end_time = settings.DEFAULT_SHIFT_END
        self.created_shifts: list[WorkShift] = []

        self.staff: list[Member] = []
        self.technicians: list[Member] = []
        self.selected_staff_ids: list[int] = []
        self.selected_technician_ids: list[int] = []
        self.assigned_member_ids: set[int] = set()
        self.last_assignment_result: Optional[BatchResult] = None

        self.slot_duration = settings.DEFAULT_SLOT_DURATION_MINUTES
        self.generate_summary: Optional[SlotGenerationSummary] = None
        self.notices: list[Notice] = []

    # ---------- lifecycle ----------

    def open(self) -> None:
        self._session += 1
        self._reset()
        self.is_open = True

    def close(self) -> None:
        self._session += 1
        self._reset()
        self.is_open = False
        self.busy = False

    def finish(self) -> None:
        self._require_open()
        if self.stage != WizardStage.DONE:
            raise WizardError("The wizard is not complete yet")
        if self.on_completed:
            self.on_completed()
        self.close()

    # ---------- stage 1 inputs ----------

    def load_centers(self) -> None:
        """Fetch the centers offered in stage 1."""
        token = self._session
        try:
            centers = self.backend.list_centers()
        except RemoteError as e:
            logger.warning(f"Loading centers failed: {e}")
            if self._still_current(token, "load centers"):
                self._notify("error", f"Failed to load centers: {e}")
            return
        if self._still_current(token, "load centers"):
            self.centers = centers

    def select_center(self, center_id: int) -> None:
        self.center_id = center_id

    def toggle_date(self, value: Union[str, date]) -> None:
        d = parse_date_key(value)
        if d in self.shift_dates:
            self.shift_dates.remove(d)
        else:
            self.shift_dates.append(d)
        self.shift_dates.sort()

    def set_window(self, start_time: str, end_time: str) -> None:
        self.start_time = format_hhmm(parse_hhmm(start_time))
        self.end_time = format_hhmm(parse_hhmm(end_time))

    # ---------- stage 2 inputs ----------

    def toggle_staff(self, system_user_id: int) -> None:
        _toggle(self.selected_staff_ids, system_user_id)

    def toggle_technician(self, system_user_id: int) -> None:
        _toggle(self.selected_technician_ids, system_user_id)

    @property
    def selected_member_ids(self) -> list[int]:
        return list(dict.fromkeys(self.selected_staff_ids + self.selected_technician_ids))

    @property
    def pending_member_ids(self) -> list[int]:
        """Selected members not yet bound to the cached shifts."""
        return [m for m in self.selected_member_ids if m not in self.assigned_member_ids]

    @property
    def cached_shift_ids(self) -> list[int]:
        return [s.id for s in self.created_shifts]

    # ---------- stage 3 inputs ----------

    def set_slot_duration(self, value: Union[int, str]) -> None:
        try:
            self.slot_duration = int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Slot duration must be a whole number of minutes, got {value!r}")

    @property
    def slot_dates(self) -> list[date]:
        return normalize_dates(s.shift_date for s in self.created_shifts)

    # ---------- navigation ----------

    def submit(self) -> WizardStage:
        """Run the current stage's action and advance on success."""
        self._require_open()
        if self.busy:
            raise WizardError("A request for this step is already running")

        handlers = {
            WizardStage.CREATE_SHIFTS: self._submit_create_shifts,
            WizardStage.ASSIGN_PERSONNEL: self._submit_assign,
            WizardStage.GENERATE_SLOTS: self._submit_generate_slots,
        }
        handler = handlers.get(self.stage)
        if handler is None:
            raise WizardError("Nothing left to submit, the wizard is done")

        token = self._session
        self.busy = True
        try:
            handler(token)
        finally:
            if token == self._session:
                self.busy = False
        return self.stage

    def back(self) -> WizardStage:
        self._require_open()
        if self.stage == WizardStage.CREATE_SHIFTS:
            raise WizardError("Already at the first step")
        self.stage = WizardStage(self.stage - 1)
        return self.stage

    # ---------- stage handlers ----------

    def _submit_create_shifts(self, token: int) -> None:
        shifts = provision_shifts(
            self.backend, self.center_id, self.shift_dates, self.start_time, self.end_time
        )
        if not self._still_current(token, "create shifts"):
            return

        self.created_shifts = shifts
        self.assigned_member_ids = set()
        self.last_assignment_result = None
        self.generate_summary = None
        self.stage = WizardStage.ASSIGN_PERSONNEL
        self._notify("success", f"Created {len(shifts)} workshifts successfully")
        self.load_members()

    def load_members(self) -> None:
        """Fetch the center's staff and technicians for stage 2."""
        token = self._session
        try:
            staff = self.backend.list_members(role=MemberRole.STAFF, center_id=self.center_id)
            technicians = self.backend.list_members(role=MemberRole.TECHNICIAN, center_id=self.center_id)
        except RemoteError as e:
            logger.warning(f"Loading members for center {self.center_id} failed: {e}")
            if self._still_current(token, "load members"):
                self._notify("error", f"Failed to load users: {e}")
            return
        if not self._still_current(token, "load members"):
            return
        self.staff = staff
        self.technicians = technicians

    def _submit_assign(self, token: int) -> None:
        if not self.created_shifts:
            raise ValidationError("No workshifts created")
        if not self.selected_member_ids:
            raise ValidationError("Select at least one user")

        pending = self.pending_member_ids
        if pending:
            result = self.assignment_manager.assign(pending, self.cached_shift_ids)
            if not self._still_current(token, "assign"):
                return
            self.last_assignment_result = result
            self.assigned_member_ids.update(result.succeeded)
            if not result.ok:
                message = f"Failed to assign {len(result.failed)} of {len(pending)} users"
                self._notify("error", message)
                raise PartialFailureError(message, result)

        self.stage = WizardStage.GENERATE_SLOTS
        self._notify("success", "Assigned successfully")

    def _submit_generate_slots(self, token: int) -> None:
        if not self.created_shifts:
            raise ValidationError("No workshifts created")
        centers = {s.center_id for s in self.created_shifts}
        if len(centers) != 1:
            raise ValidationError("Created workshifts belong to more than one center")
        center_id = centers.pop()

        start, end = validate_slot_window(self.start_time, self.end_time, self.slot_duration)
        dates = self.slot_dates
        if not dates:
            raise ValidationError("No valid dates to generate slots")

        summary = self.backend.generate_slots(
            [center_id], dates, format_hhmm(start), format_hhmm(end), self.slot_duration
        )
        if not self._still_current(token, "generate slots"):
            return

        self.generate_summary = summary
        self.stage = WizardStage.DONE
        self._notify("success", f"Slots: +{summary.created}, skipped {summary.skipped}")

    # ---------- helpers ----------

    def _require_open(self) -> None:
        if not self.is_open:
            raise WizardError("The wizard is closed")

    def _still_current(self, token: int, action: str) -> bool:
        if token != self._session or not self.is_open:
            logger.info(f"Ignoring late '{action}' result, the wizard was closed")
            return False
        return True

    def _notify(self, level: str, message: str) -> None:
        self.notices.append(Notice(level=level, message=message))


def _toggle(ids: list[int], value: int) -> None:
    if value in ids:
        ids.remove(value)
    else:
        ids.append(value)
