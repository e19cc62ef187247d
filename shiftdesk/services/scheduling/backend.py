"""
Backend abstraction for the scheduling engine.
The wizard and the assignment manager only talk to a SchedulingBackend,
either over HTTP or straight against the database.
"""

import logging
from abc import ABC, abstractmethod
from datetime import date
from typing import Any, Optional

import httpx
from sqlalchemy.orm import Session

from shiftdesk.core.config import settings

from . import repository
from .errors import RemoteError
from .time_grid import format_hhmm, parse_date_key, parse_hhmm, to_date_key
from .types import (
    Center,
    Member,
    MemberRole,
    ShiftAssignment,
    ShiftStatus,
    SlotGenerationSummary,
    WorkShift,
)


logger = logging.getLogger(__name__)


class SchedulingBackend(ABC):
    """Remote operations the scheduling engine depends on."""

    @abstractmethod
    def create_workshifts_bulk(
        self, center_id: int, dates: list[date], start_time: str, end_time: str
    ) -> list[WorkShift]:
        ...

    @abstractmethod
    def assign_member_to_shifts(self, system_user_id: int, workshift_ids: list[int]) -> list[ShiftAssignment]:
        ...

    @abstractmethod
    def generate_slots(
        self,
        center_ids: list[int],
        dates: list[date],
        start_time: str,
        end_time: str,
        duration_minutes: int,
    ) -> SlotGenerationSummary:
        ...

    @abstractmethod
    def list_centers(self) -> list[Center]:
        ...

    @abstractmethod
    def list_members(self, role: Optional[MemberRole] = None, center_id: Optional[int] = None) -> list[Member]:
        ...

    @abstractmethod
    def list_workshifts(
        self,
        center_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[WorkShift]:
        ...

    @abstractmethod
    def list_assignments_by_member(self, system_user_id: int) -> list[ShiftAssignment]:
        ...

    @abstractmethod
    def list_assignments_by_shift(self, workshift_id: int) -> list[ShiftAssignment]:
        ...

    @abstractmethod
    def delete_assignment(self, assignment_id: int) -> None:
        ...

    @abstractmethod
    def delete_workshift(self, workshift_id: int) -> None:
        ...


class DatabaseBackend(SchedulingBackend):
    """Runs the operations in-process against a SQLAlchemy session."""

    def __init__(self, db: Session, slot_capacity: Optional[int] = None):
        self.db = db
        self.slot_capacity = slot_capacity or settings.DEFAULT_SLOT_CAPACITY

    def create_workshifts_bulk(self, center_id, dates, start_time, end_time):
        return repository.create_workshifts_bulk(self.db, center_id, dates, start_time, end_time)

    def assign_member_to_shifts(self, system_user_id, workshift_ids):
        return repository.assign_member_to_shifts(self.db, system_user_id, workshift_ids)

    def generate_slots(self, center_ids, dates, start_time, end_time, duration_minutes):
        plan = repository.generate_slots(
            self.db, center_ids, dates, start_time, end_time, duration_minutes, self.slot_capacity
        )
        return plan.summary()

    def list_centers(self):
        return repository.list_centers(self.db)

    def list_members(self, role=None, center_id=None):
        return repository.list_members(self.db, role=role, center_id=center_id)

    def list_workshifts(self, center_id=None, start_date=None, end_date=None):
        return repository.list_workshifts(self.db, center_id, start_date, end_date)

    def list_assignments_by_member(self, system_user_id):
        return repository.list_assignments_by_member(self.db, system_user_id)

    def list_assignments_by_shift(self, workshift_id):
        return repository.list_assignments_by_shift(self.db, workshift_id)

    def delete_assignment(self, assignment_id):
        repository.delete_assignment(self.db, assignment_id)

    def delete_workshift(self, workshift_id):
        repository.delete_workshift(self.db, workshift_id)


class HttpBackend(SchedulingBackend):
    """Talks to the ShiftDesk REST API."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.client = client or httpx.Client(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.API_TIMEOUT_SECONDS,
        )
        # an injected client (e.g. a TestClient) brings its own base url
        self.prefix = "" if client is None else (base_url or "").rstrip("/")

    def close(self) -> None:
        self.client.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self.client.request(method, f"{self.prefix}{path}", **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            message = _error_detail(e.response)
            logger.error(f"Backend {method} {path} failed: {e.response.status_code} - {message}")
            raise RemoteError(message, status_code=e.response.status_code) from e
        except httpx.RequestError as e:
            logger.error(f"Backend {method} {path} unreachable: {e}")
            raise RemoteError(f"Backend unreachable: {e}") from e

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    def create_workshifts_bulk(self, center_id, dates, start_time, end_time):
        payload = {
            "center_id": center_id,
            "shift_dates": [to_date_key(d) for d in dates],
            "start_time": format_hhmm(parse_hhmm(start_time)),
            "end_time": format_hhmm(parse_hhmm(end_time)),
            "status": ShiftStatus.ACTIVE.value,
        }
        data = self._request("POST", "/workshifts", json=payload)
        return [_workshift_from_json(item) for item in data]

    def assign_member_to_shifts(self, system_user_id, workshift_ids):
        payload = {"system_user_id": system_user_id, "workshift_ids": list(workshift_ids)}
        data = self._request("POST", "/shift-assignments/assign", json=payload)
        return [_assignment_from_json(item) for item in data]

    def generate_slots(self, center_ids, dates, start_time, end_time, duration_minutes):
        payload = {
            "center_ids": list(center_ids),
            "dates": [to_date_key(d) for d in dates],
            "start_time": format_hhmm(parse_hhmm(start_time)),
            "end_time": format_hhmm(parse_hhmm(end_time)),
            "duration": duration_minutes,
        }
        data = self._request("POST", "/slots/generate", json=payload)
        return SlotGenerationSummary(created=data["created"], skipped=data["skipped"])

    def list_centers(self):
        data = self._request("GET", "/centers")
        return [Center(id=c["id"], name=c["name"], address=c.get("address", "")) for c in data]

    def list_members(self, role=None, center_id=None):
        params = {}
        if role is not None:
            params["role"] = role.value
        if center_id is not None:
            params["center_id"] = center_id
        data = self._request("GET", "/members", params=params)
        return [_member_from_json(item) for item in data]

    def list_workshifts(self, center_id=None, start_date=None, end_date=None):
        params = {}
        if center_id is not None:
            params["center_id"] = center_id
        if start_date is not None:
            params["start_date"] = to_date_key(start_date)
        if end_date is not None:
            params["end_date"] = to_date_key(end_date)
        data = self._request("GET", "/workshifts", params=params)
        return [_workshift_from_json(item) for item in data]

    def list_assignments_by_member(self, system_user_id):
        data = self._request("GET", f"/shift-assignments/user/{system_user_id}")
        return [_assignment_from_json(item) for item in data]

    def list_assignments_by_shift(self, workshift_id):
        data = self._request("GET", f"/shift-assignments/shift/{workshift_id}")
        return [_assignment_from_json(item) for item in data]

    def delete_assignment(self, assignment_id):
        self._request("DELETE", f"/shift-assignments/{assignment_id}")

    def delete_workshift(self, workshift_id):
        self._request("DELETE", f"/workshifts/{workshift_id}")


def _error_detail(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    if isinstance(detail, list):
        # pydantic validation errors
        return "; ".join(str(d.get("msg", d)) for d in detail)
    return str(detail or response.text or f"HTTP {response.status_code}")


def _workshift_from_json(data: dict) -> WorkShift:
    return WorkShift(
        id=data["id"],
        shift_code=data["shift_code"],
        shift_date=parse_date_key(data["shift_date"]),
        start_time=parse_hhmm(data["start_time"]),
        end_time=parse_hhmm(data["end_time"]),
        center_id=data["center_id"],
        status=ShiftStatus(data.get("status", ShiftStatus.ACTIVE.value)),
    )


def _assignment_from_json(data: dict) -> ShiftAssignment:
    return ShiftAssignment(
        id=data["id"],
        system_user_id=data["system_user_id"],
        workshift_id=data["workshift_id"],
    )


def _member_from_json(data: dict) -> Member:
    return Member(
        system_user_id=data["id"],
        name=data["name"],
        role=MemberRole(data["role"]),
        center_id=data["center_id"],
        email=data.get("email", ""),
    )


def get_backend(db: Optional[Session] = None) -> SchedulingBackend:
    """Database backend when a session is at hand, HTTP otherwise."""
    if db is not None:
        return DatabaseBackend(db)
    return HttpBackend()
