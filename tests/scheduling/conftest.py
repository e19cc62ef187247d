import pytest
from datetime import date, datetime
from itertools import count

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shiftdesk.db.models import Base, Centers, Members, MemberRole as DBMemberRole
from shiftdesk.services.scheduling.backend import SchedulingBackend
from shiftdesk.services.scheduling.errors import RemoteError
from shiftdesk.services.scheduling.slot_generator import plan_slots
from shiftdesk.services.scheduling.time_grid import parse_hhmm
from shiftdesk.services.scheduling.types import (
    Center,
    Member,
    MemberRole,
    ShiftAssignment,
    WorkShift,
)


CENTER_ID = 1
OTHER_CENTER_ID = 2

STAFF_ALICE = 11
STAFF_BEN = 12
TECH_CARA = 21
TECH_DAN = 22


def get_test_monday() -> date:
    # returns a fixed Monday for deterministic tests
    return date(2025, 3, 3)


def fixed_clock(value: datetime):
    return lambda: value


class FakeBackend(SchedulingBackend):
    """In-memory backend that records every call."""

    def __init__(self, members=None):
        self.members: list[Member] = list(members or [])
        self.shifts: dict[int, WorkShift] = {}
        self.assignments: dict[int, ShiftAssignment] = {}
        self.slot_keys: set = set()
        self.fail_member_ids: set[int] = set()
        self.fail_members_load = False
        self.calls: list[tuple] = []
        # hook run at the start of every call, e.g. to close a wizard mid-flight
        self.on_call = None
        self._ids = count(1)

    def _record(self, name, *args):
        self.calls.append((name, args))
        if self.on_call:
            self.on_call(name)

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def create_workshifts_bulk(self, center_id, dates, start_time, end_time):
        self._record("create_workshifts_bulk", center_id, list(dates), start_time, end_time)
        start = parse_hhmm(start_time)
        end = parse_hhmm(end_time)
        created = []
        for d in dates:
            shift = WorkShift(
                id=next(self._ids),
                shift_code=f"WS-{center_id}-{d:%Y%m%d}-{start:%H%M}",
                shift_date=d,
                start_time=start,
                end_time=end,
                center_id=center_id,
            )
            self.shifts[shift.id] = shift
            created.append(shift)
        return created

    def assign_member_to_shifts(self, system_user_id, workshift_ids):
        self._record("assign_member_to_shifts", system_user_id, list(workshift_ids))
        if system_user_id in self.fail_member_ids:
            raise RemoteError(f"Member {system_user_id} is locked", status_code=409)
        result = []
        for workshift_id in workshift_ids:
            existing = next(
                (a for a in self.assignments.values()
                 if a.system_user_id == system_user_id and a.workshift_id == workshift_id),
                None,
            )
            if existing is None:
                existing = ShiftAssignment(id=next(self._ids), system_user_id=system_user_id, workshift_id=workshift_id)
                self.assignments[existing.id] = existing
            result.append(existing)
        return result

    def generate_slots(self, center_ids, dates, start_time, end_time, duration_minutes):
        self._record("generate_slots", list(center_ids), list(dates), start_time, end_time, duration_minutes)
        plan = plan_slots(self.slot_keys, center_ids, dates, start_time, end_time, duration_minutes)
        self.slot_keys.update(s.natural_key for s in plan.slots)
        return plan.summary()

    def list_centers(self):
        self._record("list_centers")
        return [
            Center(id=CENTER_ID, name="North Depot", address="1 Harbour Road"),
            Center(id=OTHER_CENTER_ID, name="South Depot", address="9 Quarry Lane"),
        ]

    def list_members(self, role=None, center_id=None):
        self._record("list_members", role, center_id)
        if self.fail_members_load:
            raise RemoteError("Member directory unavailable", status_code=503)
        return [
            m for m in self.members
            if (role is None or m.role == role) and (center_id is None or m.center_id == center_id)
        ]

    def list_workshifts(self, center_id=None, start_date=None, end_date=None):
        self._record("list_workshifts", center_id, start_date, end_date)
        return [
            s for s in self.shifts.values()
            if (center_id is None or s.center_id == center_id)
            and (start_date is None or s.shift_date >= start_date)
            and (end_date is None or s.shift_date <= end_date)
        ]

    def list_assignments_by_member(self, system_user_id):
        self._record("list_assignments_by_member", system_user_id)
        return [a for a in self.assignments.values() if a.system_user_id == system_user_id]

    def list_assignments_by_shift(self, workshift_id):
        self._record("list_assignments_by_shift", workshift_id)
        return [a for a in self.assignments.values() if a.workshift_id == workshift_id]

    def delete_assignment(self, assignment_id):
        self._record("delete_assignment", assignment_id)
        if assignment_id not in self.assignments:
            raise RemoteError(f"Assignment {assignment_id} not found", status_code=404)
        del self.assignments[assignment_id]

    def delete_workshift(self, workshift_id):
        self._record("delete_workshift", workshift_id)
        if workshift_id not in self.shifts:
            raise RemoteError(f"Workshift {workshift_id} not found", status_code=404)
        del self.shifts[workshift_id]
        self.assignments = {k: a for k, a in self.assignments.items() if a.workshift_id != workshift_id}


@pytest.fixture
def staff_members() -> list[Member]:
    return [
        Member(system_user_id=STAFF_ALICE, name="Alice Reyes", role=MemberRole.STAFF,
               center_id=CENTER_ID, email="alice@depot.test"),
        Member(system_user_id=STAFF_BEN, name="Ben Ortiz", role=MemberRole.STAFF,
               center_id=CENTER_ID, email="ben@depot.test"),
    ]


@pytest.fixture
def technicians() -> list[Member]:
    return [
        Member(system_user_id=TECH_CARA, name="Cara Lind", role=MemberRole.TECHNICIAN,
               center_id=CENTER_ID, email="cara@depot.test"),
        Member(system_user_id=TECH_DAN, name="Dan Okafor", role=MemberRole.TECHNICIAN,
               center_id=CENTER_ID, email="dan@depot.test"),
    ]


@pytest.fixture
def all_members(staff_members, technicians) -> list[Member]:
    # one member from another center who must never show up for center 1
    outsider = Member(system_user_id=31, name="Eve Park", role=MemberRole.TECHNICIAN,
                      center_id=OTHER_CENTER_ID, email="eve@depot.test")
    return staff_members + technicians + [outsider]


@pytest.fixture
def fake_backend(all_members) -> FakeBackend:
    return FakeBackend(members=all_members)


@pytest.fixture
def db_engine():
    # one shared in-memory database per test
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)


@pytest.fixture
def db_session(session_factory):
    """Session over a database seeded with two centers and their members."""
    session = session_factory()
    session.add_all([
        Centers(id=CENTER_ID, name="North Depot", address="1 Harbour Road"),
        Centers(id=OTHER_CENTER_ID, name="South Depot", address="9 Quarry Lane"),
    ])
    session.add_all([
        Members(id=STAFF_ALICE, name="Alice Reyes", email="alice@depot.test",
                role=DBMemberRole.STAFF, center_id=CENTER_ID),
        Members(id=STAFF_BEN, name="Ben Ortiz", email="ben@depot.test",
                role=DBMemberRole.STAFF, center_id=CENTER_ID),
        Members(id=TECH_CARA, name="Cara Lind", email="cara@depot.test",
                role=DBMemberRole.TECHNICIAN, center_id=CENTER_ID),
        Members(id=TECH_DAN, name="Dan Okafor", email="dan@depot.test",
                role=DBMemberRole.TECHNICIAN, center_id=CENTER_ID),
        Members(id=31, name="Eve Park", email="eve@depot.test",
                role=DBMemberRole.TECHNICIAN, center_id=OTHER_CENTER_ID),
    ])
    session.commit()
    try:
        yield session
    finally:
        session.close()
