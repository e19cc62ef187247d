import pytest
from datetime import date, datetime

from shiftdesk.services.scheduling.assignments import AssignmentManager, work_items_from_assignments
from shiftdesk.services.scheduling.errors import NotFoundError, RemoteError, ValidationError
from shiftdesk.services.scheduling.types import ShiftAssignment

from conftest import CENTER_ID, STAFF_ALICE, STAFF_BEN, TECH_CARA, get_test_monday


@pytest.fixture
def two_shifts(fake_backend):
    monday = get_test_monday()
    return fake_backend.create_workshifts_bulk(CENTER_ID, [monday, date(2025, 3, 4)], "08:00", "12:00")


@pytest.fixture
def manager(fake_backend) -> AssignmentManager:
    return AssignmentManager(fake_backend)


class TestAssign:
    def test_every_member_bound_to_every_shift(self, manager, fake_backend, two_shifts):
        shift_ids = [s.id for s in two_shifts]

        result = manager.assign([STAFF_ALICE, TECH_CARA], shift_ids)

        assert result.ok
        assert result.succeeded == [STAFF_ALICE, TECH_CARA]
        pairs = {(a.system_user_id, a.workshift_id) for a in fake_backend.assignments.values()}
        assert pairs == {(m, s) for m in (STAFF_ALICE, TECH_CARA) for s in shift_ids}

    def test_one_call_per_member(self, manager, fake_backend, two_shifts):
        fake_backend.calls.clear()
        manager.assign([STAFF_ALICE, STAFF_BEN], [s.id for s in two_shifts])
        assert fake_backend.call_names() == ["assign_member_to_shifts"] * 2

    def test_partial_failure_keeps_successes(self, manager, fake_backend, two_shifts):
        fake_backend.fail_member_ids = {STAFF_BEN}

        result = manager.assign([STAFF_ALICE, STAFF_BEN, TECH_CARA], [s.id for s in two_shifts])

        assert not result.ok
        assert result.succeeded == [STAFF_ALICE, TECH_CARA]
        assert result.failed == [STAFF_BEN]
        assert "locked" in result.errors()[STAFF_BEN]
        assert {a.system_user_id for a in fake_backend.assignments.values()} == {STAFF_ALICE, TECH_CARA}

    def test_repeat_is_idempotent(self, manager, fake_backend, two_shifts):
        shift_ids = [s.id for s in two_shifts]
        manager.assign([STAFF_ALICE], shift_ids)
        manager.assign([STAFF_ALICE], shift_ids)
        assert len(fake_backend.assignments) == 2

    def test_no_shifts_rejected(self, manager):
        with pytest.raises(ValidationError, match="No workshifts"):
            manager.assign([STAFF_ALICE], [])

    def test_no_members_rejected(self, manager, two_shifts):
        with pytest.raises(ValidationError, match="Select at least one user"):
            manager.assign([], [s.id for s in two_shifts])


class TestRemoveAndRetarget:
    def test_remove(self, manager, fake_backend, two_shifts):
        manager.assign([STAFF_ALICE], [two_shifts[0].id])
        assignment_id = next(iter(fake_backend.assignments))

        manager.remove(assignment_id)

        assert fake_backend.assignments == {}

    def test_remove_unknown_surfaces_backend_error(self, manager):
        with pytest.raises(RemoteError):
            manager.remove(999)

    def test_retarget_moves_binding(self, manager, fake_backend, two_shifts):
        first, second = two_shifts
        manager.assign([STAFF_ALICE], [first.id])

        moved = manager.retarget(STAFF_ALICE, first.id, second.id)

        assert moved.workshift_id == second.id
        remaining = fake_backend.list_assignments_by_member(STAFF_ALICE)
        assert [a.workshift_id for a in remaining] == [second.id]

    def test_retarget_without_binding(self, manager, two_shifts):
        with pytest.raises(NotFoundError):
            manager.retarget(STAFF_ALICE, two_shifts[0].id, two_shifts[1].id)


class TestWorkItemsFromAssignments:
    def test_one_item_per_assignment(self, fake_backend, two_shifts):
        first, second = two_shifts
        assignments = [
            ShiftAssignment(id=7, system_user_id=TECH_CARA, workshift_id=first.id),
            ShiftAssignment(id=8, system_user_id=TECH_CARA, workshift_id=second.id),
        ]

        items = work_items_from_assignments(two_shifts, assignments)

        assert [i.id for i in items] == ["assignment-7", "assignment-8"]
        assert items[0].person_id == TECH_CARA
        assert items[0].start == datetime(2025, 3, 3, 8, 0)
        assert items[0].end == datetime(2025, 3, 3, 12, 0)

    def test_unknown_shift_skipped(self, two_shifts):
        orphan = ShiftAssignment(id=9, system_user_id=TECH_CARA, workshift_id=404)
        assert work_items_from_assignments(two_shifts, [orphan]) == []
