from datetime import date

import pytest

from conftest import CURRENT_WEEK, FUTURE_WEEK
from utiltrack.errors import AuthorizationError, NotFoundError, StateConflictError, ValidationError
from utiltrack.models import AllocationEntryType, Project, PTORequest, PTOStatus
from utiltrack.services.allocation_store import count_allocations, find_allocation
from utiltrack.services.pto import (pto_hours_per_day, pto_total_hours, pto_week_hours, get_pto_project,
                                    pto_to_dict, create_pto_request, list_pto_requests, get_pto_request,
                                    approve_pto_request, deny_pto_request, delete_pto_request)

ACTUAL = AllocationEntryType.ACTUAL


def _request(start, end, all_day=True, start_time=None, end_time=None):
    return PTORequest(consultant_id=1, start_date=start, end_date=end, all_day=all_day,
                      start_time=start_time, end_time=end_time, status=PTOStatus.PENDING)


def _submit(ctx, consultant_id, start, end, **extra):
    data = {'consultant_id': consultant_id, 'start_date': start, 'end_date': end}
    data.update(extra)
    return create_pto_request(ctx, data)


class TestHours:

    def test_full_day(self, app):
        assert pto_hours_per_day(_request(date(2026, 1, 12), date(2026, 1, 12))) == 8

    def test_partial_day(self, app):
        pto = _request(date(2026, 1, 12), date(2026, 1, 12), all_day=False,
                       start_time='09:00', end_time='13:30')
        assert pto_hours_per_day(pto) == 4.5

    def test_total_skips_weekends(self, app):
        # Friday through Monday
        assert pto_total_hours(_request(date(2026, 1, 16), date(2026, 1, 19))) == 16

    def test_week_split_across_weeks(self, app):
        # Thursday to the following Tuesday
        split = pto_week_hours(_request(date(2026, 1, 15), date(2026, 1, 20)))
        assert split == [(CURRENT_WEEK, 16), (FUTURE_WEEK, 16)]

    def test_weekend_only_weeks_are_dropped(self, app):
        # Saturday to Sunday spans two weeks but no business day
        assert pto_week_hours(_request(date(2026, 1, 17), date(2026, 1, 18))) == []

    def test_partial_day_range(self, app):
        pto = _request(date(2026, 1, 12), date(2026, 1, 14), all_day=False,
                       start_time='13:00', end_time='17:00')
        assert pto_week_hours(pto) == [(CURRENT_WEEK, 12)]


class TestCreate:

    def test_employee_submits_for_self(self, seed, employee_ctx):
        pto = _submit(employee_ctx, seed.jane_id, '2026-01-12', '2026-01-16')
        assert pto.status == PTOStatus.PENDING
        assert pto.all_day is True
        assert pto_to_dict(pto)['total_hours'] == 40
        assert pto_to_dict(pto)['consultant_name'] == 'Jane Smith'

    def test_employee_cannot_submit_for_others(self, seed, employee_ctx):
        with pytest.raises(AuthorizationError):
            _submit(employee_ctx, seed.bob_id, '2026-01-12', '2026-01-16')

    def test_reversed_range(self, seed, manager_ctx):
        with pytest.raises(ValidationError):
            _submit(manager_ctx, seed.bob_id, '2026-01-16', '2026-01-12')

    def test_partial_day_requires_times(self, seed, manager_ctx):
        with pytest.raises(ValidationError):
            _submit(manager_ctx, seed.bob_id, '2026-01-12', '2026-01-12', all_day=False)
        with pytest.raises(ValidationError):
            _submit(manager_ctx, seed.bob_id, '2026-01-12', '2026-01-12', all_day=False,
                    start_time='14:00', end_time='09:00')

        pto = _submit(manager_ctx, seed.bob_id, '2026-01-12', '2026-01-12', all_day=False,
                      start_time='09:00', end_time='13:30')
        assert (pto.start_time, pto.end_time) == ('09:00', '13:30')

    def test_unknown_consultant(self, seed, manager_ctx):
        with pytest.raises(NotFoundError):
            _submit(manager_ctx, 9999, '2026-01-12', '2026-01-12')

    def test_missing_fields(self, seed, manager_ctx):
        with pytest.raises(ValidationError, match='end_date is required'):
            create_pto_request(manager_ctx, {'consultant_id': seed.bob_id, 'start_date': '2026-01-12'})


class TestApprove:

    def test_single_week_request(self, seed, manager_ctx):
        pto = _submit(manager_ctx, seed.jane_id, '2026-01-12', '2026-01-16')
        approve_pto_request(manager_ctx, pto.id)

        project = get_pto_project()
        allocation = find_allocation(seed.jane_id, project.id, CURRENT_WEEK, ACTUAL)
        assert allocation.hours == 40
        assert allocation.notes == 'PTO: 2026-01-12 - 2026-01-16'
        assert count_allocations(project_id=project.id) == 1
        assert pto.status == PTOStatus.APPROVED
        assert pto.approved_by_id == seed.manager_id

    def test_request_split_across_weeks(self, seed, admin_ctx):
        pto = _submit(admin_ctx, seed.bob_id, '2026-01-15', '2026-01-20')
        approve_pto_request(admin_ctx, pto.id)

        project = get_pto_project()
        assert find_allocation(seed.bob_id, project.id, CURRENT_WEEK, ACTUAL).hours == 16
        assert find_allocation(seed.bob_id, project.id, FUTURE_WEEK, ACTUAL).hours == 16

    def test_requests_in_same_week_accumulate(self, seed, admin_ctx):
        first = _submit(admin_ctx, seed.bob_id, '2026-01-12', '2026-01-13')
        second = _submit(admin_ctx, seed.bob_id, '2026-01-15', '2026-01-16')
        approve_pto_request(admin_ctx, first.id)
        approve_pto_request(admin_ctx, second.id)

        project = get_pto_project()
        allocation = find_allocation(seed.bob_id, project.id, CURRENT_WEEK, ACTUAL)
        assert allocation.hours == 32
        assert allocation.notes == 'PTO: 2026-01-12 - 2026-01-13; PTO: 2026-01-15 - 2026-01-16'

    def test_pto_project_is_created_once(self, seed, admin_ctx):
        for start in ('2026-01-12', '2026-01-19'):
            approve_pto_request(admin_ctx, _submit(admin_ctx, seed.carol_id, start, start).id)

        projects = Project.query.filter_by(timecode='INT-PTO-001').all()
        assert len(projects) == 1
        assert projects[0].project_name == 'PTO'

    def test_only_pending_requests(self, seed, admin_ctx):
        pto = _submit(admin_ctx, seed.bob_id, '2026-01-12', '2026-01-12')
        approve_pto_request(admin_ctx, pto.id)
        with pytest.raises(StateConflictError):
            approve_pto_request(admin_ctx, pto.id)
        with pytest.raises(StateConflictError):
            deny_pto_request(admin_ctx, pto.id)
        assert find_allocation(seed.bob_id, get_pto_project().id, CURRENT_WEEK, ACTUAL).hours == 8

    def test_employee_cannot_approve(self, seed, employee_ctx):
        pto = _submit(employee_ctx, seed.jane_id, '2026-01-12', '2026-01-12')
        with pytest.raises(AuthorizationError):
            approve_pto_request(employee_ctx, pto.id)

    def test_unknown_request(self, seed, admin_ctx):
        with pytest.raises(NotFoundError):
            approve_pto_request(admin_ctx, 9999)

    @pytest.mark.parametrize('decide', [approve_pto_request, deny_pto_request])
    def test_decision_already_made_in_another_transaction(self, seed, manager_ctx, decide):
        pto = _submit(manager_ctx, seed.jane_id, '2026-01-12', '2026-01-16')
        assert pto.status == PTOStatus.PENDING

        # stored row moves on while this session still holds the pending copy
        PTORequest.query.filter_by(id=pto.id).update(
            {PTORequest.status: PTOStatus.APPROVED}, synchronize_session=False)
        assert pto.status == PTOStatus.PENDING

        with pytest.raises(StateConflictError):
            decide(manager_ctx, pto.id)
        assert count_allocations() == 0


class TestDenyAndDelete:

    def test_deny_writes_no_allocations(self, seed, manager_ctx):
        pto = _submit(manager_ctx, seed.bob_id, '2026-01-12', '2026-01-16')
        deny_pto_request(manager_ctx, pto.id)
        assert pto.status == PTOStatus.DENIED
        assert count_allocations() == 0

    def test_delete_pending_own_request(self, seed, employee_ctx):
        pto = _submit(employee_ctx, seed.jane_id, '2026-01-12', '2026-01-12')
        delete_pto_request(employee_ctx, pto.id)
        with pytest.raises(NotFoundError):
            get_pto_request(employee_ctx, pto.id)

    def test_cannot_delete_decided_request(self, seed, admin_ctx):
        pto = _submit(admin_ctx, seed.bob_id, '2026-01-12', '2026-01-12')
        deny_pto_request(admin_ctx, pto.id)
        with pytest.raises(StateConflictError, match='pending'):
            delete_pto_request(admin_ctx, pto.id)

    def test_employee_cannot_delete_others(self, seed, admin_ctx, employee_ctx):
        pto = _submit(admin_ctx, seed.bob_id, '2026-01-12', '2026-01-12')
        with pytest.raises(AuthorizationError):
            delete_pto_request(employee_ctx, pto.id)

    def test_others_decided_request_is_forbidden_not_conflict(self, seed, admin_ctx, employee_ctx):
        pto = _submit(admin_ctx, seed.bob_id, '2026-01-12', '2026-01-12')
        deny_pto_request(admin_ctx, pto.id)
        with pytest.raises(AuthorizationError):
            delete_pto_request(employee_ctx, pto.id)


class TestList:

    def test_employee_sees_only_own(self, seed, admin_ctx, employee_ctx):
        own = _submit(employee_ctx, seed.jane_id, '2026-01-12', '2026-01-12')
        _submit(admin_ctx, seed.bob_id, '2026-01-12', '2026-01-12')

        assert [p.id for p in list_pto_requests(employee_ctx)] == [own.id]
        assert [p.id for p in list_pto_requests(employee_ctx, consultant_id=seed.bob_id)] == [own.id]

    def test_elevated_filters(self, seed, admin_ctx):
        first = _submit(admin_ctx, seed.bob_id, '2026-01-12', '2026-01-12')
        second = _submit(admin_ctx, seed.carol_id, '2026-01-13', '2026-01-13')
        deny_pto_request(admin_ctx, first.id)

        assert [p.id for p in list_pto_requests(admin_ctx)] == [second.id, first.id]
        assert [p.id for p in list_pto_requests(admin_ctx, status='PENDING')] == [second.id]
        assert [p.id for p in list_pto_requests(admin_ctx, consultant_id=seed.bob_id)] == [first.id]

    def test_invalid_status(self, seed, admin_ctx):
        with pytest.raises(ValidationError):
            list_pto_requests(admin_ctx, status='MAYBE')

    def test_employee_reads_only_own(self, seed, admin_ctx, employee_ctx):
        pto = _submit(admin_ctx, seed.bob_id, '2026-01-12', '2026-01-12')
        with pytest.raises(AuthorizationError):
            get_pto_request(employee_ctx, pto.id)
