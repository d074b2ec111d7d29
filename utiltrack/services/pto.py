"""PTO request workflow and its allocation writes.

Approval converts the request into ACTUAL hours on the sentinel PTO project,
one additive write per week the request spans.
"""
import logging
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy.exc import IntegrityError

from utiltrack.auth import require_actor, require_consultant_access, require_elevated
from utiltrack.errors import StateConflictError, ValidationError
from utiltrack.extensions import db
from utiltrack.models import (AllocationEntryType, Consultant, Project, ProjectStatus, ProjectType,
                              PTORequest, PTOStatus)
from utiltrack.services import allocation_store
from utiltrack.services.common import commit, get_or_404
from utiltrack.utils.dates import business_days, parse_iso_date, week_start, weeks_in_range
from utiltrack.utils.validators import validate_pto_status, validate_required_fields, validate_time_format

logger = logging.getLogger(__name__)

PTO_PROJECT_TIMECODE = 'INT-PTO-001'
DEFAULT_HOURS_PER_DAY = 8.0


def _full_day_hours():
    return float(current_app.config.get('PTO_HOURS_PER_DAY', DEFAULT_HOURS_PER_DAY))


def pto_hours_per_day(pto, full_day=DEFAULT_HOURS_PER_DAY):
    """Hours off per business day: a full day, or the span between the clock times"""
    if pto.all_day or not pto.start_time or not pto.end_time:
        return full_day
    start_hour, start_minute = (int(part) for part in pto.start_time.split(':'))
    end_hour, end_minute = (int(part) for part in pto.end_time.split(':'))
    return (end_hour - start_hour) + (end_minute - start_minute) / 60


def pto_total_hours(pto, full_day=DEFAULT_HOURS_PER_DAY):
    return len(business_days(pto.start_date, pto.end_date)) * pto_hours_per_day(pto, full_day)


def pto_week_hours(pto, full_day=DEFAULT_HOURS_PER_DAY):
    """[(week_start, hours)] for every week the request spans, weekends excluded.

    Weeks whose overlap with the request holds no business day are dropped.
    """
    hours_per_day = pto_hours_per_day(pto, full_day)
    split = []
    for week in weeks_in_range(pto.start_date, pto.end_date):
        overlap_start = max(week, pto.start_date)
        overlap_end = min(week + timedelta(days=6), pto.end_date)
        hours = len(business_days(overlap_start, overlap_end)) * hours_per_day
        if hours > 0:
            split.append((week, hours))
    return split


def get_pto_project():
    """Sentinel project collecting PTO hours, created on first use"""
    timecode = current_app.config.get('PTO_PROJECT_TIMECODE', PTO_PROJECT_TIMECODE)
    project = Project.query.filter_by(timecode=timecode).first()
    if project is not None:
        return project

    try:
        with db.session.begin_nested():
            project = Project(client='Internal', project_name='PTO', timecode=timecode,
                              type=ProjectType.ASSIGNED, status=ProjectStatus.ACTIVE)
            db.session.add(project)
        logger.info("Created PTO project %s", timecode)
        return project
    except IntegrityError:
        # another request created it first
        return Project.query.filter_by(timecode=timecode).one()


def pto_to_dict(pto):
    data = pto.to_dict()
    data['total_hours'] = pto_total_hours(pto, _full_day_hours())
    return data


def _get_pto_or_404(request_id):
    return get_or_404(PTORequest, request_id, 'PTO request')


def _require_pending(pto, message):
    if pto.status != PTOStatus.PENDING:
        raise StateConflictError(message)


def create_pto_request(ctx, data):
    require_actor(ctx)
    is_valid, error = validate_required_fields(data, ['consultant_id', 'start_date', 'end_date'])
    if not is_valid:
        raise ValidationError(error)

    try:
        consultant_id = int(data['consultant_id'])
    except (TypeError, ValueError):
        raise ValidationError('consultant_id must be an integer')
    require_consultant_access(ctx, consultant_id, 'You can only submit PTO requests for yourself')

    get_or_404(Consultant, consultant_id, 'Consultant')

    start_date = parse_iso_date(data['start_date'], 'start date')
    end_date = parse_iso_date(data['end_date'], 'end date')
    if end_date < start_date:
        raise ValidationError('End date must be on or after start date')

    all_day = data.get('all_day', True)
    if not isinstance(all_day, bool):
        raise ValidationError('all_day must be a boolean')

    start_time = end_time = None
    if not all_day:
        is_valid, start_parts = validate_time_format(data.get('start_time'))
        if not is_valid:
            raise ValidationError(f'start_time: {start_parts}')
        is_valid, end_parts = validate_time_format(data.get('end_time'))
        if not is_valid:
            raise ValidationError(f'end_time: {end_parts}')
        if end_parts <= start_parts:
            raise ValidationError('end_time must be after start_time')
        start_time, end_time = data['start_time'], data['end_time']

    pto = PTORequest(
        consultant_id=consultant_id,
        start_date=start_date,
        end_date=end_date,
        all_day=all_day,
        start_time=start_time,
        end_time=end_time,
        status=PTOStatus.PENDING
    )
    db.session.add(pto)
    commit('create PTO request')
    logger.info("PTO request %s created for consultant %s (%s - %s)",
                pto.id, consultant_id, start_date.isoformat(), end_date.isoformat())
    return pto


def list_pto_requests(ctx, status=None, consultant_id=None):
    """Newest first; employees only ever see their own requests"""
    require_actor(ctx)
    query = PTORequest.query

    if status:
        is_valid, status = validate_pto_status(status)
        if not is_valid:
            raise ValidationError(status)
        query = query.filter(PTORequest.status == status)

    if not ctx.is_elevated:
        if ctx.consultant_id is None:
            return []
        query = query.filter(PTORequest.consultant_id == ctx.consultant_id)
    elif consultant_id is not None:
        query = query.filter(PTORequest.consultant_id == consultant_id)

    return query.order_by(PTORequest.created_at.desc(), PTORequest.id.desc()).all()


def get_pto_request(ctx, request_id):
    require_actor(ctx)
    pto = _get_pto_or_404(request_id)
    require_consultant_access(ctx, pto.consultant_id, 'Unauthorized')
    return pto


def _decide(ctx, pto, status):
    """Move a PENDING request to ``status``; only one concurrent decision wins.

    The PENDING check and the status change are one conditional UPDATE, so a
    request already decided in another transaction yields a conflict here.
    """
    decided = PTORequest.query.filter_by(id=pto.id, status=PTOStatus.PENDING).update({
        PTORequest.status: status,
        PTORequest.approved_by_id: allocation_store.resolve_creator_id(ctx),
        PTORequest.updated_at: datetime.utcnow()
    }, synchronize_session=False)
    if decided != 1:
        raise StateConflictError('PTO request is not pending')
    db.session.refresh(pto)


def approve_pto_request(ctx, request_id):
    """Approve a pending request and add its hours to the PTO project, week by week"""
    require_elevated(ctx)
    pto = _get_pto_or_404(request_id)
    _decide(ctx, pto, PTOStatus.APPROVED)

    project = get_pto_project()
    note = f'PTO: {pto.start_date.isoformat()} - {pto.end_date.isoformat()}'

    for week, hours in pto_week_hours(pto, _full_day_hours()):
        allocation_store.increment_or_create(
            pto.consultant_id, project.id, week_start(week), AllocationEntryType.ACTUAL, hours,
            notes=note, created_by_id=pto.approved_by_id
        )

    commit('approve PTO request')
    logger.info("PTO request %s approved by %s", pto.id, ctx.actor_id)
    return pto


def deny_pto_request(ctx, request_id):
    require_elevated(ctx)
    pto = _get_pto_or_404(request_id)
    _decide(ctx, pto, PTOStatus.DENIED)

    commit('deny PTO request')
    logger.info("PTO request %s denied by %s", pto.id, ctx.actor_id)
    return pto


def delete_pto_request(ctx, request_id):
    require_actor(ctx)
    pto = _get_pto_or_404(request_id)
    require_consultant_access(ctx, pto.consultant_id, 'You can only delete your own PTO requests')
    _require_pending(pto, 'Can only delete pending PTO requests')

    db.session.delete(pto)
    commit('delete PTO request')
    logger.info("PTO request %s deleted", request_id)
