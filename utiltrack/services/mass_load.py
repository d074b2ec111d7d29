"""Bulk allocation entry across many consultants and weeks.

Execution is best effort: every (consultant, week) pair is written in its own
savepoint, so a failing pair is reported in ``errors`` and its siblings still
go through.
"""
import logging
from collections import namedtuple

from sqlalchemy.exc import SQLAlchemyError

from utiltrack.auth import require_elevated
from utiltrack.errors import NotFoundError, ValidationError
from utiltrack.extensions import db
from utiltrack.models import Consultant, Project
from utiltrack.services import allocation_store
from utiltrack.utils.dates import parse_iso_date, weeks_in_range
from utiltrack.utils.validators import validate_entry_type, validate_hours, validate_required_fields

logger = logging.getLogger(__name__)

MIN_HOURS = 0.5
MAX_HOURS = 80

MassLoadParams = namedtuple('MassLoadParams', [
    'consultant_ids', 'project_id', 'start_date', 'end_date', 'hours', 'entry_type', 'notes'
])


def parse_mass_load(data):
    """Validate a mass load payload into MassLoadParams"""
    is_valid, error = validate_required_fields(
        data, ['consultant_ids', 'project_id', 'start_date', 'hours', 'entry_type'])
    if not is_valid:
        raise ValidationError(error)

    consultant_ids = data['consultant_ids']
    if not isinstance(consultant_ids, list) or not consultant_ids:
        raise ValidationError('Select at least one consultant')
    try:
        consultant_ids = [int(cid) for cid in consultant_ids]
        project_id = int(data['project_id'])
    except (TypeError, ValueError):
        raise ValidationError('Consultant and project ids must be integers')

    start_date = parse_iso_date(data['start_date'], 'start date')
    end_date = parse_iso_date(data['end_date'], 'end date') if data.get('end_date') else start_date

    is_valid, hours = validate_hours(data['hours'], minimum=MIN_HOURS, maximum=MAX_HOURS)
    if not is_valid:
        raise ValidationError(hours)

    is_valid, entry_type = validate_entry_type(data['entry_type'])
    if not is_valid:
        raise ValidationError(entry_type)

    return MassLoadParams(
        # keep first occurrence order, drop repeats
        consultant_ids=list(dict.fromkeys(consultant_ids)),
        project_id=project_id,
        start_date=start_date,
        end_date=end_date,
        hours=hours,
        entry_type=entry_type,
        notes=data.get('notes') or None
    )


def _params(data):
    return data if isinstance(data, MassLoadParams) else parse_mass_load(data)


def preview_mass_load(ctx, data):
    """Scope of a mass load without writing anything"""
    require_elevated(ctx)
    params = _params(data)
    weeks = weeks_in_range(params.start_date, params.end_date)

    consultants = Consultant.query.filter(Consultant.id.in_(params.consultant_ids)) \
        .order_by(Consultant.name).all()
    project = db.session.get(Project, params.project_id)

    total_allocations = len(consultants) * len(weeks)
    return {
        'consultant_count': len(consultants),
        'consultant_names': [c.name for c in consultants],
        'week_count': len(weeks),
        'weeks': [w.isoformat() for w in weeks],
        'total_allocations': total_allocations,
        'total_hours': total_allocations * params.hours,
        'project': project.label if project else 'Unknown'
    }


def execute_mass_load(ctx, data):
    """Write ``hours`` for every selected consultant on every week of the range"""
    require_elevated(ctx)
    params = _params(data)
    weeks = weeks_in_range(params.start_date, params.end_date)

    project = db.session.get(Project, params.project_id)
    if project is None:
        raise NotFoundError('Project not found')

    created_by_id = allocation_store.resolve_creator_id(ctx)
    results = {'created': 0, 'updated': 0, 'errors': []}

    for consultant_id in params.consultant_ids:
        consultant = db.session.get(Consultant, consultant_id)
        if consultant is None:
            results['errors'].append({
                'consultant_id': consultant_id,
                'message': f'Consultant {consultant_id} not found'
            })
            continue

        for week in weeks:
            try:
                with db.session.begin_nested():
                    _, created = allocation_store.upsert_allocation(
                        consultant_id, params.project_id, week, params.entry_type, params.hours,
                        notes=params.notes, created_by_id=created_by_id
                    )
            except SQLAlchemyError as exc:
                logger.warning("Mass load failed for consultant %s week %s: %s",
                               consultant_id, week.isoformat(), exc)
                results['errors'].append({
                    'consultant_id': consultant_id,
                    'consultant_name': consultant.name,
                    'week_start': week.isoformat(),
                    'message': f'Failed for {consultant.name} on {week.isoformat()}'
                })
                continue

            if created:
                results['created'] += 1
            else:
                results['updated'] += 1

    db.session.commit()
    logger.info("Mass load on %s: %d created, %d updated, %d errors",
                project.timecode, results['created'], results['updated'], len(results['errors']))
    return results
