"""Edits to a single (consultant, week) cell of the utilization grid.

Past weeks keep their projected hours frozen; future weeks cannot receive
actual hours (an existing actual row, e.g. approved PTO, may still be
cleared). The current week accepts both.
"""
import logging
from datetime import date

from utiltrack.auth import require_consultant_access
from utiltrack.errors import ValidationError
from utiltrack.extensions import db
from utiltrack.models import AllocationEntryType, Consultant, Project, WeekClass
from utiltrack.services import allocation_store
from utiltrack.services.common import commit, get_or_404
from utiltrack.utils.dates import classify_week, parse_iso_date, week_start
from utiltrack.utils.validators import validate_entry_type, validate_hours

logger = logging.getLogger(__name__)

HOUR_FIELDS = (
    (AllocationEntryType.ACTUAL, 'actual_hours'),
    (AllocationEntryType.PROJECTED, 'projected_hours'),
)


def is_frozen(week_class, entry_type):
    """Rows that no edit may create, change or remove"""
    return week_class == WeekClass.PAST and entry_type == AllocationEntryType.PROJECTED


def check_editable(week_class, entry_type, hours, current_hours=0.0):
    """Reject a change of ``entry_type`` hours that the week does not allow"""
    if hours == current_hours:
        return
    if is_frozen(week_class, entry_type):
        raise ValidationError('Projected hours are read-only for past weeks')
    if week_class == WeekClass.FUTURE and entry_type == AllocationEntryType.ACTUAL and hours > 0:
        raise ValidationError('Actual hours cannot be entered for future weeks')


def _parse_entry_type(value):
    is_valid, result = validate_entry_type(value)
    if not is_valid:
        raise ValidationError(result)
    return result


def _parse_hours(value, field='hours'):
    is_valid, result = validate_hours(value, field=field)
    if not is_valid:
        raise ValidationError(result)
    return result


def upsert_cell(ctx, consultant_id, week, project_id, hours, entry_type, notes=None, today=None):
    """Set the hours of one (project, entry type) line of a cell.

    Repeating the call with the same arguments leaves a single row. Zero
    hours removes the line; returns None in that case.
    """
    require_consultant_access(ctx, consultant_id)
    entry_type = _parse_entry_type(entry_type)
    hours = _parse_hours(hours)
    week = week_start(parse_iso_date(week, 'week start'))
    get_or_404(Consultant, consultant_id, 'Consultant')
    get_or_404(Project, project_id, 'Project')

    existing = allocation_store.find_allocation(consultant_id, project_id, week, entry_type)
    week_class = classify_week(week, today or date.today())
    check_editable(week_class, entry_type, hours, existing.hours if existing else 0.0)
    if is_frozen(week_class, entry_type):
        return existing

    if hours == 0:
        if existing is not None:
            db.session.delete(existing)
            commit('delete allocation')
        return None

    allocation, _ = allocation_store.upsert_allocation(
        consultant_id, project_id, week, entry_type, hours,
        notes=notes, created_by_id=allocation_store.resolve_creator_id(ctx)
    )
    commit('save allocation')
    return allocation


def delete_cell_entry(ctx, consultant_id, project_id, week, entry_type, today=None):
    require_consultant_access(ctx, consultant_id, 'You can only delete your own allocations')
    entry_type = _parse_entry_type(entry_type)
    week = week_start(parse_iso_date(week, 'week start'))

    if is_frozen(classify_week(week, today or date.today()), entry_type):
        raise ValidationError('Projected hours are read-only for past weeks')

    allocation_store.delete_allocation(consultant_id, project_id, week, entry_type)
    commit('delete allocation')


def _normalize_edits(edits):
    """{project_id: {actual_hours, projected_hours, notes}} with parsed values"""
    if not isinstance(edits, dict):
        raise ValidationError('edits must be an object keyed by project id')

    normalized = {}
    for raw_project_id, edit in edits.items():
        try:
            project_id = int(raw_project_id)
        except (TypeError, ValueError):
            raise ValidationError(f'Invalid project id: {raw_project_id}')
        if not isinstance(edit, dict):
            raise ValidationError(f'Edit for project {project_id} must be an object')

        parsed = {'notes': edit.get('notes')}
        for _, field in HOUR_FIELDS:
            value = edit.get(field)
            parsed[field] = None if value is None else _parse_hours(value, field)
        normalized[project_id] = parsed
    return normalized


def reconcile_cell(ctx, consultant_id, week, edits, today=None):
    """Bring a cell's rows in line with the desired per-project state.

    ``edits`` lists every project the cell should contain. A ``None`` hours
    field leaves that line untouched, zero removes it, and projects missing
    from ``edits`` lose their rows. All writes commit together or not at all.
    """
    require_consultant_access(ctx, consultant_id)
    week = week_start(parse_iso_date(week, 'week start'))
    week_class = classify_week(week, today or date.today())
    get_or_404(Consultant, consultant_id, 'Consultant')
    desired = _normalize_edits(edits)

    current = {(a.project_id, a.entry_type): a
               for a in allocation_store.allocations_for_cell(consultant_id, week)}

    # validate the whole cell before touching any row
    for project_id, edit in desired.items():
        get_or_404(Project, project_id, 'Project')
        for entry_type, field in HOUR_FIELDS:
            if edit[field] is None:
                continue
            row = current.get((project_id, entry_type))
            check_editable(week_class, entry_type, edit[field], row.hours if row else 0.0)

    created_by_id = allocation_store.resolve_creator_id(ctx)
    counts = {'created': 0, 'updated': 0, 'deleted': 0}

    for project_id, edit in desired.items():
        notes = edit['notes']
        for entry_type, field in HOUR_FIELDS:
            hours = edit[field]
            if hours is None or is_frozen(week_class, entry_type):
                continue
            row = current.get((project_id, entry_type))

            if hours > 0:
                if row is None:
                    allocation_store.upsert_allocation(consultant_id, project_id, week, entry_type, hours,
                                                       notes=notes, created_by_id=created_by_id)
                    counts['created'] += 1
                elif row.hours != hours or (notes is not None and notes != row.notes):
                    allocation_store.upsert_allocation(consultant_id, project_id, week, entry_type, hours,
                                                       notes=notes)
                    counts['updated'] += 1
            elif row is not None:
                db.session.delete(row)
                counts['deleted'] += 1

    for (project_id, entry_type), row in current.items():
        if project_id in desired or is_frozen(week_class, entry_type):
            continue
        db.session.delete(row)
        counts['deleted'] += 1

    commit('reconcile allocations')
    logger.info("Reconciled consultant %s week %s: %s", consultant_id, week.isoformat(), counts)

    counts['allocations'] = [a.to_dict() for a in allocation_store.allocations_for_cell(consultant_id, week)]
    return counts
