"""Dense utilization grid built from sparse allocation rows.

The grid holds every consultant and every week of the requested range, even
when no allocation exists for a pair. Views, status colors and filters are
derived from an already-built grid without going back to the database.
"""
import logging
from datetime import date

from flask import current_app

from utiltrack.auth import require_actor
from utiltrack.models import AllocationEntryType, Consultant, ViewMode, WeekClass, UtilizationStatus
from utiltrack.services.allocation_store import allocations_in_range
from utiltrack.utils.dates import (classify_week, default_date_range, parse_iso_date,
                                   weeks_in_range, group_weeks_by_month)

logger = logging.getLogger(__name__)

UNDER_THRESHOLD = 0.9
OVER_THRESHOLD = 1.1
DIFFERENCE_THRESHOLD = 0.1


def resolve_range(start=None, end=None, today=None):
    """Requested range, falling back to the configured window around today"""
    default_start, default_end = default_date_range(
        today,
        weeks_back=current_app.config.get('UTILIZATION_WEEKS_BACK', 4),
        weeks_ahead=current_app.config.get('UTILIZATION_WEEKS_AHEAD', 8)
    )
    start = parse_iso_date(start, 'start date') if start else default_start
    end = parse_iso_date(end, 'end date') if end else default_end
    return start, end


def _empty_cell():
    return {'actual': 0.0, 'projected': 0.0, 'details': []}


def get_utilization_grid(ctx, start=None, end=None, today=None):
    """Per consultant, per week actual/projected totals with itemized details"""
    require_actor(ctx)
    start, end = resolve_range(start, end, today)
    weeks = weeks_in_range(start, end)
    week_keys = [w.isoformat() for w in weeks]

    consultants = Consultant.query.order_by(Consultant.name).all()

    grid = {}
    for consultant in consultants:
        grid[consultant.id] = {week: _empty_cell() for week in week_keys}

    for allocation in allocations_in_range(start, end):
        cell = grid.get(allocation.consultant_id, {}).get(allocation.week_start.isoformat())
        if cell is None:
            continue

        if allocation.entry_type == AllocationEntryType.ACTUAL:
            cell['actual'] += allocation.hours
        else:
            cell['projected'] += allocation.hours

        cell['details'].append({
            'project_id': allocation.project.id,
            'project_name': allocation.project.project_name,
            'timecode': allocation.project.timecode,
            'hours': allocation.hours,
            'entry_type': allocation.entry_type.value,
            'notes': allocation.notes,
            'created_by': allocation.created_by.email if allocation.created_by else None,
            'updated_at': allocation.updated_at.isoformat() if allocation.updated_at else None
        })

    logger.debug("Built utilization grid: %d consultants x %d weeks", len(consultants), len(weeks))

    return {
        'consultants': [{
            'id': c.id,
            'name': c.name,
            'standard_hours': c.standard_hours,
            'roles': c.role_values,
            'groups': c.group_values
        } for c in consultants],
        'weeks': week_keys,
        'allocations': grid
    }


def filter_consultants(grid, role=None, group=None, search=None):
    """Narrow an already fetched grid by role tag, group tag and name substring"""
    needle = search.lower() if search else None

    def keep(consultant):
        if role and role not in consultant['roles']:
            return False
        if group and group not in consultant['groups']:
            return False
        if needle and needle not in consultant['name'].lower():
            return False
        return True

    consultants = [c for c in grid['consultants'] if keep(c)]
    kept = {c['id'] for c in consultants}
    return {
        'consultants': consultants,
        'weeks': grid['weeks'],
        'allocations': {cid: weeks for cid, weeks in grid['allocations'].items() if cid in kept}
    }


def available_filters(grid):
    roles = set()
    groups = set()
    for consultant in grid['consultants']:
        roles.update(consultant['roles'])
        groups.update(consultant['groups'])
    return {'roles': sorted(roles), 'groups': sorted(groups)}


def utilization_status(hours, standard_hours):
    """Color bucket of a weekly total against the consultant's standard hours.

    0.9 and 1.1 themselves fall in NORMAL.
    """
    if not standard_hours:
        return UtilizationStatus.OVER if hours else UtilizationStatus.NORMAL
    ratio = abs(hours) / standard_hours
    if ratio < UNDER_THRESHOLD:
        return UtilizationStatus.UNDER
    if ratio > OVER_THRESHOLD:
        return UtilizationStatus.OVER
    return UtilizationStatus.NORMAL


def difference_status(difference, standard_hours):
    """NORMAL unless the variance exceeds 10% of standard hours (exactly 10% is NORMAL)"""
    if abs(difference) > standard_hours * DIFFERENCE_THRESHOLD:
        return UtilizationStatus.OVER if difference > 0 else UtilizationStatus.UNDER
    return UtilizationStatus.NORMAL


def editable_entry_types(week_class):
    """Entry types a cell of this week class accepts positive hours for"""
    if week_class == WeekClass.PAST:
        return [AllocationEntryType.ACTUAL]
    if week_class == WeekClass.FUTURE:
        return [AllocationEntryType.PROJECTED]
    return [AllocationEntryType.ACTUAL, AllocationEntryType.PROJECTED]


def cell_view(cell, view, week_class, standard_hours):
    """Value and status of one cell in one view; value is None when unavailable"""
    if view == ViewMode.PROJECTED:
        value = cell['projected']
        return value, utilization_status(value, standard_hours)

    if week_class == WeekClass.FUTURE:
        # no actuals exist yet, so neither actual nor difference is shown
        return None, None

    if view == ViewMode.ACTUAL:
        value = cell['actual']
        return value, utilization_status(value, standard_hours)

    value = cell['actual'] - cell['projected']
    return value, difference_status(value, standard_hours)


def build_view(grid, view, today=None):
    """Render every cell of the grid for one of the three views"""
    today = today or date.today()
    week_classes = {w: classify_week(parse_iso_date(w), today) for w in grid['weeks']}

    rendered = {}
    for consultant in grid['consultants']:
        cells = grid['allocations'][consultant['id']]
        rendered[consultant['id']] = {}
        for week, week_class in week_classes.items():
            value, status = cell_view(cells[week], view, week_class, consultant['standard_hours'])
            if view == ViewMode.DIFFERENCE:
                editable = []
            else:
                editable = [t.value for t in editable_entry_types(week_class)]
            rendered[consultant['id']][week] = {
                'value': value,
                'status': status.value if status else None,
                'week_class': week_class.value,
                'editable_entry_types': editable
            }
    return rendered


def month_headers(grid):
    grouped = group_weeks_by_month(parse_iso_date(w) for w in grid['weeks'])
    return [{'month': month, 'weeks': [w.isoformat() for w in weeks]} for month, weeks in grouped.items()]
