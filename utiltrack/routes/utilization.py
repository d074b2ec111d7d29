from flask import Blueprint, request, jsonify
from utiltrack.auth import current_context
from utiltrack.errors import ValidationError
from utiltrack.services.aggregation import (get_utilization_grid, filter_consultants, available_filters,
                                            build_view, month_headers)
from utiltrack.services.cell_reconciliation import upsert_cell, delete_cell_entry, reconcile_cell
from utiltrack.utils.validators import validate_required_fields, validate_view_mode

utilization_bp = Blueprint('utilization', __name__)


def _int_arg(source, field):
    try:
        return int(source[field])
    except (KeyError, TypeError, ValueError):
        raise ValidationError(f'{field} must be an integer')


@utilization_bp.route('/api/utilization', methods=['GET'])
def get_utilization():
    """Utilization grid for a date range, optionally filtered and rendered for one view"""
    ctx = current_context()
    grid = get_utilization_grid(ctx, request.args.get('start'), request.args.get('end'))

    filters = available_filters(grid)
    grid = filter_consultants(
        grid,
        role=request.args.get('role'),
        group=request.args.get('group'),
        search=request.args.get('search')
    )
    grid['filters'] = filters
    grid['months'] = month_headers(grid)

    view = request.args.get('view')
    if view:
        is_valid, view_mode = validate_view_mode(view)
        if not is_valid:
            return jsonify({'error': view_mode}), 400
        grid['view'] = {'mode': view_mode.value, 'cells': build_view(grid, view_mode)}

    return jsonify(grid)


@utilization_bp.route('/api/utilization/cells', methods=['PUT'])
def put_cell_entry():
    """Create or overwrite the hours of one project line in a cell"""
    data = request.get_json(silent=True)

    is_valid, error = validate_required_fields(
        data, ['consultant_id', 'week_start', 'project_id', 'hours', 'entry_type'])
    if not is_valid:
        return jsonify({'error': error}), 400

    allocation = upsert_cell(
        current_context(),
        _int_arg(data, 'consultant_id'),
        data['week_start'],
        _int_arg(data, 'project_id'),
        data['hours'],
        data['entry_type'],
        notes=data.get('notes')
    )
    if allocation is None:
        return jsonify({'message': 'Allocation removed'})
    return jsonify(allocation.to_dict())


@utilization_bp.route('/api/utilization/cells', methods=['DELETE'])
def remove_cell_entry():
    """Delete one (project, entry type) line of a cell"""
    is_valid, error = validate_required_fields(
        request.args, ['consultant_id', 'project_id', 'week_start', 'entry_type'])
    if not is_valid:
        return jsonify({'error': error}), 400

    delete_cell_entry(
        current_context(),
        _int_arg(request.args, 'consultant_id'),
        _int_arg(request.args, 'project_id'),
        request.args['week_start'],
        request.args['entry_type']
    )
    return jsonify({'message': 'Allocation deleted successfully'})


@utilization_bp.route('/api/utilization/cells/<int:consultant_id>/<week>', methods=['PUT'])
def reconcile_week_cell(consultant_id, week):
    """Replace a cell's project lines with the submitted set"""
    data = request.get_json(silent=True)
    if not data or not isinstance(data.get('allocations'), list):
        return jsonify({'error': 'allocations must be a list'}), 400

    edits = {}
    for line in data['allocations']:
        if not isinstance(line, dict) or 'project_id' not in line:
            return jsonify({'error': 'Each allocation must have project_id'}), 400
        project_id = _int_arg(line, 'project_id')
        if project_id in edits:
            return jsonify({'error': f'Duplicate allocation for project {project_id}'}), 400
        edits[project_id] = {
            'actual_hours': line.get('actual_hours'),
            'projected_hours': line.get('projected_hours'),
            'notes': line.get('notes')
        }

    return jsonify(reconcile_cell(current_context(), consultant_id, week, edits))
