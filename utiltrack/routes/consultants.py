import logging
from flask import Blueprint, request, jsonify
from utiltrack.auth import current_context, require_actor, require_role
from utiltrack.errors import StateConflictError
from utiltrack.extensions import db
from utiltrack.models import Consultant, ConsultantGroup, ConsultantRole, UserRole
from utiltrack.services.allocation_store import count_allocations
from utiltrack.services.common import commit, get_or_404
from utiltrack.utils.validators import (validate_required_fields, validate_hours, validate_group_type,
                                        validate_role_level, validate_overtime_preference)

logger = logging.getLogger(__name__)

consultants_bp = Blueprint('consultants', __name__)

def _parse_tags(values, validator):
    """Validated enum tags with repeats dropped; (is_valid, tags_or_error)"""
    tags = []
    for value in dict.fromkeys(values):
        is_valid, tag = validator(value)
        if not is_valid:
            return False, tag
        tags.append(tag)
    return True, tags

@consultants_bp.route('/api/consultants', methods=['POST'])
def create_consultant():
    """Create a new consultant"""
    require_role(current_context(), UserRole.ADMIN)
    data = request.get_json(silent=True)

    is_valid, error = validate_required_fields(data, ['name', 'standard_hours', 'groups', 'roles'])
    if not is_valid:
        return jsonify({'error': error}), 400

    is_valid, standard_hours = validate_hours(data['standard_hours'], maximum=80, field='standard_hours')
    if not is_valid:
        return jsonify({'error': standard_hours}), 400

    is_valid, overtime_hours = validate_hours(data.get('overtime_hours_available', 0), maximum=40,
                                              field='overtime_hours_available')
    if not is_valid:
        return jsonify({'error': overtime_hours}), 400

    is_valid, overtime_preference = validate_overtime_preference(data.get('overtime_preference', 'NONE'))
    if not is_valid:
        return jsonify({'error': overtime_preference}), 400

    if not isinstance(data['groups'], list) or not isinstance(data['roles'], list):
        return jsonify({'error': 'groups and roles must be lists'}), 400

    is_valid, groups = _parse_tags(data['groups'], validate_group_type)
    if not is_valid:
        return jsonify({'error': groups}), 400

    is_valid, roles = _parse_tags(data['roles'], validate_role_level)
    if not is_valid:
        return jsonify({'error': roles}), 400

    consultant = Consultant(
        name=data['name'],
        standard_hours=standard_hours,
        overtime_preference=overtime_preference,
        overtime_hours_available=overtime_hours,
        hr_manager=data.get('hr_manager'),
        groups=[ConsultantGroup(group=g) for g in groups],
        roles=[ConsultantRole(level=r) for r in roles]
    )
    db.session.add(consultant)
    commit('create consultant')
    return jsonify(consultant.to_dict()), 201

@consultants_bp.route('/api/consultants', methods=['GET'])
def get_consultants():
    """Get consultants, optionally filtered by group, role and name"""
    require_actor(current_context())
    query = Consultant.query

    group = request.args.get('group')
    if group:
        is_valid, group = validate_group_type(group)
        if not is_valid:
            return jsonify({'error': group}), 400
        query = query.filter(Consultant.groups.any(ConsultantGroup.group == group))

    role = request.args.get('role')
    if role:
        is_valid, role = validate_role_level(role)
        if not is_valid:
            return jsonify({'error': role}), 400
        query = query.filter(Consultant.roles.any(ConsultantRole.level == role))

    search = request.args.get('search')
    if search:
        query = query.filter(Consultant.name.ilike(f'%{search}%'))

    return jsonify([c.to_dict() for c in query.order_by(Consultant.name).all()])

@consultants_bp.route('/api/consultants/<int:consultant_id>', methods=['GET'])
def get_consultant(consultant_id):
    require_actor(current_context())
    return jsonify(get_or_404(Consultant, consultant_id, 'Consultant').to_dict())

def _merge_tags(rows, tags, attr, make_row):
    """Rows for exactly ``tags``, reusing the rows of tags already present"""
    kept = [row for row in rows if getattr(row, attr) in tags]
    present = {getattr(row, attr) for row in kept}
    return kept + [make_row(tag) for tag in tags if tag not in present]

@consultants_bp.route('/api/consultants/<int:consultant_id>', methods=['PUT'])
def update_consultant(consultant_id):
    """Update a consultant; groups and roles, when given, replace the current tags"""
    require_role(current_context(), UserRole.ADMIN)
    consultant = get_or_404(Consultant, consultant_id, 'Consultant')
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    name = data.get('name', consultant.name)
    if not name:
        return jsonify({'error': 'name is required'}), 400

    is_valid, standard_hours = validate_hours(data.get('standard_hours', consultant.standard_hours),
                                              maximum=80, field='standard_hours')
    if not is_valid:
        return jsonify({'error': standard_hours}), 400

    is_valid, overtime_hours = validate_hours(
        data.get('overtime_hours_available', consultant.overtime_hours_available),
        maximum=40, field='overtime_hours_available')
    if not is_valid:
        return jsonify({'error': overtime_hours}), 400

    is_valid, overtime_preference = validate_overtime_preference(
        data.get('overtime_preference', consultant.overtime_preference.value))
    if not is_valid:
        return jsonify({'error': overtime_preference}), 400

    groups = roles = None
    if 'groups' in data:
        if not isinstance(data['groups'], list) or not data['groups']:
            return jsonify({'error': 'groups must be a non-empty list'}), 400
        is_valid, groups = _parse_tags(data['groups'], validate_group_type)
        if not is_valid:
            return jsonify({'error': groups}), 400

    if 'roles' in data:
        if not isinstance(data['roles'], list) or not data['roles']:
            return jsonify({'error': 'roles must be a non-empty list'}), 400
        is_valid, roles = _parse_tags(data['roles'], validate_role_level)
        if not is_valid:
            return jsonify({'error': roles}), 400

    consultant.name = name
    consultant.standard_hours = standard_hours
    consultant.overtime_hours_available = overtime_hours
    consultant.overtime_preference = overtime_preference
    consultant.hr_manager = data.get('hr_manager', consultant.hr_manager)
    if groups is not None:
        consultant.groups = _merge_tags(consultant.groups, groups, 'group',
                                        lambda g: ConsultantGroup(group=g))
    if roles is not None:
        consultant.roles = _merge_tags(consultant.roles, roles, 'level',
                                       lambda r: ConsultantRole(level=r))

    commit('update consultant')
    logger.info("Consultant %s updated", consultant_id)
    return jsonify(consultant.to_dict())

@consultants_bp.route('/api/consultants/<int:consultant_id>', methods=['DELETE'])
def delete_consultant(consultant_id):
    """Delete a consultant that no allocation references"""
    require_role(current_context(), UserRole.ADMIN)
    consultant = get_or_404(Consultant, consultant_id, 'Consultant')

    if count_allocations(consultant_id=consultant_id) > 0:
        raise StateConflictError('Cannot delete consultant with existing allocations.')

    db.session.delete(consultant)
    commit('delete consultant')
    logger.info("Consultant %s deleted", consultant_id)
    return jsonify({'message': 'Consultant deleted successfully', 'id': consultant_id})
