import logging
from flask import Blueprint, request, jsonify
from sqlalchemy import or_
from utiltrack.auth import current_context, require_actor, require_elevated
from utiltrack.errors import StateConflictError
from utiltrack.extensions import db
from utiltrack.models import Project, ProjectStatus
from utiltrack.services.allocation_store import count_allocations
from utiltrack.services.common import commit, get_or_404
from utiltrack.utils.validators import validate_required_fields, validate_project_type, validate_project_status

logger = logging.getLogger(__name__)

projects_bp = Blueprint('projects', __name__)

@projects_bp.route('/api/projects', methods=['POST'])
def create_project():
    """Create a new project"""
    require_elevated(current_context())
    data = request.get_json(silent=True)

    is_valid, error = validate_required_fields(data, ['client', 'project_name', 'timecode', 'type'])
    if not is_valid:
        return jsonify({'error': error}), 400

    is_valid, project_type = validate_project_type(data['type'])
    if not is_valid:
        return jsonify({'error': project_type}), 400

    is_valid, status = validate_project_status(data.get('status', ProjectStatus.ACTIVE.value))
    if not is_valid:
        return jsonify({'error': status}), 400

    # Check if timecode is already taken
    if Project.query.filter_by(timecode=data['timecode']).first():
        return jsonify({'error': 'Project with this timecode already exists'}), 400

    project = Project(
        client=data['client'],
        project_name=data['project_name'],
        timecode=data['timecode'],
        type=project_type,
        status=status
    )
    db.session.add(project)
    commit('create project')
    return jsonify(project.to_dict()), 201

@projects_bp.route('/api/projects', methods=['GET'])
def get_projects():
    """Get projects, optionally filtered by status, type and a search term"""
    require_actor(current_context())
    query = Project.query

    status = request.args.get('status')
    if status:
        is_valid, status = validate_project_status(status)
        if not is_valid:
            return jsonify({'error': status}), 400
        query = query.filter(Project.status == status)

    project_type = request.args.get('type')
    if project_type:
        is_valid, project_type = validate_project_type(project_type)
        if not is_valid:
            return jsonify({'error': project_type}), 400
        query = query.filter(Project.type == project_type)

    search = request.args.get('search')
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(
            Project.client.ilike(pattern),
            Project.project_name.ilike(pattern),
            Project.timecode.ilike(pattern)
        ))

    return jsonify([p.to_dict() for p in query.order_by(Project.created_at.desc(), Project.id.desc()).all()])

@projects_bp.route('/api/projects/active', methods=['GET'])
def get_active_projects():
    """Projects selectable for new allocations"""
    require_actor(current_context())
    projects = Project.query.filter_by(status=ProjectStatus.ACTIVE).order_by(Project.project_name).all()
    return jsonify([{
        'id': p.id,
        'project_name': p.project_name,
        'timecode': p.timecode
    } for p in projects])

@projects_bp.route('/api/projects/<int:project_id>', methods=['GET'])
def get_project(project_id):
    require_actor(current_context())
    return jsonify(get_or_404(Project, project_id, 'Project').to_dict())

@projects_bp.route('/api/projects/<int:project_id>', methods=['PUT'])
def update_project(project_id):
    """Update a project; setting status INACTIVE retires it from new allocations"""
    require_elevated(current_context())
    project = get_or_404(Project, project_id, 'Project')
    data = request.get_json(silent=True)

    if not data:
        return jsonify({'error': 'Request body is required'}), 400

    for field in ('client', 'project_name', 'timecode'):
        if field in data and not data[field]:
            return jsonify({'error': f'{field} is required'}), 400

    is_valid, project_type = validate_project_type(data.get('type', project.type.value))
    if not is_valid:
        return jsonify({'error': project_type}), 400

    is_valid, status = validate_project_status(data.get('status', project.status.value))
    if not is_valid:
        return jsonify({'error': status}), 400

    # Timecode stays unique across the other projects
    timecode = data.get('timecode', project.timecode)
    if Project.query.filter(Project.timecode == timecode, Project.id != project_id).first():
        return jsonify({'error': 'Project with this timecode already exists'}), 400

    project.client = data.get('client', project.client)
    project.project_name = data.get('project_name', project.project_name)
    project.timecode = timecode
    project.type = project_type
    project.status = status
    commit('update project')
    logger.info("Project %s updated", project.timecode)
    return jsonify(project.to_dict())

@projects_bp.route('/api/projects/<int:project_id>', methods=['DELETE'])
def delete_project(project_id):
    """Delete a project that no allocation references"""
    require_elevated(current_context())
    project = get_or_404(Project, project_id, 'Project')

    if count_allocations(project_id=project_id) > 0:
        raise StateConflictError('Cannot delete project with existing allocations. Set it to inactive instead.')

    db.session.delete(project)
    commit('delete project')
    logger.info("Project %s deleted", project.timecode)
    return jsonify({'message': 'Project deleted successfully', 'id': project_id})
