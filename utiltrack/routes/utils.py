from flask import Blueprint, jsonify
from utiltrack.models import (UserRole, GroupType, RoleLevel, OvertimePreference, ProjectType,
                              ProjectStatus, AllocationEntryType, PTOStatus, ViewMode, UtilizationStatus)

utils_bp = Blueprint('utils', __name__)

@utils_bp.route('/api/enums', methods=['GET'])
def get_enums():
    """Get all available enum values for frontend"""
    return jsonify({
        'user_roles': [e.value for e in UserRole],
        'group_types': [e.value for e in GroupType],
        'role_levels': [e.value for e in RoleLevel],
        'overtime_preferences': [e.value for e in OvertimePreference],
        'project_types': [e.value for e in ProjectType],
        'project_statuses': [e.value for e in ProjectStatus],
        'allocation_entry_types': [e.value for e in AllocationEntryType],
        'pto_statuses': [e.value for e in PTOStatus],
        'view_modes': [e.value for e in ViewMode],
        'utilization_statuses': [e.value for e in UtilizationStatus]
    })
