from flask import Blueprint, request, jsonify
from utiltrack.auth import current_context
from utiltrack.services.mass_load import preview_mass_load, execute_mass_load

mass_load_bp = Blueprint('mass_load', __name__)

@mass_load_bp.route('/api/mass-load/preview', methods=['POST'])
def preview():
    """Consultant and week counts a mass load would write, without writing"""
    return jsonify(preview_mass_load(current_context(), request.get_json(silent=True)))

@mass_load_bp.route('/api/mass-load', methods=['POST'])
def execute():
    """Write the same weekly hours for several consultants over a date range"""
    return jsonify(execute_mass_load(current_context(), request.get_json(silent=True)))
