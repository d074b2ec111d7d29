from flask import Blueprint, request, jsonify
from utiltrack.auth import current_context
from utiltrack.services.pto import (create_pto_request, list_pto_requests, get_pto_request,
                                    approve_pto_request, deny_pto_request, delete_pto_request, pto_to_dict)

pto_requests_bp = Blueprint('pto_requests', __name__)

@pto_requests_bp.route('/api/pto-requests', methods=['POST'])
def create():
    """Submit a PTO request; it starts out pending"""
    pto = create_pto_request(current_context(), request.get_json(silent=True))
    return jsonify(pto_to_dict(pto)), 201

@pto_requests_bp.route('/api/pto-requests', methods=['GET'])
def get_all():
    """List PTO requests, optionally by status and consultant"""
    pto_requests = list_pto_requests(
        current_context(),
        status=request.args.get('status'),
        consultant_id=request.args.get('consultant_id', type=int)
    )
    return jsonify([pto_to_dict(pto) for pto in pto_requests])

@pto_requests_bp.route('/api/pto-requests/<int:request_id>', methods=['GET'])
def get_one(request_id):
    return jsonify(pto_to_dict(get_pto_request(current_context(), request_id)))

@pto_requests_bp.route('/api/pto-requests/<int:request_id>/approve', methods=['PUT'])
def approve(request_id):
    """Approve a pending request and book its hours on the PTO project"""
    return jsonify(pto_to_dict(approve_pto_request(current_context(), request_id)))

@pto_requests_bp.route('/api/pto-requests/<int:request_id>/deny', methods=['PUT'])
def deny(request_id):
    return jsonify(pto_to_dict(deny_pto_request(current_context(), request_id)))

@pto_requests_bp.route('/api/pto-requests/<int:request_id>', methods=['DELETE'])
def delete(request_id):
    """Delete a request, only while it is pending"""
    delete_pto_request(current_context(), request_id)
    return jsonify({
        'message': 'PTO request deleted successfully',
        'id': request_id
    }), 200
