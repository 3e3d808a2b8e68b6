"""
Asset request routes
Thin layer over RequestWorkflow and RequestService
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from app import db
from app.buisness.requests.workflow import RequestWorkflow
from app.logger import get_logger
from app.presentation.routes.decorators import employee_required, hr_required
from app.presentation.routes.helpers import json_body, page_args, paginated
from app.services.requests.request_service import RequestService

bp = Blueprint('requests', __name__)
logger = get_logger("assetverse.routes.requests")


@bp.route('', methods=['POST'])
@login_required
@employee_required
def create():
    """Submit a request for one unit of an asset"""
    data = json_body()
    asset_request = RequestWorkflow(db.session).create_request(
        current_user.email,
        data.get('asset_id'),
        note=data.get('note'),
    )
    return jsonify({
        'message': 'Request submitted successfully',
        'request': asset_request.to_dict(),
    }), 201


@bp.route('/hr-requests', methods=['GET'])
@login_required
@hr_required
def hr_requests():
    page, limit = page_args()
    pagination = RequestService.hr_requests(
        current_user.email,
        status=request.args.get('status'),
        page=page,
        limit=limit,
    )
    return jsonify(paginated(
        pagination, 'requests', 'total_requests', [r.to_dict() for r in pagination.items]
    ))


@bp.route('/my-requests', methods=['GET'])
@login_required
def my_requests():
    requests = RequestService.my_requests(current_user.email)
    return jsonify({'requests': [r.to_dict() for r in requests]})


@bp.route('/<request_id>/approve', methods=['PUT'])
@login_required
@hr_required
def approve(request_id):
    assignment = RequestWorkflow(db.session).approve_request(current_user.email, request_id)
    return jsonify({
        'message': 'Request approved successfully',
        'assignment': assignment.to_dict(),
    })


@bp.route('/<request_id>/reject', methods=['PUT'])
@login_required
@hr_required
def reject(request_id):
    asset_request = RequestWorkflow(db.session).reject_request(current_user.email, request_id)
    return jsonify({
        'message': 'Request rejected',
        'request': asset_request.to_dict(),
    })


@bp.route('/return/<assignment_id>', methods=['PUT'])
@login_required
def return_asset(assignment_id):
    assignment = RequestWorkflow(db.session).return_asset(current_user.email, assignment_id)
    return jsonify({
        'message': 'Asset returned successfully',
        'assignment': assignment.to_dict(),
    })
