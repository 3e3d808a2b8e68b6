"""
Payment routes for capacity upgrades
"""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user

from app.logger import get_logger
from app.presentation.routes.api.packages import package_manager
from app.presentation.routes.decorators import hr_required
from app.presentation.routes.helpers import json_body

bp = Blueprint('payments', __name__)
logger = get_logger("assetverse.routes.payments")


@bp.route('/create-payment-intent', methods=['POST'])
@login_required
@hr_required
def create_payment_intent():
    data = json_body()
    intent = package_manager().start_upgrade(
        current_user.email,
        amount=data.get('amount'),
        package_name=data.get('package_name'),
        employee_limit=data.get('employee_limit'),
    )
    return jsonify(intent)


@bp.route('/confirm-payment', methods=['POST'])
@login_required
@hr_required
def confirm_payment():
    data = json_body()
    payment = package_manager().confirm_upgrade(
        current_user.email,
        payment_intent_id=data.get('payment_intent_id'),
        package_name=data.get('package_name'),
        employee_limit=data.get('employee_limit'),
        amount=data.get('amount'),
    )
    return jsonify({
        'message': 'Package upgraded successfully',
        'payment': payment.to_dict(include_audit_fields=False),
    })


@bp.route('/history', methods=['GET'])
@login_required
@hr_required
def history():
    payments = package_manager().payment_history(current_user.email)
    return jsonify({'payments': [p.to_dict(include_audit_fields=False) for p in payments]})
