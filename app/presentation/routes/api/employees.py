"""
Employee and team routes
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from app import db
from app.buisness.affiliations.affiliation_ledger import AffiliationLedger
from app.buisness.assignments.assignment_ledger import AssignmentLedger
from app.buisness.core.errors import InvalidInputError
from app.buisness.core.unit_of_work import atomic
from app.buisness.core.user_directory import UserDirectory
from app.logger import get_logger
from app.presentation.routes.decorators import hr_required
from app.presentation.routes.helpers import page_args
from app.services.employees.team_service import TeamService

bp = Blueprint('employees', __name__)
logger = get_logger("assetverse.routes.employees")


@bp.route('/my-assets', methods=['GET'])
@login_required
def my_assets():
    """Units currently assigned to the caller"""
    assets = AssignmentLedger(db.session).list_for_employee(
        current_user.email,
        search=request.args.get('search'),
        asset_type=request.args.get('type'),
    )
    return jsonify({'assets': [a.to_dict() for a in assets]})


@bp.route('/my-team', methods=['GET'])
@login_required
def my_team():
    return jsonify({'companies': TeamService.my_team(current_user.email)})


@bp.route('/team-birthdays', methods=['GET'])
@login_required
def team_birthdays():
    month = request.args.get('month')
    if month is not None:
        if not month.isdigit():
            raise InvalidInputError("Month must be between 1 and 12")
        month = int(month)
    return jsonify({'birthdays': TeamService.team_birthdays(current_user.email, month)})


@bp.route('/my-affiliations', methods=['GET'])
@login_required
def my_affiliations():
    affiliations = TeamService.my_affiliations(current_user.email)
    return jsonify({'affiliations': [a.to_dict() for a in affiliations]})


@bp.route('/hr-employees', methods=['GET'])
@login_required
@hr_required
def hr_employees():
    page, limit = page_args()
    return jsonify(TeamService.hr_employees(
        current_user.email,
        search=request.args.get('search'),
        page=page,
        limit=limit,
    ))


@bp.route('/remove/<email>', methods=['DELETE'])
@login_required
@hr_required
def remove(email):
    """Deactivate an employee's affiliation with the caller's team"""
    ledger = AffiliationLedger(db.session)
    with atomic(db.session, 'remove_employee'):
        ledger.deactivate(UserDirectory.normalize_email(email), current_user.email)
    return jsonify({'message': 'Employee removed from team'})
