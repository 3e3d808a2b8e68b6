"""
Subscription package routes
"""

from flask import Blueprint, current_app, jsonify
from flask_login import login_required, current_user

from app import db
from app.buisness.packages.package_manager import PackageManager
from app.presentation.routes.decorators import hr_required

bp = Blueprint('packages', __name__)


def package_manager():
    return PackageManager(db.session, current_app.extensions['payment_gateway'])


@bp.route('', methods=['GET'])
@login_required
def list_packages():
    packages = package_manager().list_packages()
    return jsonify({'packages': [p.to_dict(include_audit_fields=False) for p in packages]})


@bp.route('/my-package', methods=['GET'])
@login_required
@hr_required
def my_package():
    return jsonify(package_manager().my_package(current_user.email))
