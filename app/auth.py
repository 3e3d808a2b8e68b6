from flask import Blueprint, current_app, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf
from app import db, limiter
from app.buisness.core.user_directory import UserDirectory
from app.presentation.routes.helpers import json_body
from app.utils.logging_sanitizer import sanitize_payload
from app.logger import get_logger

logger = get_logger("assetverse.auth")
auth = Blueprint('auth', __name__)


def user_directory():
    return UserDirectory(
        db.session,
        default_capacity=current_app.config['DEFAULT_CAPACITY_LIMIT'],
        default_avatar=current_app.config['DEFAULT_AVATAR_URL'],
    )


@auth.route('/csrf-token', methods=['GET'])
def csrf_token():
    """Token for cookie clients; send it back in the X-CSRFToken header"""
    return jsonify({'csrf_token': generate_csrf()})


@auth.route('/register-hr', methods=['POST'])
@limiter.limit("10 per hour")
def register_hr():
    data = json_body()
    logger.debug(f"HR registration payload: {sanitize_payload(data)}")

    user = user_directory().register_hr(
        name=data.get('name'),
        email=data.get('email'),
        password=data.get('password'),
        company_name=data.get('company_name'),
        company_logo=data.get('company_logo'),
        date_of_birth=data.get('date_of_birth'),
    )
    login_user(user)
    return jsonify({'message': 'HR registered successfully', 'user': user.to_dict()}), 201


@auth.route('/register-employee', methods=['POST'])
@limiter.limit("10 per hour")
def register_employee():
    data = json_body()
    logger.debug(f"Employee registration payload: {sanitize_payload(data)}")

    user = user_directory().register_employee(
        name=data.get('name'),
        email=data.get('email'),
        password=data.get('password'),
        date_of_birth=data.get('date_of_birth'),
    )
    login_user(user)
    return jsonify({'message': 'Employee registered successfully', 'user': user.to_dict()}), 201


@auth.route('/login', methods=['POST'])
@limiter.limit("10 per minute")
def login():
    data = json_body()
    user = user_directory().authenticate(data.get('email'), data.get('password'))
    login_user(user, remember=bool(data.get('remember')))
    logger.info(f"Successful login for user: {user.email}")
    return jsonify({'message': 'Login successful', 'user': user.to_dict()})


@auth.route('/logout', methods=['POST'])
@login_required
def logout():
    email = current_user.email
    logout_user()
    logger.info(f"User logged out: {email}")
    return jsonify({'message': 'Logged out successfully'})


@auth.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'user': current_user.to_dict()})


@auth.route('/profile', methods=['PUT'])
@login_required
def update_profile():
    data = json_body()
    user = user_directory().update_profile(
        current_user.email,
        name=data.get('name'),
        profile_image=data.get('profile_image'),
        date_of_birth=data.get('date_of_birth'),
    )
    return jsonify({'message': 'Profile updated successfully', 'user': user.to_dict()})
