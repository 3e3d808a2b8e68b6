"""
Role guards for API routes

Use below @login_required: an anonymous caller is answered with 401 by the
login manager before these run.
"""

from flask import abort
from flask_login import current_user
from app.logger import get_logger

logger = get_logger("assetverse.routes.decorators")


def _role_required(role, f):
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or current_user.role != role:
            logger.warning(
                f"User {current_user.email if current_user.is_authenticated else 'anonymous'} "
                f"attempted to access {f.__name__} without the {role} role"
            )
            abort(403)
        return f(*args, **kwargs)
    decorated_function.__name__ = f.__name__
    decorated_function.__doc__ = f.__doc__
    return decorated_function


def hr_required(f):
    """Decorator to require an HR account"""
    return _role_required('hr', f)


def employee_required(f):
    """Decorator to require an employee account"""
    return _role_required('employee', f)
