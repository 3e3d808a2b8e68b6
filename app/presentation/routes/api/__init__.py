"""
JSON API blueprints
"""

from .assets import bp as assets_bp
from .requests import bp as requests_bp
from .employees import bp as employees_bp
from .packages import bp as packages_bp
from .payments import bp as payments_bp

__all__ = [
    'assets_bp',
    'requests_bp',
    'employees_bp',
    'packages_bp',
    'payments_bp',
]
