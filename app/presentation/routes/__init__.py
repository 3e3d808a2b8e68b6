"""
Routes package for AssetVerse
JSON API blueprints, one per area, mounted under /api
"""

from app.logger import get_logger

logger = get_logger("assetverse.routes")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .api import assets_bp, requests_bp, employees_bp, packages_bp, payments_bp

    app.register_blueprint(assets_bp, url_prefix='/api/assets')
    app.register_blueprint(requests_bp, url_prefix='/api/requests')
    app.register_blueprint(employees_bp, url_prefix='/api/employees')
    app.register_blueprint(packages_bp, url_prefix='/api/packages')
    app.register_blueprint(payments_bp, url_prefix='/api/payments')

    logger.info("All route blueprints registered successfully")
