"""
JSON error responses

Domain exceptions carry their own HTTP status and code; everything else is
answered with a generic body after the traceback is logged.
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException

from app import db, login_manager
from app.buisness.core.errors import AssetVerseError
from app.logger import get_logger

logger = get_logger("assetverse.routes.errors")


def register_error_handlers(app):
    """Attach the JSON error handlers to the app"""

    @app.errorhandler(AssetVerseError)
    def handle_domain_error(error):
        return jsonify(error.to_dict()), error.http_status

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({
            'message': error.description,
            'code': error.name.lower().replace(' ', '_'),
        }), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error):
        db.session.rollback()
        logger.error(f"Unhandled error: {type(error).__name__}", exc_info=error)
        return jsonify({'message': 'Server error', 'code': 'server_error'}), 500

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'message': 'Authentication required', 'code': 'unauthorized'}), 401
