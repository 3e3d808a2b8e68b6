from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_wtf.csrf import CSRFProtect
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from app.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
csrf = CSRFProtect()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200 per day", "50 per hour"],
)


def _env_flag(name, default):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes', 'on')


def create_app(test_config=None):
    """
    Build the Flask application.

    Args:
        test_config (dict, optional): Config values applied after the environment is read

    Returns:
        Flask: Configured application
    """
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("assetverse")
    logger.info("Initializing Flask application")

    # SECURITY: Require SECRET_KEY in environment - no fallback
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')

    # Prefer an explicit DATABASE_URL; otherwise keep the SQLite file in instance/
    base_dir = Path(__file__).parent.parent
    instance_dir = base_dir / 'instance'
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'assetverse.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Domain configuration
    app.config['DEFAULT_CAPACITY_LIMIT'] = int(os.environ.get('DEFAULT_CAPACITY_LIMIT', '5'))
    app.config['DEFAULT_PAGE_SIZE'] = int(os.environ.get('DEFAULT_PAGE_SIZE', '10'))
    app.config['DEFAULT_AVATAR_URL'] = os.environ.get(
        'DEFAULT_AVATAR_URL', 'https://i.ibb.co/hL3hMHY/default-avatar.png'
    )

    # Session cookie security configuration
    app.config['SESSION_COOKIE_SECURE'] = _env_flag('SESSION_COOKIE_SECURE', 'True')
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'
    app.config['PERMANENT_SESSION_LIFETIME'] = int(os.environ.get('PERMANENT_SESSION_LIFETIME', '604800'))  # Default: 7 days
    app.config['REMEMBER_COOKIE_SECURE'] = app.config['SESSION_COOKIE_SECURE']
    app.config['REMEMBER_COOKIE_HTTPONLY'] = True

    # JSON clients send the token from /api/auth/csrf-token in X-CSRFToken
    app.config['WTF_CSRF_ENABLED'] = _env_flag('WTF_CSRF_ENABLED', 'True')

    # Use Redis in production for distributed rate limiting
    app.config['RATELIMIT_ENABLED'] = _env_flag('RATELIMIT_ENABLED', 'True')
    app.config['RATELIMIT_STORAGE_URI'] = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    if test_config:
        app.config.update(test_config)

    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from app.data.core.user_info.user import User  # noqa: F401
    from app.data.core.asset_info.asset import Asset  # noqa: F401
    from app.data.requests.asset_request import AssetRequest  # noqa: F401
    from app.data.affiliations.employee_affiliation import EmployeeAffiliation  # noqa: F401
    from app.data.assignments.assigned_asset import AssignedAsset  # noqa: F401
    from app.data.packages.package import Package  # noqa: F401
    from app.data.packages.payment import Payment  # noqa: F401

    logger.debug("Models imported and registered")

    # Payment processor seam; tests and deployments replace it
    from app.buisness.packages.payment_gateway import UnconfiguredPaymentGateway
    app.extensions.setdefault('payment_gateway', UnconfiguredPaymentGateway())

    # Register blueprints
    from app.auth import auth
    from app.routes import main
    from app.presentation.routes import init_app as init_routes
    from app.presentation.routes.errors import register_error_handlers

    app.register_blueprint(auth, url_prefix='/api/auth')
    app.register_blueprint(main)
    init_routes(app)
    register_error_handlers(app)

    @app.teardown_appcontext
    def shutdown_session(exception=None):
        if exception is not None:
            db.session.rollback()

    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        return response

    logger.info("Flask application initialization complete")

    return app
