"""
Site Builder Widget Placement Service
Flask application factory
"""
import os
import logging
from flask import Flask
from flask_cors import CORS

from .extensions import db, migrate
from .config import get_config, validate_config
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)


def create_app(config_name: str = None) -> Flask:
    """
    Application factory for creating Flask app instances.

    Args:
        config_name: Configuration environment (development, production, testing)

    Returns:
        Configured Flask application
    """
    if config_name is None:
        config_name = os.getenv('FLASK_ENV', 'development')

    config = get_config(config_name)
    validate_config(config_name)

    # Setup logging before anything else
    setup_logging(config.LOG_LEVEL, config.LOG_FORMAT)

    app = Flask(__name__)
    app.config.from_object(config)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Editor frontends run on their own origin
    CORS(
        app,
        origins=app.config['CORS_ORIGINS'],
        supports_credentials=True,
        allow_headers=['Content-Type', 'Authorization', 'X-Request-ID'],
        expose_headers=['X-Request-ID'],
    )

    # Initialize request ID tracking for request tracing
    from .middleware import init_request_id_tracking
    init_request_id_tracking(app)

    # Register blueprints
    register_blueprints(app)

    # Register CLI commands
    from .commands import init_app as init_commands
    init_commands(app)

    # Register error handlers
    register_error_handlers(app)

    # Health check endpoint
    @app.route('/health')
    def health_check():
        return {'status': 'healthy', 'service': 'sitebuilder'}

    logger.debug(f'App created with {config_name} config')
    return app


def register_blueprints(app: Flask) -> None:
    """Register all API blueprints."""
    # Widget catalog
    from .api.widgets import widgets_bp

    # Template positions
    from .api.widget_positions import widget_positions_bp

    # Site placements and layout
    from .api.site_widgets import site_widgets_bp
    from .api.layout import layout_bp

    app.register_blueprint(widgets_bp, url_prefix='/api/widgets')
    app.register_blueprint(widget_positions_bp, url_prefix='/api/templates')
    app.register_blueprint(site_widgets_bp, url_prefix='/api/sites')
    app.register_blueprint(layout_bp, url_prefix='/api/sites')


def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from .utils.errors import ErrorCode, error_response, exception_response
    from .utils.exceptions import SiteBuilderError

    @app.errorhandler(SiteBuilderError)
    def site_builder_error(error):
        return exception_response(error)

    @app.errorhandler(400)
    def bad_request(error):
        return error_response('Bad request', ErrorCode.INVALID_REQUEST, 400, log_error=False)

    @app.errorhandler(404)
    def not_found(error):
        return error_response('Not found', ErrorCode.NOT_FOUND, 404, log_error=False)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return error_response('Method not allowed', ErrorCode.INVALID_REQUEST, 405, log_error=False)

    @app.errorhandler(500)
    def internal_error(error):
        db.session.rollback()
        return error_response('An unexpected error occurred', ErrorCode.INTERNAL_ERROR, 500)
