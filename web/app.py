"""Flask application factory with metrics and security defaults."""

from __future__ import annotations

from flask import Flask, jsonify
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from werkzeug.exceptions import HTTPException

from database.connection import Database
from database.migrations import run_migrations
from services import BackupService, NotificationService, OrderService, SettingsService, StatsService
from web.config_middleware import (
    configure_app,
    setup_extensions,
    setup_security_headers,
    setup_metrics,
)
from web.routes import register_routes


def create_app(config, testing=False) -> Flask:
    """Create and configure Flask application.

    Args:
        config: Application configuration
        testing: Whether running in testing mode

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)

    # Configure application
    configure_app(app, config, testing)

    # Setup extensions
    setup_extensions(app, testing)

    # Setup middleware
    setup_security_headers(app)
    setup_metrics(app)

    # Database and services
    _setup_services(app, config)

    # Register routes
    register_routes(app)

    # Setup additional handlers
    _setup_routes(app)
    _setup_error_handlers(app)

    return app


def _setup_services(app: Flask, config) -> None:
    """Create the schema if needed and wire services into app config.

    Args:
        app: Flask application instance
        config: Application configuration
    """
    db = Database(config.database_path, busy_timeout_ms=config.db_busy_timeout)
    run_migrations(db, admin_password=config.admin_password)

    backups = BackupService(db, history_size=config.backup_history_size)
    app.config["DATABASE"] = db
    app.config["BACKUP_SERVICE"] = backups
    app.config["ORDER_SERVICE"] = OrderService(db, backups=backups, notifications=NotificationService())
    app.config["SETTINGS_SERVICE"] = SettingsService(db, backups=backups)
    app.config["STATS_SERVICE"] = StatsService(db)


def _setup_routes(app: Flask) -> None:
    """Setup basic application routes.

    Args:
        app: Flask application instance
    """
    @app.route('/')
    def root():
        return jsonify({"success": True, "service": "fundabenefica-api"})

    @app.route('/metrics')
    def metrics():
        """Expose Prometheus metrics."""
        data = generate_latest()
        return data, 200, {'Content-Type': CONTENT_TYPE_LATEST}


def _setup_error_handlers(app: Flask) -> None:
    """Setup error handlers.

    Args:
        app: Flask application instance
    """
    @app.errorhandler(HTTPException)
    def http_error(error):
        """Render framework errors (404, 405, 413...) as JSON envelopes."""
        return jsonify({"success": False, "error": error.description}), error.code

    @app.errorhandler(500)
    def internal_error(error):
        """Handle 500 errors."""
        app.logger.error(f"Internal server error: {error}")
        return jsonify({"success": False, "error": "Internal server error"}), 500
