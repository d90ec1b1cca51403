"""Flask application configuration and middleware setup."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from flask import Flask, g, request
from prometheus_client import Counter, Histogram

if TYPE_CHECKING:
    from config import Config

# Prometheus metrics
REQUEST_LATENCY = Histogram(
    "http_request_latency_seconds",
    "HTTP request latency",
    ["method", "path"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5),
)
REQUEST_ERRORS = Counter(
    "http_request_errors_total",
    "Total number of 5xx responses",
    ["method", "path"],
)


def configure_app(app: Flask, config: Config, testing: bool = False) -> None:
    """Configure Flask application settings.

    Args:
        app: Flask application instance
        config: Application configuration
        testing: Whether running in testing mode
    """
    app.config.update(
        SECRET_KEY=config.secret_key,
        MAX_CONTENT_LENGTH=config.max_content_length,
        DATABASE_PATH=config.database_path,
        BACKUP_HISTORY_SIZE=config.backup_history_size,
        TESTING=testing,
    )
    app.json.ensure_ascii = False

    # Warn if insecure defaults detected
    if config.environment == 'production':
        if config.admin_password == "admin123":
            app.logger.warning("Default admin password seeded in production, change it from the admin panel")
        if config.secret_key.startswith("production_secret_key_must_be_changed"):
            app.logger.warning("SECRET_KEY is not set properly")


def setup_extensions(app: Flask, testing: bool = False) -> None:
    """Setup Flask extensions.

    Args:
        app: Flask application instance
        testing: Whether running in testing mode
    """
    from web.performance_middleware import init_performance_middleware
    init_performance_middleware(app)


def setup_security_headers(app: Flask) -> None:
    """Setup security headers middleware.

    Args:
        app: Flask application instance
    """
    @app.after_request
    def add_security_headers(response):
        """Add security headers to all responses."""
        response.headers.setdefault('X-Content-Type-Options', 'nosniff')
        response.headers.setdefault('X-Frame-Options', 'DENY')
        response.headers.setdefault('Referrer-Policy', 'same-origin')
        response.headers.setdefault('Cache-Control', 'no-store')
        return response


def setup_metrics(app: Flask) -> None:
    """Setup Prometheus metrics middleware.

    Args:
        app: Flask application instance
    """
    @app.before_request
    def before_metrics():
        """Store request start time."""
        g._metrics_start = time.time()

    @app.after_request
    def after_metrics(response):
        """Record request metrics."""
        start = getattr(g, '_metrics_start', None)
        path = getattr(request.url_rule, 'rule', request.path)
        if start is not None:
            REQUEST_LATENCY.labels(method=request.method, path=path).observe(time.time() - start)

        if response.status_code >= 500:
            REQUEST_ERRORS.labels(method=request.method, path=path).inc()
        return response
