"""Performance middleware for Flask application."""

import logging
import time

from flask import g, request

logger = logging.getLogger(__name__)

SLOW_REQUEST_SECONDS = 1.0


def init_performance_middleware(app):
    """Initialize performance monitoring middleware."""

    @app.before_request
    def before_request():
        g.start_time = time.time()

    @app.after_request
    def after_request(response):
        if hasattr(g, 'start_time'):
            duration = time.time() - g.start_time
            if duration > SLOW_REQUEST_SECONDS:
                logger.warning(f"Slow request: {request.method} {request.path} took {duration:.2f}s")

            response.headers['X-Response-Time'] = f"{duration:.3f}s"

        return response
