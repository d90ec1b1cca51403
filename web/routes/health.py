"""Health check blueprint."""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from core.exceptions import DatabaseError


health_bp = Blueprint("health", __name__)


@health_bp.route("/health")
def health_check():
    db = current_app.config["DATABASE"]
    try:
        database_ok = db.ping()
    except DatabaseError as e:
        current_app.logger.error(f"Health check failed: {e}")
        database_ok = False

    data = {
        "status": "ok" if database_ok else "degraded",
        "database": database_ok,
    }
    return jsonify(data), 200 if database_ok else 503
