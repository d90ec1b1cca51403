"""JSON API used by the public raffle page and the admin panel.

Every response is an envelope ``{"success": bool, ...}``. Failures carry a
human readable ``error``.
"""

from __future__ import annotations

import json
from typing import Any, Dict

from flask import Blueprint, Response, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from core.exceptions import ApplicationError, NotFoundError, ValidationError
from services import BackupService, OrderService, SettingsService, StatsService


api_bp = Blueprint("api", __name__, url_prefix="/api")


def _orders() -> OrderService:
    return current_app.config["ORDER_SERVICE"]


def _settings() -> SettingsService:
    return current_app.config["SETTINGS_SERVICE"]


def _backups() -> BackupService:
    return current_app.config["BACKUP_SERVICE"]


def _stats() -> StatsService:
    return current_app.config["STATS_SERVICE"]


def _json_body() -> Dict[str, Any]:
    """Parsed JSON object body; an empty body counts as ``{}``."""
    if not request.get_data(cache=True):
        return {}
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def _ok(**payload: Any):
    return jsonify({"success": True, **payload})


def _fail(message: str, status: int):
    return jsonify({"success": False, "error": message}), status


@api_bp.errorhandler(ValidationError)
def handle_validation_error(error: ValidationError):
    current_app.logger.info(f"Rejected {request.method} {request.path}: {error}")
    return _fail(str(error), 400)


@api_bp.errorhandler(NotFoundError)
def handle_not_found(error: NotFoundError):
    return _fail(str(error), 404)


@api_bp.errorhandler(ApplicationError)
def handle_application_error(error: ApplicationError):
    current_app.logger.error(f"{request.method} {request.path} failed: {error}")
    return _fail(str(error), 500)


@api_bp.errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    if isinstance(error, HTTPException):
        return _fail(error.description, error.code)
    current_app.logger.exception(f"Unexpected error on {request.method} {request.path}")
    return _fail("Internal server error", 500)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

@api_bp.route("/config", methods=["GET"])
def get_config():
    return _ok(**_settings().public_config())


@api_bp.route("/config/prize", methods=["POST"])
def save_prize():
    _settings().update_prize(_json_body())
    return _ok()


@api_bp.route("/config/payment/<method_id>", methods=["POST"])
def save_payment_method(method_id: str):
    _settings().set_payment_method(method_id, _json_body())
    return _ok()


@api_bp.route("/config/password", methods=["POST"])
def change_password():
    _settings().change_password(_json_body().get("password"))
    return _ok()


@api_bp.route("/auth", methods=["POST"])
def authenticate():
    return jsonify({"success": _settings().verify_password(_json_body().get("password"))})


# ---------------------------------------------------------------------------
# Prize images
# ---------------------------------------------------------------------------

@api_bp.route("/images", methods=["POST"])
def upload_image():
    payload = _json_body()
    _settings().add_image(payload.get("image"), payload.get("position"))
    return _ok()


@api_bp.route("/images/<int:position>", methods=["DELETE"])
def delete_image(position: int):
    _settings().remove_image(position)
    return _ok()


# ---------------------------------------------------------------------------
# Numbers and orders
# ---------------------------------------------------------------------------

@api_bp.route("/sold", methods=["GET"])
def sold_numbers():
    return _ok(numbers=_orders().list_sold())


@api_bp.route("/orders", methods=["POST"])
def create_order():
    payload = _json_body()
    order_id = _orders().create(
        name=payload.get("name"),
        email=payload.get("email"),
        phone=payload.get("phone"),
        numbers=payload.get("numbers"),
        qty=payload.get("qty"),
        total=payload.get("total"),
        image=payload.get("image"),
    )
    return _ok(orderId=order_id)


@api_bp.route("/orders/pending", methods=["GET"])
def pending_orders():
    return _ok(orders=_orders().list_pending())


@api_bp.route("/orders/confirmed", methods=["GET"])
def confirmed_orders():
    return _ok(orders=_orders().list_confirmed())


@api_bp.route("/orders/<order_id>/confirm", methods=["POST"])
def confirm_order(order_id: str):
    result = _orders().confirm(order_id)
    return _ok(**result)


@api_bp.route("/orders/<order_id>/reject", methods=["POST"])
def reject_order(order_id: str):
    _orders().reject(order_id)
    return _ok()


@api_bp.route("/winner/<number>", methods=["GET"])
def find_winner(number: str):
    return _ok(**_orders().find_by_number(number))


# ---------------------------------------------------------------------------
# Backup, stats, reset
# ---------------------------------------------------------------------------

@api_bp.route("/backup/download", methods=["GET"])
def download_backup():
    backups = _backups()
    document = backups.export_full()
    filename = backups.export_filename()
    return Response(
        json.dumps(document, ensure_ascii=False, indent=2, default=str),
        mimetype="application/json",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@api_bp.route("/stats", methods=["GET"])
def stats():
    return _ok(stats=_stats().get_stats())


@api_bp.route("/reset", methods=["POST"])
def reset():
    _settings().reset_raffle()
    return _ok()
