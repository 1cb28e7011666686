"""HTTP blueprints for the live-ops console."""

from __future__ import annotations

from typing import Any, Mapping, Tuple

from flask import Response, current_app, jsonify, request

LOAD_FAILED = "Có lỗi xảy ra khi tải dữ liệu"
SAVE_FAILED = "Có lỗi xảy ra khi lưu dữ liệu"


def submitted_data() -> Mapping[str, Any]:
    """Return the JSON body, falling back to form fields."""

    payload = request.get_json(silent=True)
    if isinstance(payload, Mapping):
        return payload
    return request.form


def store_failure(message: str) -> Tuple[Response, int]:
    """Log the active record-store exception and answer with ``message``."""

    current_app.logger.exception("Record store call failed: %s", message)
    return jsonify({"error": message}), 503


def validation_failure(errors) -> Tuple[Response, int]:
    return jsonify({"errors": list(errors)}), 400
