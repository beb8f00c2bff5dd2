from __future__ import annotations

from flask import jsonify

from ..core.exceptions import DomainError, NotAuthenticatedError, ScheduleConflictError, ValidationError


def json_error(error: DomainError):
    """Render a business-rule failure as ``{"ok": false, "message", "errors"?, "code"?}``."""
    body: dict = {"ok": False, "message": str(error)}
    if isinstance(error, ValidationError) and error.errors:
        body["errors"] = error.errors
    if isinstance(error, ScheduleConflictError):
        body["code"] = error.code.value
    status = 401 if isinstance(error, NotAuthenticatedError) else 400
    return jsonify(body), status


def server_error(message: str):
    return jsonify({"ok": False, "message": message}), 500
