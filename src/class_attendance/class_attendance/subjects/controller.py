from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.http import json_error, server_error
from ..container import Container
from ..core.exceptions import DomainError
from ..storage.codec import subjects_to_doc

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/subjects", methods=["GET"], endpoint="subjects_list")
    def subjects_list():
        return jsonify(subjects_to_doc(container.subject_service.list_all()))

    @app.route("/api/subjects", methods=["PUT"], endpoint="subjects_save")
    def subjects_save():
        payload = request.get_json(silent=True)
        items = payload if isinstance(payload, list) else (payload or {}).get("subjects") or []
        try:
            subjects = container.subject_service.save(items)
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("saving subjects failed")
            return server_error("Failed to save subjects")
        return jsonify({"ok": True, "subjects": subjects_to_doc(subjects)})

    @app.route("/api/subjects", methods=["POST"], endpoint="subjects_add")
    def subjects_add():
        payload = request.get_json(silent=True) or {}
        try:
            subject = container.subject_service.add(payload.get("name") or "", payload.get("type") or "theory")
        except DomainError as e:
            return json_error(e)
        return jsonify({"ok": True, "subject": subjects_to_doc([subject])[0]}), 201

    @app.route("/api/subjects/<subject_id>", methods=["DELETE"], endpoint="subjects_delete")
    def subjects_delete(subject_id: str):
        try:
            container.subject_service.delete(subject_id)
        except DomainError as e:
            return json_error(e)
        return jsonify({"ok": True})
