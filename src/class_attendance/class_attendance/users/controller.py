from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.http import json_error, server_error
from ..container import Container
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    sessions = container.session_service

    @app.route("/api/session", methods=["GET"], endpoint="session_get")
    def session_get():
        return jsonify({"uid": sessions.current_uid()})

    @app.route("/api/session", methods=["POST"], endpoint="session_login")
    def session_login():
        payload = request.get_json(silent=True) or {}
        try:
            uid = sessions.sign_in(payload.get("uid") or "")
        except DomainError as e:
            return json_error(e)

        synced = container.background.run(sessions.pull(uid))
        return jsonify({"ok": True, "uid": uid, "synced": synced})

    @app.route("/api/session", methods=["DELETE"], endpoint="session_logout")
    def session_logout():
        sessions.logout()
        return jsonify({"ok": True})

    @app.route("/api/backup", methods=["GET"], endpoint="backup_export")
    def backup_export():
        try:
            data = container.background.run(container.sync.export_all(sessions.require_uid()))
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("backup export failed")
            return server_error("Failed to export data")
        return jsonify(data)

    @app.route("/api/backup", methods=["PUT"], endpoint="backup_import")
    def backup_import():
        payload = request.get_json(silent=True) or {}
        try:
            ok = container.background.run(container.sync.import_all(sessions.require_uid(), payload))
        except DomainError as e:
            return json_error(e)
        return jsonify({"ok": ok})

    @app.route("/api/backup", methods=["DELETE"], endpoint="backup_delete")
    def backup_delete():
        try:
            ok = container.background.run(container.sync.delete_all(sessions.require_uid()))
        except DomainError as e:
            return json_error(e)
        return jsonify({"ok": ok})
