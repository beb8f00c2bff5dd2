from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.http import json_error, server_error
from ..container import Container
from ..core.enums import Weekday
from ..core.exceptions import DomainError
from ..storage.codec import settings_to_doc

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/settings", methods=["GET"], endpoint="settings_get")
    def settings_get():
        return jsonify(settings_to_doc(container.settings_service.get()))

    @app.route("/api/settings", methods=["PUT"], endpoint="settings_put")
    def settings_put():
        payload = request.get_json(silent=True) or {}
        days = payload.get("perWeekday") or {}
        per_weekday = {k: (v.get("totalPeriods") if isinstance(v, dict) else v) for k, v in days.items()}
        try:
            config = container.settings_service.update(
                period_duration_minutes=payload.get("periodDurationMinutes"),
                per_weekday=per_weekday,
            )
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("saving settings failed")
            return server_error("Failed to save settings")

        # Classes that no longer fit are reported, not removed.
        warnings = {}
        for day in Weekday:
            errors = container.timetable_service.revalidate_day(day)
            if errors:
                warnings[day.value] = errors

        return jsonify({"ok": True, "settings": settings_to_doc(config), "timetableWarnings": warnings})
