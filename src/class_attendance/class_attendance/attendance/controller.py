from __future__ import annotations

import logging
from datetime import date

from flask import Flask, abort, jsonify, request

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.http import json_error, server_error
from ..container import Container
from ..core.exceptions import DomainError
from .service import DayView

logger = logging.getLogger(__name__)


def _day_view_to_dict(view: DayView) -> dict:
    return {
        "date": format_iso_date(view.day),
        "weekday": view.weekday.value,
        "isHoliday": view.is_holiday,
        "holidayReason": view.holiday_reason,
        "periods": [
            {
                "slotId": row.key.encode(),
                "periodIndex": row.slot.period_index,
                "subjectId": row.slot.subject_id,
                "subjectName": row.slot.subject_name,
                "status": row.mark.value if row.mark else None,
            }
            for row in view.rows
        ],
    }


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    def _parse_date(value: str) -> date:
        try:
            return parse_iso_date(value)
        except ValueError:
            abort(404)

    @app.route("/api/attendance/<day>", methods=["GET"], endpoint="attendance_day")
    def attendance_day(day: str):
        d = _parse_date(day)
        body = _day_view_to_dict(svc.periods_for_date(d))
        stale = svc.stale_slots(d)
        if stale.is_stale:
            body["notice"] = "Your timetable changed after this day was recorded; some periods may not match."
        return jsonify(body)

    @app.route("/api/attendance/<day>", methods=["PUT"], endpoint="attendance_submit")
    def attendance_submit(day: str):
        d = _parse_date(day)
        payload = request.get_json(silent=True) or {}
        try:
            svc.submit_day(d, payload.get("periods") or {})
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("saving attendance for %s failed", day)
            return server_error("Failed to save attendance. Please try again.")
        return jsonify({"ok": True, "message": "Attendance saved! Overall stats updated."})

    @app.route("/api/attendance/<day>/holiday", methods=["POST"], endpoint="attendance_mark_holiday")
    def attendance_mark_holiday(day: str):
        d = _parse_date(day)
        payload = request.get_json(silent=True) or {}
        record = svc.mark_holiday(d, payload.get("reason"))
        return jsonify({"ok": True, "holidayReason": record.holiday_reason})

    @app.route("/api/attendance/<day>/holiday", methods=["DELETE"], endpoint="attendance_unmark_holiday")
    def attendance_unmark_holiday(day: str):
        removed = svc.unmark_holiday(_parse_date(day))
        return jsonify({"ok": True, "removed": removed})

    @app.route("/api/calendar/<int:year>/<int:month>", methods=["GET"], endpoint="attendance_calendar")
    def attendance_calendar(year: int, month: int):
        if not 1 <= month <= 12:
            abort(404)
        overview = svc.month_overview(year, month)
        return jsonify({format_iso_date(d): status.value for d, status in overview.items()})
