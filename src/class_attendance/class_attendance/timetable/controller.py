from __future__ import annotations

import logging

from flask import Flask, abort, jsonify, request

from ..common.http import json_error, server_error
from ..container import Container
from ..core.enums import Weekday
from ..core.exceptions import DomainError
from .model import ClassAssignment, PeriodSlot

logger = logging.getLogger(__name__)


def _entry_to_dict(a: ClassAssignment) -> dict:
    return {
        "id": a.assignment_id,
        "subjectId": a.subject_id,
        "startPeriod": a.start_period,
        "duration": a.duration,
        "endPeriod": a.end_period,
    }


def _slot_to_dict(s: PeriodSlot) -> dict:
    return {"periodIndex": s.period_index, "subjectId": s.subject_id, "subjectName": s.subject_name}


def register(app: Flask, container: Container) -> None:
    svc = container.timetable_service

    def _weekday(value: str) -> Weekday:
        try:
            return Weekday(value.capitalize())
        except ValueError:
            abort(404)

    @app.route("/api/setup", methods=["GET"], endpoint="setup_status")
    def setup_status():
        return jsonify({"complete": svc.is_setup_complete()})

    @app.route("/api/timetable/<day>", methods=["GET"], endpoint="timetable_day")
    def timetable_day(day: str):
        weekday = _weekday(day)
        entries = svc.get_day(weekday)
        return jsonify(
            {
                "day": weekday.value,
                "totalPeriods": svc.total_periods(weekday),
                "entries": [_entry_to_dict(e) for e in entries],
                "slots": [_slot_to_dict(s) for s in svc.slots_for_weekday(weekday)],
                "occupied": svc.occupied_count(weekday, entries),
                "isFull": svc.is_day_full(weekday),
                "warnings": svc.revalidate_day(weekday),
            }
        )

    @app.route("/api/timetable/<day>", methods=["PUT"], endpoint="timetable_save")
    def timetable_save(day: str):
        weekday = _weekday(day)
        payload = request.get_json(silent=True) or {}
        try:
            entries = [svc.build_entry(weekday, raw) for raw in payload.get("entries") or []]
            saved = svc.save_day(weekday, entries)
        except DomainError as e:
            return json_error(e)
        except Exception:
            logger.exception("saving timetable for %s failed", weekday.value)
            return server_error("Failed to save timetable")
        return jsonify({"ok": True, "entries": [_entry_to_dict(e) for e in saved]})

    @app.route("/api/timetable/<day>/validate", methods=["POST"], endpoint="timetable_validate")
    def timetable_validate(day: str):
        weekday = _weekday(day)
        payload = request.get_json(silent=True) or {}
        try:
            candidate = svc.build_entry(weekday, payload.get("entry") or {})
            others = payload.get("entries")
            entries = None if others is None else [svc.build_entry(weekday, raw) for raw in others]
        except DomainError as e:
            return json_error(e)

        err = svc.validate_candidate(weekday, candidate, entries)
        if err is None:
            return jsonify({"ok": True})
        return jsonify({"ok": False, "code": err.code.value, "message": err.message})

    @app.route("/api/timetable/<day>/<assignment_id>", methods=["DELETE"], endpoint="timetable_remove")
    def timetable_remove(day: str, assignment_id: str):
        try:
            svc.remove_class(_weekday(day), assignment_id)
        except DomainError as e:
            return json_error(e)
        return jsonify({"ok": True})
