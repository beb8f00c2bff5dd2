"""Conversion between domain objects and the persisted aggregate documents.

Documents are plain JSON-compatible values, identical for the local and the
remote store:

- settings:   {"periodDurationMinutes": int, "perWeekday": {"Mon": {"totalPeriods": int}, ...}}
- subjects:   [{"id", "name", "type"}]
- timetable:  {"Mon": [{"id", "subjectId", "startPeriod", "duration"}], ...}
- attendance: [{"date", "isHoliday", "holidayReason"?, "periods"?: {slotId: "present"|"absent"}}]

Decoders raise ``ValueError``/``TypeError``/``KeyError`` on a document whose
overall shape is wrong; callers decide on the fallback. Single bad entries
inside an otherwise valid ledger are skipped with a warning; period ids that
are not in the slot-key format are kept as given (see ``AttendanceRecord``).
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Sequence

from ..attendance.model import AttendanceRecord, SlotKey
from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..core.constants import DEFAULT_HOLIDAY_REASON, DEFAULT_PERIOD_DURATION_MINUTES
from ..core.enums import Mark, SubjectType, Weekday
from ..settings.model import ScheduleConfig
from ..subjects.model import Subject
from ..timetable.model import ClassAssignment, WeeklyAssignments

logger = logging.getLogger(__name__)


def _require(value: Any, kind: type, what: str):
    if not isinstance(value, kind):
        raise TypeError(f"{what} must be a {kind.__name__}, got {type(value).__name__}")
    return value


# -- settings -----------------------------------------------------------------

def settings_to_doc(config: ScheduleConfig) -> dict:
    return {
        "periodDurationMinutes": int(config.period_duration_minutes),
        "perWeekday": {day.value: {"totalPeriods": config.total_periods(day)} for day in Weekday},
    }


def settings_from_doc(doc: Any) -> ScheduleConfig:
    _require(doc, dict, "settings")
    duration = int(doc.get("periodDurationMinutes") or DEFAULT_PERIOD_DURATION_MINUTES)
    # "days" is the key older clients wrote.
    days = _require(doc.get("perWeekday", doc.get("days")) or {}, dict, "perWeekday")

    per_weekday = {day: 0 for day in Weekday}
    for key, value in days.items():
        try:
            day = Weekday(key)
        except ValueError:
            continue
        total = value.get("totalPeriods", 0) if isinstance(value, dict) else value
        per_weekday[day] = max(0, int(total or 0))

    return ScheduleConfig(period_duration_minutes=duration, per_weekday=per_weekday)


# -- subjects -----------------------------------------------------------------

def subjects_to_doc(subjects: Iterable[Subject]) -> list:
    return [{"id": s.subject_id, "name": s.name, "type": s.subject_type.value} for s in subjects]


def subjects_from_doc(doc: Any) -> list[Subject]:
    out: list[Subject] = []
    for item in _require(doc, list, "subjects"):
        item = _require(item, dict, "subject")
        try:
            subject_type = SubjectType(item.get("type") or SubjectType.THEORY.value)
        except ValueError:
            subject_type = SubjectType.THEORY
        out.append(Subject(subject_id=str(item["id"]), name=str(item.get("name") or ""), subject_type=subject_type))
    return out


# -- timetable ----------------------------------------------------------------

def timetable_to_doc(weekly: WeeklyAssignments) -> dict:
    doc: dict[str, list] = {}
    for day in Weekday:
        entries = weekly.get(day)
        if not entries:
            continue
        doc[day.value] = [
            {
                "id": a.assignment_id,
                "subjectId": a.subject_id,
                "startPeriod": a.start_period,
                "duration": a.duration,
            }
            for a in entries
        ]
    return doc


def timetable_from_doc(doc: Any) -> dict[Weekday, list[ClassAssignment]]:
    weekly: dict[Weekday, list[ClassAssignment]] = {}
    for key, entries in _require(doc, dict, "timetable").items():
        try:
            day = Weekday(key)
        except ValueError:
            continue
        weekly[day] = [
            ClassAssignment(
                assignment_id=str(e["id"]),
                weekday=day,
                subject_id=str(e.get("subjectId") or ""),
                start_period=int(e.get("startPeriod", 1)),
                duration=int(e.get("duration") or 1),
            )
            for e in _require(entries, list, f"timetable[{key}]")
        ]
    return weekly


# -- attendance ---------------------------------------------------------------

def record_to_doc(record: AttendanceRecord) -> dict:
    if record.is_holiday:
        return {
            "date": format_iso_date(record.day),
            "isHoliday": True,
            "holidayReason": record.holiday_reason or DEFAULT_HOLIDAY_REASON,
            "periods": {},
        }
    periods = {key.encode(): mark.value for key, mark in sorted(record.periods.items())}
    periods.update((slot_id, mark.value) for slot_id, mark in record.extra_periods.items())
    return {
        "date": format_iso_date(record.day),
        "isHoliday": False,
        "periods": periods,
    }


def attendance_to_doc(records: Sequence[AttendanceRecord]) -> list:
    return [record_to_doc(r) for r in records]


def _periods_from_doc(raw: Mapping[str, Any], date_s: str) -> tuple[dict[SlotKey, Mark], dict[str, Mark]]:
    periods: dict[SlotKey, Mark] = {}
    extra: dict[str, Mark] = {}
    for slot_id, status in raw.items():
        try:
            mark = Mark(status)
        except ValueError:
            logger.warning("skipping unknown mark %r for %s", status, slot_id)
            continue
        key = SlotKey.decode(slot_id)
        if key is None:
            # Ids from older clients are kept as stored.
            extra[str(slot_id)] = mark
        else:
            periods[key] = mark
    if extra:
        logger.debug("record %s keeps %s period id(s) outside the slot-key format", date_s, len(extra))
    return periods, extra


def attendance_from_doc(doc: Any) -> list[AttendanceRecord]:
    out: list[AttendanceRecord] = []
    for item in _require(doc, list, "attendance"):
        if not isinstance(item, dict):
            logger.warning("skipping non-object attendance entry %r", item)
            continue
        date_s = str(item.get("date") or "")
        try:
            day = parse_iso_date(date_s)
        except ValueError:
            logger.warning("skipping attendance entry with bad date %r", date_s)
            continue

        if item.get("isHoliday"):
            out.append(AttendanceRecord.holiday(day, str(item.get("holidayReason") or DEFAULT_HOLIDAY_REASON)))
        else:
            periods, extra = _periods_from_doc(item.get("periods") or {}, date_s)
            out.append(AttendanceRecord.marks(day, periods, extra))
    return out
