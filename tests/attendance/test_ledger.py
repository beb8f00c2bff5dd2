from __future__ import annotations

import json
from datetime import date

from src.class_attendance.class_attendance.attendance.ledger import AttendanceLedger
from src.class_attendance.class_attendance.attendance.model import AttendanceRecord, SlotKey
from src.class_attendance.class_attendance.attendance.service import AttendanceService
from src.class_attendance.class_attendance.core.constants import LOCAL_KEY_ATTENDANCE
from src.class_attendance.class_attendance.core.enums import DayStatus, Mark, Weekday
from src.class_attendance.class_attendance.settings.model import ScheduleConfig
from src.class_attendance.class_attendance.stats.aggregator import StatsAggregator
from src.class_attendance.class_attendance.storage.local_store import InMemoryKeyValueStore
from src.class_attendance.class_attendance.storage.repository import LocalAggregateRepository
from src.class_attendance.class_attendance.subjects.model import Subject, SubjectRegistry
from src.class_attendance.class_attendance.timetable.model import ClassAssignment

MON = date(2026, 1, 5)
TUE = date(2026, 1, 6)


def _ledger() -> AttendanceLedger:
    return AttendanceLedger(LocalAggregateRepository(InMemoryKeyValueStore()))


def _record(day: date, *marks: Mark) -> AttendanceRecord:
    return AttendanceRecord.marks(day, {SlotKey.for_period(day, i + 1): m for i, m in enumerate(marks)})


def test_upsert_replaces_whole_record():
    ledger = _ledger()
    ledger.upsert(_record(MON, Mark.PRESENT, Mark.PRESENT, Mark.ABSENT))
    ledger.upsert(_record(MON, Mark.ABSENT))

    assert len(ledger.all()) == 1
    assert list(ledger.get(MON).periods.values()) == [Mark.ABSENT]


def test_writing_same_record_twice_is_idempotent():
    once, twice = _ledger(), _ledger()
    rec = _record(MON, Mark.PRESENT, Mark.ABSENT)

    once.upsert(rec)
    twice.upsert(rec)
    twice.upsert(rec)

    agg = StatsAggregator()
    assert agg.overall(once.all()) == agg.overall(twice.all())
    assert len(twice.all()) == 1


def test_mark_holiday_discards_periods():
    ledger = _ledger()
    ledger.upsert(_record(MON, Mark.PRESENT))
    ledger.mark_holiday(MON, "Diwali")

    rec = ledger.get(MON)
    assert rec.is_holiday
    assert rec.holiday_reason == "Diwali"
    assert dict(rec.periods) == {}


def test_mark_holiday_default_reason():
    ledger = _ledger()
    assert ledger.mark_holiday(TUE).holiday_reason == "Holiday"
    assert ledger.mark_holiday(TUE, "   ").holiday_reason == "Holiday"


def test_holiday_round_trip_leaves_no_record():
    ledger = _ledger()
    ledger.upsert(_record(MON, Mark.PRESENT, Mark.ABSENT))
    ledger.upsert(_record(TUE, Mark.PRESENT))

    ledger.mark_holiday(MON)
    assert ledger.unmark_holiday(MON) is True

    assert ledger.get(MON) is None
    assert [r.day for r in ledger.all()] == [TUE]


def test_unmark_without_record():
    assert _ledger().unmark_holiday(MON) is False


def test_ids_outside_slot_key_format_are_kept_and_counted():
    doc = [{"date": "2026-01-05", "isHoliday": False, "periods": {"p1-0": "present", "p1-1": "absent"}}]
    store = InMemoryKeyValueStore({LOCAL_KEY_ATTENDANCE: json.dumps(doc)})
    ledger = AttendanceLedger(LocalAggregateRepository(store))

    stats = StatsAggregator().overall(ledger.all())
    assert (stats.total, stats.present, stats.absent) == (2, 1, 1)

    # Writing another date rewrites the whole list; the stored ids survive it.
    ledger.upsert(_record(TUE, Mark.PRESENT))

    saved = {r["date"]: r["periods"] for r in json.loads(store.get(LOCAL_KEY_ATTENDANCE))}
    assert saved["2026-01-05"] == {"p1-0": "present", "p1-1": "absent"}
    assert saved["2026-01-06"] == {"2026-01-06-Tue-P1": "present"}
    assert StatsAggregator().overall(ledger.all()).total == 3


def test_ids_outside_slot_key_format_map_to_no_subject():
    record = AttendanceRecord.marks(MON, {SlotKey.for_period(MON, 1): Mark.PRESENT}, {"p1-0": Mark.ABSENT})
    weekly = {Weekday.MON: [ClassAssignment("A", Weekday.MON, "S1", 1, 1)]}

    subjects = StatsAggregator().per_subject(
        [record],
        weekly,
        SubjectRegistry([Subject("S1", "Maths")]),
        ScheduleConfig(per_weekday={Weekday.MON: 2}),
    )

    assert [(s.subject_name, s.stats.total) for s in subjects] == [("Maths", 1)]
    assert AttendanceService.status_of(record) is DayStatus.PARTIAL
