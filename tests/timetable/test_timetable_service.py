from __future__ import annotations

from datetime import date

import pytest

from src.class_attendance.class_attendance.core.enums import Weekday
from src.class_attendance.class_attendance.core.exceptions import DayHasNoPeriods, ScheduleConflictError, ValidationError
from src.class_attendance.class_attendance.settings.model import ScheduleConfig
from src.class_attendance.class_attendance.storage.local_store import InMemoryKeyValueStore
from src.class_attendance.class_attendance.storage.repository import LocalAggregateRepository
from src.class_attendance.class_attendance.subjects.model import Subject
from src.class_attendance.class_attendance.timetable.model import ClassAssignment
from src.class_attendance.class_attendance.timetable.service import TimetableService
from src.class_attendance.class_attendance.timetable.validator import ConflictCode


def _service(mon: int = 6, tue: int = 0, subjects=None):
    repo = LocalAggregateRepository(InMemoryKeyValueStore())
    repo.save_settings(ScheduleConfig(per_weekday={Weekday.MON: mon, Weekday.TUE: tue}))
    repo.save_subjects(subjects if subjects is not None else [Subject("S1", "Maths"), Subject("S2", "Physics")])
    return repo, TimetableService(repo)


def _a(aid: str, subject: str, start: int, duration: int, day: Weekday = Weekday.MON) -> ClassAssignment:
    return ClassAssignment(assignment_id=aid, weekday=day, subject_id=subject, start_period=start, duration=duration)


def test_save_day_persists_entries():
    repo, svc = _service()
    svc.save_day(Weekday.MON, [_a("A", "S1", 1, 2), _a("B", "S2", 4, 1)])

    assert [e.assignment_id for e in repo.load_timetable()[Weekday.MON]] == ["A", "B"]
    assert svc.occupied_count(Weekday.MON) == 3


def test_save_day_blocked_by_any_conflict():
    repo, svc = _service()
    svc.save_day(Weekday.MON, [_a("A", "S1", 1, 2)])

    with pytest.raises(ScheduleConflictError) as exc:
        svc.save_day(Weekday.MON, [_a("A", "S1", 1, 2), _a("C", "S2", 2, 2)])

    assert exc.value.code == ConflictCode.OVERLAP_CONFLICT
    assert set(exc.value.errors) == {"A", "C"}
    # Nothing written.
    assert [e.assignment_id for e in repo.load_timetable()[Weekday.MON]] == ["A"]


def test_zero_period_day_refuses_saves():
    _, svc = _service()
    with pytest.raises(DayHasNoPeriods):
        svc.save_day(Weekday.TUE, [_a("A", "S1", 1, 1, Weekday.TUE)])


def test_add_class_validates_against_saved_day():
    _, svc = _service()
    svc.add_class(Weekday.MON, subject_id="S1", start_period=1, duration=2)
    svc.add_class(Weekday.MON, subject_id="S2", start_period=4, duration=1)

    with pytest.raises(ScheduleConflictError) as exc:
        svc.add_class(Weekday.MON, subject_id="S2", start_period=3, duration=2)

    assert "4–4" in str(exc.value)


def test_full_day_rejects_new_class():
    _, svc = _service(mon=2)
    svc.add_class(Weekday.MON, subject_id="S1", start_period=1, duration=2)

    assert svc.is_day_full(Weekday.MON)
    with pytest.raises(ValidationError):
        svc.add_class(Weekday.MON, subject_id="S2", start_period=1, duration=1)


def test_remove_class():
    _, svc = _service()
    a = svc.add_class(Weekday.MON, subject_id="S1", start_period=1, duration=1)
    svc.remove_class(Weekday.MON, a.assignment_id)

    assert svc.get_day(Weekday.MON) == []
    with pytest.raises(ValidationError):
        svc.remove_class(Weekday.MON, a.assignment_id)


def test_revalidate_day_after_settings_shrink():
    repo, svc = _service(mon=6)
    svc.save_day(Weekday.MON, [_a("A", "S1", 1, 2), _a("B", "S2", 4, 2)])

    repo.save_settings(ScheduleConfig(per_weekday={Weekday.MON: 4}))

    warnings = svc.revalidate_day(Weekday.MON)
    assert list(warnings) == ["B"]
    assert "max period 4" in warnings["B"]
    # Entries are not migrated.
    assert len(svc.get_day(Weekday.MON)) == 2


def test_setup_complete_needs_periods_and_subjects():
    _, svc = _service(mon=0, subjects=[Subject("S1", "Maths")])
    assert not svc.is_setup_complete()

    _, svc = _service(mon=3, subjects=[])
    assert not svc.is_setup_complete()

    _, svc = _service(mon=3)
    assert svc.is_setup_complete()


def test_slots_for_date_uses_weekday_template():
    _, svc = _service()
    svc.save_day(Weekday.MON, [_a("A", "S1", 2, 1)])

    # 2026-01-05 and 2026-01-12 are Mondays, 2026-01-06 a Tuesday.
    assert [s.period_index for s in svc.slots_for_date(date(2026, 1, 5))] == [2]
    assert [s.period_index for s in svc.slots_for_date(date(2026, 1, 12))] == [2]
    assert svc.slots_for_date(date(2026, 1, 6)) == []


def test_build_entry_from_editor_input():
    _, svc = _service()
    entry = svc.build_entry(Weekday.MON, {"subjectId": "S1", "startPeriod": "3", "duration": 2})

    assert entry.assignment_id.startswith("class-")
    assert (entry.start_period, entry.end_period) == (3, 4)

    with pytest.raises(ValidationError):
        svc.build_entry(Weekday.MON, {"subjectId": "S1", "startPeriod": "three"})


def test_entries_sharing_an_id_are_checked_against_each_other():
    repo, svc = _service()

    with pytest.raises(ScheduleConflictError) as exc:
        svc.save_day(Weekday.MON, [_a("c1", "S1", 1, 3), _a("c1", "S2", 2, 3)])

    assert exc.value.code is ConflictCode.OVERLAP_CONFLICT
    assert repo.load_timetable() == {}


def test_repeated_id_gets_a_fresh_one_on_save():
    repo, svc = _service()

    saved = svc.save_day(Weekday.MON, [_a("c1", "S1", 1, 2), _a("c1", "S2", 4, 1)])

    ids = [e.assignment_id for e in saved]
    assert ids[0] == "c1"
    assert ids[1] != "c1"
    assert [e.assignment_id for e in repo.load_timetable()[Weekday.MON]] == ids

    svc.remove_class(Weekday.MON, "c1")
    assert [e.start_period for e in svc.get_day(Weekday.MON)] == [4]
