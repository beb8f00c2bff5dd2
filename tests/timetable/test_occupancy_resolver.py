from __future__ import annotations

from src.class_attendance.class_attendance.core.enums import Weekday
from src.class_attendance.class_attendance.subjects.model import Subject, SubjectRegistry
from src.class_attendance.class_attendance.timetable.model import ClassAssignment
from src.class_attendance.class_attendance.timetable.resolver import OccupancyResolver

SUBJECTS = SubjectRegistry([Subject("S1", "Maths"), Subject("S2", "Physics")])


def _a(aid: str, subject: str, start: int, duration: int) -> ClassAssignment:
    return ClassAssignment(assignment_id=aid, weekday=Weekday.MON, subject_id=subject, start_period=start, duration=duration)


def test_free_periods_are_not_slots():
    slots = OccupancyResolver().resolve(
        total_periods=6,
        assignments=[_a("A", "S1", 1, 2), _a("B", "S2", 4, 1)],
        subjects=SUBJECTS,
    )

    assert [(s.period_index, s.subject_id) for s in slots] == [(1, "S1"), (2, "S1"), (4, "S2")]
    assert [s.subject_name for s in slots] == ["Maths", "Maths", "Physics"]
    assert [s.assignment_id for s in slots] == ["A", "A", "B"]


def test_output_ascending_regardless_of_input_order():
    slots = OccupancyResolver().resolve(
        total_periods=8,
        assignments=[_a("B", "S2", 6, 2), _a("A", "S1", 2, 1)],
        subjects=SUBJECTS,
    )
    indices = [s.period_index for s in slots]

    assert indices == sorted(set(indices)) == [2, 6, 7]


def test_stale_overlap_last_write_wins():
    slots = OccupancyResolver().resolve(
        total_periods=4,
        assignments=[_a("A", "S1", 1, 3), _a("B", "S2", 3, 2)],
        subjects=SUBJECTS,
    )

    assert [(s.period_index, s.assignment_id) for s in slots] == [(1, "A"), (2, "A"), (3, "B"), (4, "B")]


def test_indices_beyond_day_limit_are_clipped():
    slots = OccupancyResolver().resolve(total_periods=3, assignments=[_a("A", "S1", 2, 4)], subjects=SUBJECTS)
    assert [s.period_index for s in slots] == [2, 3]


def test_zero_period_day_has_no_slots():
    assert OccupancyResolver().resolve(total_periods=0, assignments=[_a("A", "S1", 1, 1)], subjects=SUBJECTS) == []


def test_deleted_subject_resolves_to_unknown():
    slots = OccupancyResolver().resolve(total_periods=2, assignments=[_a("A", "gone", 1, 1)], subjects=SUBJECTS)
    assert slots[0].subject_id == "gone"
    assert slots[0].subject_name == "Unknown"
