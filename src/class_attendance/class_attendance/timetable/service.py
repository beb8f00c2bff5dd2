from __future__ import annotations

import dataclasses
import uuid
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.validators import parse_int
from ..core.enums import Weekday
from ..core.exceptions import DayHasNoPeriods, ScheduleConflictError, ValidationError
from ..storage.repository import AggregateStore
from ..subjects.model import SubjectRegistry
from .model import ClassAssignment, PeriodSlot
from .resolver import OccupancyResolver
from .validator import ConflictError, ConflictValidator


def new_assignment_id() -> str:
    return f"class-{uuid.uuid4().hex[:12]}"


def _unique_ids(entries: list[ClassAssignment]) -> list[ClassAssignment]:
    """Give a fresh id to every entry whose id was already used earlier in the list."""
    seen: set[str] = set()
    out: list[ClassAssignment] = []
    for e in entries:
        if e.assignment_id in seen:
            e = dataclasses.replace(e, assignment_id=new_assignment_id())
        seen.add(e.assignment_id)
        out.append(e)
    return out


class TimetableService:
    def __init__(
        self,
        store: AggregateStore,
        *,
        validator: Optional[ConflictValidator] = None,
        resolver: Optional[OccupancyResolver] = None,
    ):
        self._store = store
        self._validator = validator or ConflictValidator()
        self._resolver = resolver or OccupancyResolver()

    def get_day(self, weekday: Weekday) -> list[ClassAssignment]:
        return list(self._store.load_timetable().get(weekday, ()))

    def total_periods(self, weekday: Weekday) -> int:
        return self._store.load_settings().total_periods(weekday)

    def build_entry(self, weekday: Weekday, raw: Mapping[str, Any]) -> ClassAssignment:
        """Turn editor input into an assignment; numbers must at least be integers."""
        return ClassAssignment(
            assignment_id=str(raw.get("id") or "").strip() or new_assignment_id(),
            weekday=weekday,
            subject_id=str(raw.get("subjectId") or "").strip(),
            start_period=parse_int(raw.get("startPeriod", 0), "Start period"),
            duration=parse_int(raw.get("duration", 1), "Duration"),
        )

    def validate_candidate(
        self,
        weekday: Weekday,
        candidate: ClassAssignment,
        entries: Optional[Sequence[ClassAssignment]] = None,
    ) -> Optional[ConflictError]:
        """Live check of one entry against the others being edited (or the saved day)."""
        others = self.get_day(weekday) if entries is None else entries
        return self._validator.validate(candidate, others, self.total_periods(weekday))

    def save_day(self, weekday: Weekday, entries: Iterable[ClassAssignment]) -> list[ClassAssignment]:
        """Authoritative save of a weekday: any invalid entry blocks the whole save."""
        total = self.total_periods(weekday)
        if total == 0:
            raise DayHasNoPeriods("This day has 0 periods (holiday). Update Settings to add periods.")

        entries = _unique_ids([e for e in entries if e.weekday == weekday])
        errors = self._validator.validate_day(entries, total)
        if errors:
            first = next(iter(errors.values()))
            raise ScheduleConflictError(
                first.code,
                first.message,
                {entry_id: err.message for entry_id, err in errors.items()},
            )

        weekly = {day: list(items) for day, items in self._store.load_timetable().items()}
        weekly[weekday] = entries
        self._store.save_timetable(weekly)
        return entries

    def add_class(self, weekday: Weekday, *, subject_id: str, start_period: int, duration: int = 1) -> ClassAssignment:
        if self.total_periods(weekday) == 0:
            raise DayHasNoPeriods("This day has 0 periods (holiday). Update Settings to add periods.")
        if self.is_day_full(weekday):
            raise ValidationError("All periods for this day are filled")

        candidate = ClassAssignment(
            assignment_id=new_assignment_id(),
            weekday=weekday,
            subject_id=subject_id,
            start_period=int(start_period),
            duration=int(duration),
        )
        err = self.validate_candidate(weekday, candidate)
        if err:
            raise err.to_exception()

        self.save_day(weekday, [*self.get_day(weekday), candidate])
        return candidate

    def remove_class(self, weekday: Weekday, assignment_id: str) -> None:
        entries = self.get_day(weekday)
        remaining = [e for e in entries if e.assignment_id != assignment_id]
        if len(remaining) == len(entries):
            raise ValidationError("Class not found")

        weekly = {day: list(items) for day, items in self._store.load_timetable().items()}
        weekly[weekday] = remaining
        self._store.save_timetable(weekly)

    def revalidate_day(self, weekday: Weekday) -> dict[str, str]:
        """Saved entries that no longer fit after a settings change (non-fatal)."""
        entries = self.get_day(weekday)
        total = self.total_periods(weekday)
        if total == 0 or not entries:
            return {}
        return {entry_id: err.message for entry_id, err in self._validator.validate_day(entries, total).items()}

    def occupied_count(self, weekday: Weekday, entries: Optional[Sequence[ClassAssignment]] = None) -> int:
        entries = self.get_day(weekday) if entries is None else entries
        occupied: set[int] = set()
        for e in entries:
            occupied.update(range(e.start_period, e.end_period + 1))
        return len(occupied)

    def is_day_full(self, weekday: Weekday) -> bool:
        total = self.total_periods(weekday)
        return total > 0 and self.occupied_count(weekday) >= total

    def is_setup_complete(self) -> bool:
        """Some weekday has periods and at least one subject exists."""
        return self._store.load_settings().has_any_periods() and len(self._store.load_subjects()) > 0

    def slots_for_weekday(self, weekday: Weekday, subjects: Optional[SubjectRegistry] = None) -> list[PeriodSlot]:
        return self._resolver.resolve(
            total_periods=self.total_periods(weekday),
            assignments=self.get_day(weekday),
            subjects=subjects or SubjectRegistry(self._store.load_subjects()),
        )

    def slots_for_date(self, day: date) -> list[PeriodSlot]:
        return self.slots_for_weekday(Weekday.of(day))
