from __future__ import annotations

import calendar
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from ..core.enums import DayStatus, Mark, Weekday
from ..core.exceptions import IncompleteAttendance, ValidationError
from ..timetable.model import PeriodSlot
from ..timetable.service import TimetableService
from .ledger import AttendanceLedger
from .model import AttendanceRecord, SlotKey

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PeriodRow:
    key: SlotKey
    slot: PeriodSlot
    mark: Optional[Mark] = None


@dataclass(frozen=True)
class DayView:
    """What the attendance screen shows for one date."""

    day: date
    weekday: Weekday
    is_holiday: bool = False
    holiday_reason: Optional[str] = None
    rows: list[PeriodRow] = field(default_factory=list)


@dataclass(frozen=True)
class StaleSlots:
    """Mismatch between recorded slot ids and the slots the timetable resolves today."""

    orphaned: frozenset[SlotKey]  # recorded, no longer resolvable
    unrecorded: frozenset[SlotKey]  # resolvable, never recorded
    unreadable: frozenset[str] = frozenset()  # recorded under ids outside the slot-key format

    @property
    def is_stale(self) -> bool:
        return bool(self.orphaned or self.unrecorded or self.unreadable)


class AttendanceService:
    def __init__(self, ledger: AttendanceLedger, timetable: TimetableService):
        self._ledger = ledger
        self._timetable = timetable

    def _slot_keys(self, day: date) -> dict[SlotKey, PeriodSlot]:
        return {SlotKey.for_period(day, s.period_index): s for s in self._timetable.slots_for_date(day)}

    def periods_for_date(self, day: date) -> DayView:
        weekday = Weekday.of(day)
        record = self._ledger.get(day)
        if record and record.is_holiday:
            return DayView(day=day, weekday=weekday, is_holiday=True, holiday_reason=record.holiday_reason)

        recorded = record.periods if record else {}
        rows = [PeriodRow(key=k, slot=s, mark=recorded.get(k)) for k, s in self._slot_keys(day).items()]
        return DayView(day=day, weekday=weekday, rows=rows)

    def submit_day(self, day: date, marks: Mapping[Any, Any]) -> AttendanceRecord:
        """Save the marks of one date, replacing whatever was recorded before.

        Every period the timetable currently resolves for the date must be marked.
        """
        parsed: dict[SlotKey, Mark] = {}
        for raw_key, raw_mark in marks.items():
            key = raw_key if isinstance(raw_key, SlotKey) else SlotKey.decode(str(raw_key))
            if key is None or key.day != day:
                raise ValidationError(f"Unknown period {raw_key!r} for {day.isoformat()}")
            try:
                parsed[key] = Mark(raw_mark)
            except ValueError:
                raise ValidationError(f"Mark must be present or absent, got {raw_mark!r}") from None

        expected = self._slot_keys(day)
        missing = [k for k in expected if k not in parsed]
        if missing:
            raise IncompleteAttendance(
                "Please mark all periods before saving",
                {k.encode(): "Not marked" for k in missing},
            )

        record = AttendanceRecord.marks(day, parsed)
        self._ledger.upsert(record)
        return record

    def mark_holiday(self, day: date, reason: Optional[str] = None) -> AttendanceRecord:
        return self._ledger.mark_holiday(day, reason)

    def unmark_holiday(self, day: date) -> bool:
        return self._ledger.unmark_holiday(day)

    def stale_slots(self, day: date) -> StaleSlots:
        record = self._ledger.get(day)
        if not record or record.is_holiday:
            return StaleSlots(orphaned=frozenset(), unrecorded=frozenset())

        recorded = set(record.periods)
        resolved = set(self._slot_keys(day))
        result = StaleSlots(
            orphaned=frozenset(recorded - resolved),
            unrecorded=frozenset(resolved - recorded),
            unreadable=frozenset(record.extra_periods),
        )
        if result.is_stale:
            logger.info(
                "timetable changed since %s was recorded (%s orphaned, %s unrecorded, %s unreadable)",
                day.isoformat(),
                len(result.orphaned),
                len(result.unrecorded),
                len(result.unreadable),
            )
        return result

    @staticmethod
    def status_of(record: Optional[AttendanceRecord]) -> DayStatus:
        if record is None:
            return DayStatus.NONE
        if record.is_holiday:
            return DayStatus.HOLIDAY

        marks = set(record.all_marks())
        if not marks:
            return DayStatus.NONE
        if marks == {Mark.PRESENT}:
            return DayStatus.PRESENT
        if marks == {Mark.ABSENT}:
            return DayStatus.ABSENT
        return DayStatus.PARTIAL

    def day_status(self, day: date) -> DayStatus:
        return self.status_of(self._ledger.get(day))

    def month_overview(self, year: int, month: int) -> dict[date, DayStatus]:
        by_day = {r.day: r for r in self._ledger.all() if r.day.year == year and r.day.month == month}
        _, days_in_month = calendar.monthrange(year, month)
        return {
            date(year, month, d): self.status_of(by_day.get(date(year, month, d)))
            for d in range(1, days_in_month + 1)
        }
