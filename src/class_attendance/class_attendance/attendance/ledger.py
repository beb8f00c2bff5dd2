from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.constants import DEFAULT_HOLIDAY_REASON
from ..storage.repository import AggregateStore
from .model import AttendanceRecord


class AttendanceLedger:
    """One record per calendar date, stored as a single whole list.

    The ledger does not look at the timetable: slot ids are stored as given.
    """

    def __init__(self, store: AggregateStore):
        self._store = store

    def all(self) -> tuple[AttendanceRecord, ...]:
        return tuple(self._store.load_attendance())

    def get(self, day: date) -> Optional[AttendanceRecord]:
        for r in self._store.load_attendance():
            if r.day == day:
                return r
        return None

    def upsert(self, record: AttendanceRecord) -> None:
        """Replace the record for ``record.day`` wholesale, or append it."""
        records = self._store.load_attendance()
        for i, r in enumerate(records):
            if r.day == record.day:
                records[i] = record
                break
        else:
            records.append(record)
        self._store.save_attendance(records)

    def mark_holiday(self, day: date, reason: Optional[str] = None) -> AttendanceRecord:
        """Any marks previously recorded for the date are discarded."""
        record = AttendanceRecord.holiday(day, (reason or "").strip() or DEFAULT_HOLIDAY_REASON)
        self.upsert(record)
        return record

    def unmark_holiday(self, day: date) -> bool:
        """Delete the date's record outright, leaving no record at all."""
        records = self._store.load_attendance()
        remaining = [r for r in records if r.day != day]
        if len(remaining) == len(records):
            return False
        self._store.save_attendance(remaining)
        return True
