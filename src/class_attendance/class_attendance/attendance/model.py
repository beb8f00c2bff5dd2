from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Mapping, Optional

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..core.enums import Mark, Weekday

_SLOT_ID_RE = re.compile(r"^(\d{4}-\d{2}-\d{2})-(Mon|Tue|Wed|Thu|Fri|Sat|Sun)-P(\d+)$")


@dataclass(frozen=True, order=True)
class SlotKey:
    """Identity of one conducted period on one calendar date.

    The stored string form is ``YYYY-MM-DD-<Day>-P<n>``; ``encode``/``decode`` are
    the only places that know about it. The assignment is not part
    of the key, so editing the timetable can orphan previously recorded slots.
    """

    day: date
    weekday: Weekday
    period_index: int

    @classmethod
    def for_period(cls, day: date, period_index: int) -> "SlotKey":
        return cls(day=day, weekday=Weekday.of(day), period_index=int(period_index))

    def encode(self) -> str:
        return f"{format_iso_date(self.day)}-{self.weekday.value}-P{self.period_index}"

    @classmethod
    def decode(cls, value: str) -> Optional["SlotKey"]:
        """Parse a stored slot id; returns None for anything malformed."""
        m = _SLOT_ID_RE.match(value or "")
        if not m:
            return None
        try:
            day = parse_iso_date(m.group(1))
        except ValueError:
            return None
        return cls(day=day, weekday=Weekday(m.group(2)), period_index=int(m.group(3)))


@dataclass(frozen=True)
class AttendanceRecord:
    """One ledger entry per calendar date: a holiday or a set of period marks.

    ``extra_periods`` holds marks stored under ids that are not in the slot-key
    format (written by older clients). They are kept verbatim and written back
    unchanged; they count towards the overall figures but map to no period.
    """

    day: date
    is_holiday: bool = False
    holiday_reason: Optional[str] = None
    periods: Mapping[SlotKey, Mark] = field(default_factory=dict)
    extra_periods: Mapping[str, Mark] = field(default_factory=dict)

    @classmethod
    def holiday(cls, day: date, reason: str) -> "AttendanceRecord":
        return cls(day=day, is_holiday=True, holiday_reason=reason)

    @classmethod
    def marks(
        cls,
        day: date,
        periods: Mapping[SlotKey, Mark],
        extra_periods: Optional[Mapping[str, Mark]] = None,
    ) -> "AttendanceRecord":
        return cls(day=day, is_holiday=False, periods=dict(periods), extra_periods=dict(extra_periods or {}))

    def all_marks(self) -> list[Mark]:
        return [*self.periods.values(), *self.extra_periods.values()]
