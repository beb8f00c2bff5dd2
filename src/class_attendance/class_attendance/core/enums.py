from __future__ import annotations

from datetime import date
from enum import Enum


class Weekday(str, Enum):
    """Recurring weekday key of the weekly timetable."""

    MON = "Mon"
    TUE = "Tue"
    WED = "Wed"
    THU = "Thu"
    FRI = "Fri"
    SAT = "Sat"
    SUN = "Sun"

    @classmethod
    def of(cls, day: date) -> "Weekday":
        return _WEEKDAY_ORDER[day.weekday()]

    @property
    def order(self) -> int:
        return _WEEKDAY_ORDER.index(self)


_WEEKDAY_ORDER = (
    Weekday.MON,
    Weekday.TUE,
    Weekday.WED,
    Weekday.THU,
    Weekday.FRI,
    Weekday.SAT,
    Weekday.SUN,
)


class SubjectType(str, Enum):
    THEORY = "theory"
    LAB = "lab"


class Mark(str, Enum):
    """Attendance mark stored per period slot."""

    PRESENT = "present"
    ABSENT = "absent"


class RiskBand(str, Enum):
    SAFE = "safe"
    WARNING = "warning"
    RISK = "risk"


class DayStatus(str, Enum):
    """Calendar colouring of a single date."""

    PRESENT = "present"
    ABSENT = "absent"
    PARTIAL = "partial"
    HOLIDAY = "holiday"
    NONE = "none"


class AggregateKind(str, Enum):
    """The four whole documents mirrored between local and remote stores."""

    SETTINGS = "settings"
    SUBJECTS = "subjects"
    TIMETABLE = "timetable"
    ATTENDANCE = "attendance"
