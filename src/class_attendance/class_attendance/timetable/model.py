from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Sequence

from ..core.enums import Weekday


@dataclass(frozen=True)
class ClassAssignment:
    """A recurring weekly class occupying periods ``start_period..end_period``."""

    assignment_id: str
    weekday: Weekday
    subject_id: str
    start_period: int
    duration: int = 1

    @property
    def end_period(self) -> int:
        return self.start_period + self.duration - 1

    def overlaps(self, other: "ClassAssignment") -> bool:
        return self.start_period <= other.end_period and self.end_period >= other.start_period


@dataclass(frozen=True)
class PeriodSlot:
    """A conducted period of a weekday, derived from the assignments (never stored)."""

    period_index: int
    subject_id: str
    subject_name: str
    assignment_id: str


WeeklyAssignments = Mapping[Weekday, Sequence[ClassAssignment]]
