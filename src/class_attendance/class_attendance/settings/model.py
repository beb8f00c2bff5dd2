from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from ..core.constants import DEFAULT_PERIOD_DURATION_MINUTES
from ..core.enums import Weekday


@dataclass(frozen=True)
class ScheduleConfig:
    """Per-weekday period counts plus the single period length.

    A weekday with 0 periods is structurally a holiday: no class can be placed on it.
    """

    period_duration_minutes: int = DEFAULT_PERIOD_DURATION_MINUTES
    per_weekday: Mapping[Weekday, int] = field(default_factory=dict)

    def total_periods(self, weekday: Weekday) -> int:
        return int(self.per_weekday.get(weekday, 0))

    def has_any_periods(self) -> bool:
        return any(self.total_periods(day) > 0 for day in Weekday)

    @classmethod
    def default(cls) -> "ScheduleConfig":
        return cls(per_weekday={day: 0 for day in Weekday})
