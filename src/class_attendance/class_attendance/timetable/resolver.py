from __future__ import annotations

from typing import Iterable

from ..subjects.model import SubjectRegistry
from .model import ClassAssignment, PeriodSlot


class OccupancyResolver:
    """Turn a weekday's assignments into its ordered list of conducted periods.

    Persisted data may predate stricter validation, so overlapping entries are
    tolerated: a later entry simply overwrites the indices it shares with an
    earlier one. Indices outside ``1..total_periods`` and free periods are
    never emitted.
    """

    def resolve(
        self,
        *,
        total_periods: int,
        assignments: Iterable[ClassAssignment],
        subjects: SubjectRegistry,
    ) -> list[PeriodSlot]:
        occupied: dict[int, PeriodSlot] = {}
        for a in assignments:
            name = subjects.name_of(a.subject_id)
            for p in range(a.start_period, a.end_period + 1):
                if 1 <= p <= total_periods:
                    occupied[p] = PeriodSlot(
                        period_index=p,
                        subject_id=a.subject_id,
                        subject_name=name,
                        assignment_id=a.assignment_id,
                    )

        return [occupied[p] for p in range(1, total_periods + 1) if p in occupied]
