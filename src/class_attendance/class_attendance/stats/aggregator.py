from __future__ import annotations

import logging
from typing import Iterable

from ..attendance.model import AttendanceRecord
from ..core.enums import Mark, Weekday
from ..settings.model import ScheduleConfig
from ..subjects.model import SubjectRegistry
from ..timetable.model import WeeklyAssignments
from ..timetable.resolver import OccupancyResolver
from .model import AttendanceStats, SubjectStats

logger = logging.getLogger(__name__)


class StatsAggregator:
    """Fold the ledger into overall and per-subject figures.

    Holiday records are skipped entirely; they never count as absences.
    """

    def __init__(self, resolver: OccupancyResolver | None = None):
        self._resolver = resolver or OccupancyResolver()

    def overall(self, records: Iterable[AttendanceRecord]) -> AttendanceStats:
        total = present = 0
        for record in records:
            if record.is_holiday:
                continue
            for mark in record.all_marks():
                total += 1
                if mark is Mark.PRESENT:
                    present += 1
        return AttendanceStats(total=total, present=present, absent=total - present)

    def per_subject(
        self,
        records: Iterable[AttendanceRecord],
        weekly: WeeklyAssignments,
        subjects: SubjectRegistry,
        config: ScheduleConfig,
    ) -> list[SubjectStats]:
        """Attribute each mark to the subject the current timetable puts at its period.

        Marks whose period has no subject under today's timetable are dropped;
        the schedule is the current one, not the one in force on the record's date.
        """
        lookups: dict[Weekday, dict[int, tuple[str, str]]] = {}
        counts: dict[str, list] = {}  # subject_id -> [name, total, present]
        dropped = 0

        for record in records:
            if record.is_holiday:
                continue
            weekday = Weekday.of(record.day)
            lookup = lookups.get(weekday)
            if lookup is None:
                slots = self._resolver.resolve(
                    total_periods=config.total_periods(weekday),
                    assignments=weekly.get(weekday, ()),
                    subjects=subjects,
                )
                lookup = {s.period_index: (s.subject_id, s.subject_name) for s in slots}
                lookups[weekday] = lookup

            for key, mark in record.periods.items():
                hit = lookup.get(key.period_index)
                if hit is None:
                    dropped += 1
                    continue
                entry = counts.setdefault(hit[0], [hit[1], 0, 0])
                entry[1] += 1
                if mark is Mark.PRESENT:
                    entry[2] += 1
            dropped += len(record.extra_periods)

        if dropped:
            logger.debug("%s recorded period(s) no longer map to a subject", dropped)

        out = [
            SubjectStats(
                subject_id=subject_id,
                subject_name=name,
                stats=AttendanceStats(total=total, present=present, absent=total - present),
            )
            for subject_id, (name, total, present) in counts.items()
            if total > 0
        ]
        out.sort(key=lambda s: s.subject_name)
        return out
