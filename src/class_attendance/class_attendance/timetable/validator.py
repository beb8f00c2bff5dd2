from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional

from ..core.exceptions import ScheduleConflictError
from .model import ClassAssignment


class ConflictCode(str, Enum):
    INVALID_SUBJECT = "InvalidSubject"
    INVALID_DURATION = "InvalidDuration"
    INVALID_START = "InvalidStart"
    EXCEEDS_DAY_LIMIT = "ExceedsDayLimit"
    OVERLAP_CONFLICT = "OverlapConflict"


@dataclass(frozen=True)
class ConflictError:
    code: ConflictCode
    message: str
    # Range of the assignment we collided with (overlap) or the day limit.
    conflicting_range: Optional[tuple[int, int]] = None
    max_period: Optional[int] = None

    def to_exception(self) -> ScheduleConflictError:
        return ScheduleConflictError(self.code, self.message)


class ConflictValidator:
    """Gate for every class assignment write.

    Pure: called on each edit for inline feedback and again before committing.
    Checks run in a fixed order and the first failure wins.
    """

    def validate(
        self,
        candidate: ClassAssignment,
        existing: Iterable[ClassAssignment],
        total_periods: int,
    ) -> Optional[ConflictError]:
        """Check one entry against the others; an entry never conflicts with its own id."""
        others = [o for o in existing if o.assignment_id != candidate.assignment_id]
        return self._check(candidate, others, total_periods)

    def _check(
        self,
        candidate: ClassAssignment,
        others: Iterable[ClassAssignment],
        total_periods: int,
    ) -> Optional[ConflictError]:
        if not candidate.subject_id or not str(candidate.subject_id).strip():
            return ConflictError(ConflictCode.INVALID_SUBJECT, "Please select a subject.")

        if candidate.duration < 1:
            return ConflictError(ConflictCode.INVALID_DURATION, "Duration must be at least 1 period.")

        if candidate.start_period < 1:
            return ConflictError(ConflictCode.INVALID_START, "Start period must be 1 or later.")

        if candidate.end_period > total_periods:
            return ConflictError(
                ConflictCode.EXCEEDS_DAY_LIMIT,
                f"This class exceeds the day limit (max period {total_periods}).",
                max_period=total_periods,
            )

        for other in others:
            if candidate.overlaps(other):
                return ConflictError(
                    ConflictCode.OVERLAP_CONFLICT,
                    f"This class overlaps with another class scheduled for Period "
                    f"{other.start_period}–{other.end_period}. Change the start period or duration.",
                    conflicting_range=(other.start_period, other.end_period),
                )

        return None

    def validate_day(self, entries: Iterable[ClassAssignment], total_periods: int) -> dict[str, ConflictError]:
        """Validate every entry of a weekday against all the others.

        Entries are compared by position, so two entries sharing an id are still
        checked against each other. Returns entry id -> error for the entries
        that fail.
        """
        entries = list(entries)
        errors: dict[str, ConflictError] = {}
        for i, entry in enumerate(entries):
            err = self._check(entry, entries[:i] + entries[i + 1 :], total_periods)
            if err:
                errors[entry.assignment_id] = err
        return errors
