from __future__ import annotations

from typing import Mapping, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules.

    ``errors`` optionally maps a field (or entry id) to its own message so the
    caller can show them inline next to each input.
    """

    def __init__(self, message: str, errors: Optional[Mapping[str, str]] = None):
        super().__init__(message)
        self.errors: dict[str, str] = dict(errors or {})


class ScheduleConflictError(ValidationError):
    """A class assignment was rejected by the conflict validator."""

    def __init__(self, code, message: str, errors: Optional[Mapping[str, str]] = None):
        super().__init__(message, errors)
        self.code = code


class DayHasNoPeriods(ValidationError):
    """Raised when editing the timetable of a weekday configured with 0 periods."""


class IncompleteAttendance(ValidationError):
    """Raised when a day is submitted without every conducted period marked."""


class NotAuthenticatedError(DomainError):
    """Raised when an operation needs a user identity and none is set."""
