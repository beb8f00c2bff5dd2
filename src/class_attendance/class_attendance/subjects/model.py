from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ..core.constants import UNKNOWN_SUBJECT_NAME
from ..core.enums import SubjectType


@dataclass(frozen=True)
class Subject:
    subject_id: str
    name: str
    subject_type: SubjectType = SubjectType.THEORY


class SubjectRegistry:
    """Read-only lookup over the user's subject list (ordered as stored)."""

    def __init__(self, subjects: Iterable[Subject] = ()):
        self._subjects: tuple[Subject, ...] = tuple(subjects)
        self._by_id = {s.subject_id: s for s in self._subjects}

    def __iter__(self):
        return iter(self._subjects)

    def __len__(self) -> int:
        return len(self._subjects)

    def get(self, subject_id: str) -> Optional[Subject]:
        return self._by_id.get(subject_id)

    def name_of(self, subject_id: str) -> str:
        """Display name; dangling references resolve to "Unknown"."""
        subject = self._by_id.get(subject_id)
        return subject.name if subject else UNKNOWN_SUBJECT_NAME

    def as_list(self) -> Sequence[Subject]:
        return list(self._subjects)
