from __future__ import annotations

import uuid
from typing import Any, Iterable, Mapping, Optional

from ..core.enums import SubjectType
from ..core.exceptions import ValidationError
from ..storage.repository import AggregateStore
from .model import Subject, SubjectRegistry


def new_subject_id() -> str:
    return f"subject-{uuid.uuid4().hex[:12]}"


class SubjectService:
    """Edits of the subject list; every change saves the whole list."""

    def __init__(self, store: AggregateStore):
        self._store = store

    def registry(self) -> SubjectRegistry:
        return SubjectRegistry(self._store.load_subjects())

    def list_all(self) -> list[Subject]:
        return self._store.load_subjects()

    def save(self, items: Iterable[Mapping[str, Any]]) -> list[Subject]:
        """Replace the list; every name must be non-empty after trimming."""
        subjects: list[Subject] = []
        errors: dict[str, str] = {}
        for item in items:
            subject_id = str(item.get("id") or "").strip() or new_subject_id()
            name = str(item.get("name") or "").strip()
            if not name:
                errors[subject_id] = "Subject name is required"
            subjects.append(Subject(subject_id=subject_id, name=name, subject_type=_parse_type(item.get("type"))))

        if errors:
            raise ValidationError("Subject name is required", errors)

        self._store.save_subjects(subjects)
        return subjects

    def add(self, name: str, subject_type: Any = SubjectType.THEORY) -> Subject:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Subject name is required")
        subject = Subject(subject_id=new_subject_id(), name=name, subject_type=_parse_type(subject_type))
        self._store.save_subjects([*self._store.load_subjects(), subject])
        return subject

    def update(self, subject_id: str, *, name: Optional[str] = None, subject_type: Any = None) -> Subject:
        subjects = self._store.load_subjects()
        for i, s in enumerate(subjects):
            if s.subject_id != subject_id:
                continue
            new_name = s.name if name is None else name.strip()
            if not new_name:
                raise ValidationError("Subject name is required", {subject_id: "Subject name is required"})
            updated = Subject(
                subject_id=s.subject_id,
                name=new_name,
                subject_type=s.subject_type if subject_type is None else _parse_type(subject_type),
            )
            subjects[i] = updated
            self._store.save_subjects(subjects)
            return updated
        raise ValidationError("Subject not found")

    def delete(self, subject_id: str) -> None:
        """Remove a subject. Classes that reference it stay and show as "Unknown"."""
        subjects = self._store.load_subjects()
        remaining = [s for s in subjects if s.subject_id != subject_id]
        if len(remaining) == len(subjects):
            raise ValidationError("Subject not found")
        self._store.save_subjects(remaining)


def _parse_type(value: Any) -> SubjectType:
    if isinstance(value, SubjectType):
        return value
    try:
        return SubjectType(str(value or SubjectType.THEORY.value).lower())
    except ValueError:
        raise ValidationError("Subject type must be theory or lab") from None
