from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional, Protocol, Sequence

from ..attendance.model import AttendanceRecord
from ..core.constants import (
    LOCAL_KEY_ATTENDANCE,
    LOCAL_KEY_SETTINGS,
    LOCAL_KEY_SUBJECTS,
    LOCAL_KEY_TIMETABLE,
)
from ..core.enums import AggregateKind
from ..settings.model import ScheduleConfig
from ..subjects.model import Subject
from ..timetable.model import WeeklyAssignments
from . import codec
from .local_store import LocalKeyValueStore

logger = logging.getLogger(__name__)

LOCAL_KEYS = {
    AggregateKind.SETTINGS: LOCAL_KEY_SETTINGS,
    AggregateKind.SUBJECTS: LOCAL_KEY_SUBJECTS,
    AggregateKind.TIMETABLE: LOCAL_KEY_TIMETABLE,
    AggregateKind.ATTENDANCE: LOCAL_KEY_ATTENDANCE,
}

_DEFAULT_DOCS: dict[AggregateKind, Callable[[], Any]] = {
    AggregateKind.SETTINGS: lambda: codec.settings_to_doc(ScheduleConfig.default()),
    AggregateKind.SUBJECTS: list,
    AggregateKind.TIMETABLE: dict,
    AggregateKind.ATTENDANCE: list,
}


def default_document(kind: AggregateKind) -> Any:
    return _DEFAULT_DOCS[kind]()


class AggregateStore(Protocol):
    """Typed whole-document access to the four aggregates.

    Every ``save_*`` replaces the previous value entirely.
    """

    def load_settings(self) -> ScheduleConfig:
        raise NotImplementedError

    def save_settings(self, config: ScheduleConfig) -> None:
        raise NotImplementedError

    def load_subjects(self) -> list[Subject]:
        raise NotImplementedError

    def save_subjects(self, subjects: Sequence[Subject]) -> None:
        raise NotImplementedError

    def load_timetable(self) -> WeeklyAssignments:
        raise NotImplementedError

    def save_timetable(self, weekly: WeeklyAssignments) -> None:
        raise NotImplementedError

    def load_attendance(self) -> list[AttendanceRecord]:
        raise NotImplementedError

    def save_attendance(self, records: Sequence[AttendanceRecord]) -> None:
        raise NotImplementedError


class LocalAggregateRepository(AggregateStore):
    """The four aggregates as JSON documents inside a local key/value store.

    Reads never fail: a missing key yields the default value and a corrupted
    document is logged and replaced by the default on read.
    """

    def __init__(self, store: LocalKeyValueStore):
        self._store = store

    # -- raw documents (used by sync) --

    def load_document(self, kind: AggregateKind) -> Any:
        raw = self._store.get(LOCAL_KEYS[kind])
        if raw is None:
            return default_document(kind)
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("local %s document is not valid JSON; using default", kind.value)
            return default_document(kind)

    def save_document(self, kind: AggregateKind, doc: Any) -> None:
        self._store.set(LOCAL_KEYS[kind], json.dumps(doc, ensure_ascii=False))

    def clear(self) -> None:
        for key in LOCAL_KEYS.values():
            self._store.remove(key)

    def _decode(self, kind: AggregateKind, decoder: Callable[[Any], Any]):
        doc = self.load_document(kind)
        try:
            return decoder(doc)
        except (ValueError, TypeError, KeyError, AttributeError) as e:
            logger.warning("local %s document is malformed (%s); using default", kind.value, e)
            return decoder(default_document(kind))

    # -- typed access --

    def load_settings(self) -> ScheduleConfig:
        return self._decode(AggregateKind.SETTINGS, codec.settings_from_doc)

    def save_settings(self, config: ScheduleConfig) -> None:
        self.save_document(AggregateKind.SETTINGS, codec.settings_to_doc(config))

    def load_subjects(self) -> list[Subject]:
        return self._decode(AggregateKind.SUBJECTS, codec.subjects_from_doc)

    def save_subjects(self, subjects: Sequence[Subject]) -> None:
        self.save_document(AggregateKind.SUBJECTS, codec.subjects_to_doc(subjects))

    def load_timetable(self) -> WeeklyAssignments:
        return self._decode(AggregateKind.TIMETABLE, codec.timetable_from_doc)

    def save_timetable(self, weekly: WeeklyAssignments) -> None:
        self.save_document(AggregateKind.TIMETABLE, codec.timetable_to_doc(weekly))

    def load_attendance(self) -> list[AttendanceRecord]:
        return self._decode(AggregateKind.ATTENDANCE, codec.attendance_from_doc)

    def save_attendance(self, records: Sequence[AttendanceRecord]) -> None:
        self.save_document(AggregateKind.ATTENDANCE, codec.attendance_to_doc(records))


def optional_document(doc: Optional[Any], kind: AggregateKind) -> Any:
    """Remote aggregates may be absent; absence means the default value."""
    return default_document(kind) if doc is None else doc
