from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..attendance.ledger import AttendanceLedger
from ..storage.repository import AggregateStore
from ..subjects.model import SubjectRegistry
from .aggregator import StatsAggregator
from .model import AttendanceStats, Prediction, SubjectStats
from .predictor import Predictor


@dataclass(frozen=True)
class Dashboard:
    overall: AttendanceStats
    subjects: list[SubjectStats]


class StatsService:
    def __init__(
        self,
        ledger: AttendanceLedger,
        store: AggregateStore,
        *,
        aggregator: Optional[StatsAggregator] = None,
        predictor: Optional[Predictor] = None,
    ):
        self._ledger = ledger
        self._store = store
        self._aggregator = aggregator or StatsAggregator()
        self._predictor = predictor or Predictor()

    def overall(self) -> AttendanceStats:
        return self._aggregator.overall(self._ledger.all())

    def dashboard(self) -> Dashboard:
        records = self._ledger.all()
        per_subject = self._aggregator.per_subject(
            records,
            self._store.load_timetable(),
            SubjectRegistry(self._store.load_subjects()),
            self._store.load_settings(),
        )
        return Dashboard(overall=self._aggregator.overall(records), subjects=per_subject)

    def predict(self, future_attend: int, future_miss: int) -> tuple[Prediction, str]:
        prediction = self._predictor.predict(self.overall(), future_attend, future_miss)
        return prediction, self._predictor.message_for(prediction)
