from __future__ import annotations

import logging
from typing import Any, Mapping

from ..common.validators import parse_int
from ..core.constants import MAX_PERIODS_PER_DAY
from ..core.enums import Weekday
from ..core.exceptions import ValidationError
from ..storage.repository import AggregateStore
from .model import ScheduleConfig

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, store: AggregateStore):
        self._store = store

    def get(self) -> ScheduleConfig:
        return self._store.load_settings()

    def update(self, *, period_duration_minutes: Any, per_weekday: Mapping[str, Any]) -> ScheduleConfig:
        """Validate and save the whole settings document.

        Days not mentioned keep 0 periods. Existing timetable entries are not
        touched even if they no longer fit; see ``TimetableService.revalidate_day``.
        """
        errors: dict[str, str] = {}

        duration = 0
        try:
            duration = parse_int(period_duration_minutes, "Period duration", minimum=1)
        except ValidationError as e:
            errors["periodDuration"] = str(e)

        totals: dict[Weekday, int] = {day: 0 for day in Weekday}
        for key, value in per_weekday.items():
            try:
                day = Weekday(key)
            except ValueError:
                errors[f"day-{key}"] = f"Unknown weekday {key!r}"
                continue
            try:
                totals[day] = parse_int(value, "Total periods", minimum=0, maximum=MAX_PERIODS_PER_DAY)
            except ValidationError as e:
                errors[f"day-{day.value}"] = str(e)

        if errors:
            raise ValidationError("Please fix all errors before saving.", errors)

        config = ScheduleConfig(period_duration_minutes=duration, per_weekday=totals)
        self._store.save_settings(config)
        logger.info("settings saved: %s min periods, %s", duration, {d.value: n for d, n in totals.items()})
        return config
