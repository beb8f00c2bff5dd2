from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import SAFE_THRESHOLD, WARNING_THRESHOLD
from ..core.enums import RiskBand


def rounded_percentage(present: int, total: int) -> int:
    """``present / total * 100`` rounded half up; 0 when nothing was counted."""
    if total <= 0:
        return 0
    return (present * 200 + total) // (2 * total)


def risk_band(percentage: int) -> RiskBand:
    if percentage >= SAFE_THRESHOLD:
        return RiskBand.SAFE
    if percentage >= WARNING_THRESHOLD:
        return RiskBand.WARNING
    return RiskBand.RISK


@dataclass(frozen=True)
class AttendanceStats:
    total: int = 0
    present: int = 0
    absent: int = 0

    @property
    def percentage(self) -> int:
        return rounded_percentage(self.present, self.total)

    @property
    def band(self) -> RiskBand:
        return risk_band(self.percentage)

    def to_dict(self) -> dict:
        return {
            "total": self.total,
            "present": self.present,
            "absent": self.absent,
            "percentage": self.percentage,
            "status": self.band.value,
        }


@dataclass(frozen=True)
class SubjectStats:
    subject_id: str
    subject_name: str
    stats: AttendanceStats

    def to_dict(self) -> dict:
        return {"subjectId": self.subject_id, "subjectName": self.subject_name, **self.stats.to_dict()}


@dataclass(frozen=True)
class Prediction:
    percentage: int
    status: RiskBand
    total: int
    present: int
