from __future__ import annotations

from ..core.enums import RiskBand
from ..core.exceptions import ValidationError
from .model import AttendanceStats, Prediction, risk_band, rounded_percentage

BAND_MESSAGES = {
    RiskBand.SAFE: "You're safe! Your attendance will be {percentage}%.",
    RiskBand.WARNING: "Warning: your attendance will be {percentage}%. Close to the threshold.",
    RiskBand.RISK: "Your attendance will be {percentage}%. This is below the required threshold!",
}


class Predictor:
    """Layer hypothetical future marks on top of the current totals."""

    def predict(self, current: AttendanceStats, future_attend: int, future_miss: int) -> Prediction:
        if future_attend < 0 or future_miss < 0:
            raise ValidationError("Future classes cannot be negative")

        total = current.total + future_attend + future_miss
        present = current.present + future_attend
        percentage = rounded_percentage(present, total)
        return Prediction(percentage=percentage, status=risk_band(percentage), total=total, present=present)

    @staticmethod
    def message_for(prediction: Prediction) -> str:
        return BAND_MESSAGES[prediction.status].format(percentage=prediction.percentage)
