from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def parse_int(value: Any, field_name: str, *, minimum: Optional[int] = None, maximum: Optional[int] = None) -> int:
    """Coerce form/JSON input to an int within ``[minimum, maximum]``."""
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a whole number")
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a whole number") from None

    if minimum is not None and number < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}")
    if maximum is not None and number > maximum:
        raise ValidationError(f"{field_name} must be at most {maximum}")
    return number
