from __future__ import annotations

from ..core.exceptions import ValidationError


def require_positive(value: float, field_name: str) -> float:
    if value is None or value <= 0:
        raise ValidationError(f"{field_name} must be positive, got {value!r}")
    return value


def require_at_least(value: int, field_name: str, minimum: int) -> int:
    if value is None or value < minimum:
        raise ValidationError(f"{field_name} must be at least {minimum}, got {value!r}")
    return value


def require_percentage(value: float, field_name: str) -> float:
    if value is None or not 0 <= value <= 100:
        raise ValidationError(f"{field_name} must be within [0, 100], got {value!r}")
    return value
