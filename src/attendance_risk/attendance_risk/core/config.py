from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from ..common.validators import require_at_least, require_percentage, require_positive
from ..core.exceptions import ValidationError
from . import constants as c


@dataclass(frozen=True)
class AnalyticsConfig:
    """Tunable knobs of the risk engine.

    Defaults come from ``core.constants``. The engine never reads the
    environment; the application layer builds this object from settings.
    """

    recency_half_life_days: float = c.DEFAULT_RECENCY_HALF_LIFE_DAYS
    recent_window_days: int = c.DEFAULT_RECENT_WINDOW_DAYS
    weekly_window_days: int = c.DEFAULT_WEEKLY_WINDOW_DAYS

    min_effective_days: int = c.DEFAULT_MIN_EFFECTIVE_DAYS
    min_days_pattern: int = c.DEFAULT_MIN_DAYS_PATTERN
    min_days_sequence: int = c.DEFAULT_MIN_DAYS_SEQUENCE
    min_days_momentum: int = c.DEFAULT_MIN_DAYS_MOMENTUM
    extended_streak_threshold: int = c.DEFAULT_EXTENDED_STREAK

    trend_r_squared_floor: float = c.TREND_R_SQUARED_FLOOR
    trend_slope_threshold: float = c.TREND_SLOPE_THRESHOLD
    trend_sensitive_slope_threshold: float = c.TREND_SENSITIVE_SLOPE_THRESHOLD

    suppress_min_engagement: float = c.DEFAULT_SUPPRESS_MIN_ENGAGEMENT
    suppress_min_attendance_rate: float = c.DEFAULT_SUPPRESS_MIN_ATTENDANCE_RATE
    suppress_max_recent_streak: int = c.DEFAULT_SUPPRESS_MAX_RECENT_STREAK

    def __post_init__(self) -> None:
        require_positive(self.recency_half_life_days, "recency_half_life_days")
        require_at_least(self.recent_window_days, "recent_window_days", 1)
        require_at_least(self.weekly_window_days, "weekly_window_days", 1)
        require_at_least(self.min_effective_days, "min_effective_days", 1)
        require_at_least(self.min_days_pattern, "min_days_pattern", 1)
        require_at_least(self.min_days_sequence, "min_days_sequence", 1)
        require_at_least(self.min_days_momentum, "min_days_momentum", 2)
        require_at_least(self.extended_streak_threshold, "extended_streak_threshold", 2)
        require_at_least(self.suppress_max_recent_streak, "suppress_max_recent_streak", 0)
        require_percentage(self.suppress_min_engagement, "suppress_min_engagement")
        require_percentage(self.suppress_min_attendance_rate, "suppress_min_attendance_rate")
        if not 0 <= self.trend_r_squared_floor <= 1:
            raise ValidationError("trend_r_squared_floor must be within [0, 1]")
        if self.trend_sensitive_slope_threshold > self.trend_slope_threshold:
            raise ValidationError("trend_sensitive_slope_threshold cannot exceed trend_slope_threshold")

    @classmethod
    def from_mapping(cls, overrides: Mapping[str, Any] | None) -> "AnalyticsConfig":
        """Build a config from a settings dict, ignoring ``None`` values."""
        if not overrides:
            return cls()
        known = {f.name: f.type for f in fields(cls)}
        unknown = set(overrides) - set(known)
        if unknown:
            raise ValidationError(f"Unknown analytics settings: {', '.join(sorted(unknown))}")

        values: dict[str, Any] = {}
        for name, raw in overrides.items():
            if raw is None:
                continue
            cast = int if known[name] == "int" else float
            try:
                values[name] = cast(raw)
            except (TypeError, ValueError) as e:
                raise ValidationError(f"{name} is not a number: {raw!r}") from e
        return cls(**values)
