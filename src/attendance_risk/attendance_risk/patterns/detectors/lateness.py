from __future__ import annotations

from ...core import constants as c
from ..model import PatternContext
from .base import PatternDetector


class ChronicLatenessDetector(PatternDetector):
    def detect(self, ctx: PatternContext) -> list[str]:
        metrics = ctx.metrics
        if metrics.total_days < ctx.config.min_days_pattern or metrics.late_days < c.LATENESS_MIN_LATE_DAYS:
            return []
        late_rate = metrics.late_days / metrics.total_days
        if late_rate >= c.LATENESS_MIN_RATE:
            return [f"Chronic lateness ({round(late_rate * 100)}% of sessions)"]
        return []
