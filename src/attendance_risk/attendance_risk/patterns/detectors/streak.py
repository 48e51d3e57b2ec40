from __future__ import annotations

from ..model import PatternContext
from .base import PatternDetector


class ExtendedStreakDetector(PatternDetector):
    def detect(self, ctx: PatternContext) -> list[str]:
        streak = ctx.metrics.max_consecutive_absences
        if streak >= ctx.config.extended_streak_threshold:
            return [f"Extended {streak}-session absence streak"]
        return []
