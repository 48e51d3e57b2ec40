from __future__ import annotations

from ...core import constants as c
from ...trend.model import TrendResult
from ..model import PatternContext
from .base import PatternDetector


def _is_sharp(trend: TrendResult) -> bool:
    return trend.is_declining and trend.slope <= -c.SHARP_DECLINE_SLOPE


class SharpDeclineDetector(PatternDetector):
    """Steep downward trend from an already weak attendance rate."""

    def detect(self, ctx: PatternContext) -> list[str]:
        if _is_sharp(ctx.trend) and ctx.metrics.attendance_rate < c.SHARP_DECLINE_MAX_RATE:
            return ["Sharp recent decline in attendance"]
        return []

    def evidence(self, ctx: PatternContext) -> int:
        if ctx.metrics.attendance_rate >= c.SHARP_DECLINE_MAX_RATE:
            return 0
        return int(any(_is_sharp(v.trend) for v in ctx.trend_variants()))
