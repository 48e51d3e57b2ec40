from __future__ import annotations

from ...core import constants as c
from ...core.enums import NormalizedStatus
from ..model import PatternContext
from .base import PatternDetector


class RecentSpikeDetector(PatternDetector):
    """Many more absences in the latest sessions than in the ones before."""

    def detect(self, ctx: PatternContext) -> list[str]:
        if ctx.metrics.total_days < ctx.config.min_days_sequence:
            return []

        effective = ctx.series.effective_entries
        window = c.SPIKE_WINDOW
        latest = sum(1 for e in effective[:window] if e.status is NormalizedStatus.ABSENT)
        previous = sum(1 for e in effective[window : window * 2] if e.status is NormalizedStatus.ABSENT)

        if latest >= c.SPIKE_MIN_ABSENCES and latest >= previous + c.SPIKE_MIN_INCREASE:
            return ["Recent absence spike detected"]
        return []

    def evidence(self, ctx: PatternContext) -> int:
        # Without the comparison to the previous window: enough recent absences alone.
        if ctx.metrics.total_days < ctx.config.min_days_sequence:
            return 0
        latest = ctx.series.effective_entries[: c.SPIKE_WINDOW]
        return int(sum(1 for e in latest if e.status is NormalizedStatus.ABSENT) >= c.SPIKE_MIN_ABSENCES)
