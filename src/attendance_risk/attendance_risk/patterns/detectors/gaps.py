from __future__ import annotations

from typing import Callable, Optional

from ...core import constants as c
from ..model import PatternContext
from .base import PatternDetector


def mean_absence_gap(ctx: PatternContext) -> Optional[float]:
    """Mean days between consecutive absences, or ``None`` when unguarded.

    Both gap detectors share the same significance guard: enough history
    and enough absences for a mean gap to mean anything.
    """
    metrics = ctx.metrics
    if metrics.total_days < ctx.config.min_days_sequence or metrics.absent_days < c.INTERMITTENT_MIN_ABSENCES:
        return None
    dates = metrics.absent_dates
    gaps = [(newer - older).days for newer, older in zip(dates, dates[1:])]
    return sum(gaps) / len(gaps)


def has_dense_run(ctx: PatternContext, accept: Callable[[float], bool]) -> bool:
    """Whether some run of consecutive absences, long enough to pass the
    guard on its own, has an accepted mean gap.

    Extra absences only split gaps, so a run found here is never lost.
    """
    if ctx.metrics.total_days < ctx.config.min_days_sequence:
        return False
    dates = ctx.metrics.absent_dates
    min_gaps = c.INTERMITTENT_MIN_ABSENCES - 1
    for i in range(len(dates)):
        for j in range(i + min_gaps, len(dates)):
            if accept((dates[i] - dates[j]).days / (j - i)):
                return True
    return False


class IntermittentAbsenceDetector(PatternDetector):
    def detect(self, ctx: PatternContext) -> list[str]:
        gap = mean_absence_gap(ctx)
        if gap is not None and self._accepts(gap):
            return ["Frequent intermittent absences"]
        return []

    def evidence(self, ctx: PatternContext) -> int:
        return int(has_dense_run(ctx, self._accepts))

    @staticmethod
    def _accepts(gap: float) -> bool:
        return gap < c.INTERMITTENT_MAX_MEAN_GAP_DAYS


class ClusteredAbsenceDetector(PatternDetector):
    def detect(self, ctx: PatternContext) -> list[str]:
        gap = mean_absence_gap(ctx)
        if gap is not None and self._accepts(gap):
            return ["Clustered absence pattern"]
        return []

    def evidence(self, ctx: PatternContext) -> int:
        return int(has_dense_run(ctx, self._accepts))

    @staticmethod
    def _accepts(gap: float) -> bool:
        return gap <= c.CLUSTER_MAX_MEAN_GAP_DAYS
