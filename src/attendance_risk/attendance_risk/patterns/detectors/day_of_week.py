from __future__ import annotations

from collections import Counter

from ...core import constants as c
from ...core.enums import NormalizedStatus
from ..model import PatternContext
from .base import PatternDetector


class DayOfWeekDetector(PatternDetector):
    """A weekday the student is absent on most of the time."""

    def detect(self, ctx: PatternContext) -> list[str]:
        if ctx.metrics.total_days < ctx.config.min_days_pattern:
            return []

        occurrences: Counter = Counter()
        absences: Counter = Counter()
        for entry in ctx.series.entries:
            weekday = entry.date.weekday()
            occurrences[weekday] += 1
            if entry.status is NormalizedStatus.ABSENT:
                absences[weekday] += 1

        labels = []
        for weekday in sorted(absences):
            count = absences[weekday]
            total = occurrences[weekday]
            rate = count / total
            if count >= c.DOW_MIN_ABSENCES and rate >= c.DOW_MIN_ABSENCE_RATE and total >= c.DOW_MIN_OCCURRENCES:
                labels.append(f"High {_DAY_NAMES[weekday]} absence rate ({round(rate * 100)}%)")
        return labels


_DAY_NAMES = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
