from __future__ import annotations

from datetime import date
from typing import Sequence

import numpy as np

from ..common.datetime_utils import days_between
from ..core import constants as c
from ..core.config import AnalyticsConfig
from ..core.enums import NormalizedStatus
from ..records.model import NormalizedSeries, SeriesEntry
from .model import CoreMetrics


def recency_weighted_score(absent_dates: Sequence[date], *, as_of: date, half_life_days: float) -> float:
    """Exponentially decayed absence weight, scaled to [0, 100].

    One absence yesterday outweighs several absences two months ago.
    """
    if not absent_dates:
        return 0.0
    days_since = np.array([days_between(d, as_of) for d in absent_dates], dtype=float)
    total = float(np.exp(-days_since / half_life_days).sum())
    return min(c.SCORE_CEILING, total * c.RECENCY_SCALE)


def consistency_index(entries: Sequence[SeriesEntry]) -> float:
    """1 - sigma/mu of the 0/1 presence pattern over effective days."""
    pattern = np.array([1.0 if e.status.is_present else 0.0 for e in entries if e.status.is_effective])
    if pattern.size < 2:
        return 1.0
    mean = pattern.mean()
    if mean == 0:
        return 1.0
    return max(0.0, float(1 - pattern.std() / mean))


class StreakRateCalculator:
    """Rates and absence streaks over a newest-first series.

    Neutral (excused/vacation) entries neither count nor reset a streak,
    so absences on both sides of an excused gap form one run.
    """

    def __init__(self, config: AnalyticsConfig | None = None):
        self._config = config or AnalyticsConfig()

    def calculate(self, series: NormalizedSeries, *, as_of: date) -> CoreMetrics:
        cfg = self._config
        entries = series.entries

        effective = sum(1 for e in entries if e.status.is_effective)
        present = sum(1 for e in entries if e.status.is_present)
        late = sum(1 for e in entries if e.status is NormalizedStatus.LATE)
        absent_dates = tuple(e.date for e in entries if e.status is NormalizedStatus.ABSENT)
        rate = present / effective * 100 if effective else 0.0

        current = 0
        max_streak = 0
        recent = 0
        for entry in entries:
            if entry.status is NormalizedStatus.ABSENT:
                current += 1
                max_streak = max(max_streak, current)
                if days_between(entry.date, as_of) <= cfg.recent_window_days:
                    recent = max(recent, current)
            elif entry.status.is_present:
                current = 0

        ongoing = self._ongoing_streak(entries)
        recent = max(recent, ongoing)

        weekly = sum(1 for d in absent_dates if days_between(d, as_of) <= cfg.weekly_window_days)
        last_attended = next((e.date for e in entries if e.status.is_present), None)

        return CoreMetrics(
            total_days=len(entries),
            effective_days=effective,
            present_days=present,
            absent_days=len(absent_dates),
            late_days=late,
            attendance_rate=rate,
            max_consecutive_absences=max_streak,
            recent_consecutive_absences=recent,
            ongoing_absence_streak=ongoing,
            weekly_absences=weekly,
            recency_weighted_score=recency_weighted_score(
                absent_dates, as_of=as_of, half_life_days=cfg.recency_half_life_days
            ),
            quality_score=max(0.0, rate - late * c.LATE_QUALITY_PENALTY),
            consistency_index=consistency_index(entries),
            absent_dates=absent_dates,
            last_absence_date=absent_dates[0] if absent_dates else None,
            last_attended_date=last_attended,
        )

    @staticmethod
    def _ongoing_streak(entries: Sequence[SeriesEntry]) -> int:
        """Length of the absence run that includes the newest effective record."""
        streak = 0
        for entry in entries:
            if entry.status is NormalizedStatus.ABSENT:
                streak += 1
            elif entry.status.is_present:
                break
        return streak
