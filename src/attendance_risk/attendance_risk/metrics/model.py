from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class CoreMetrics:
    """Immutable snapshot of rate and streak metrics for one pair.

    Rates and scores are percentages in [0, 100] and kept unrounded;
    :meth:`as_dict` applies display rounding.
    """

    total_days: int
    effective_days: int
    present_days: int
    absent_days: int
    late_days: int
    attendance_rate: float
    max_consecutive_absences: int
    recent_consecutive_absences: int
    ongoing_absence_streak: int
    weekly_absences: int
    recency_weighted_score: float
    quality_score: float
    consistency_index: float
    absent_dates: tuple[date, ...] = ()
    last_absence_date: Optional[date] = None
    last_attended_date: Optional[date] = None

    @property
    def absence_rate(self) -> float:
        """Share of effective days missed, as a fraction."""
        return self.absent_days / self.effective_days if self.effective_days else 0.0

    def as_dict(self) -> dict:
        return {
            "total_days": self.total_days,
            "effective_days": self.effective_days,
            "present_days": self.present_days,
            "absent_days": self.absent_days,
            "late_days": self.late_days,
            "attendance_rate": round(self.attendance_rate, 1),
            "max_consecutive_absences": self.max_consecutive_absences,
            "recent_consecutive_absences": self.recent_consecutive_absences,
            "ongoing_absence_streak": self.ongoing_absence_streak,
            "weekly_absences": self.weekly_absences,
            "recency_weighted_score": round(self.recency_weighted_score, 1),
            "quality_score": round(self.quality_score, 1),
            "consistency_index": round(self.consistency_index, 2),
            "absent_dates": [d.isoformat() for d in self.absent_dates],
            "last_absence_date": self.last_absence_date.isoformat() if self.last_absence_date else None,
            "last_attended_date": self.last_attended_date.isoformat() if self.last_attended_date else None,
        }
