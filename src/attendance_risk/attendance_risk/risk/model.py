from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from ..core.enums import NoAssessmentReason, RiskTier
from ..metrics.model import CoreMetrics
from ..patterns.model import PatternSet
from ..trend.model import TrendResult


@dataclass(frozen=True)
class RiskAssessment:
    """Final artifact for one (student, course) pair.

    ``risk_tier`` is ``None`` when the student is below every tier
    threshold. Scores are rounded to one decimal.
    """

    student_id: str
    course_id: str
    as_of: date
    risk_score: float
    risk_tier: Optional[RiskTier]
    should_alert: bool
    engagement_score: float
    metrics: CoreMetrics
    trend: TrendResult
    patterns: PatternSet

    assessed = True

    def as_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "course_id": self.course_id,
            "as_of": self.as_of.isoformat(),
            "assessed": True,
            "risk_score": self.risk_score,
            "risk_tier": self.risk_tier.value if self.risk_tier else None,
            "should_alert": self.should_alert,
            "engagement_score": self.engagement_score,
            "metrics": self.metrics.as_dict(),
            "trend": self.trend.as_dict(),
            "patterns": list(self.patterns),
        }


@dataclass(frozen=True)
class NoAssessment:
    """Explicit "no opinion" sentinel; not the same as assessed-and-healthy."""

    reason: NoAssessmentReason
    student_id: Optional[str] = None
    course_id: Optional[str] = None

    assessed = False
    should_alert = False
    risk_tier = None

    def as_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "course_id": self.course_id,
            "assessed": False,
            "reason": self.reason.value,
            "should_alert": False,
        }


AssessmentOutcome = Union[RiskAssessment, NoAssessment]
