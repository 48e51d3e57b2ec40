from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Raw status as recorded for one session."""

    ATTENDED = "attended"
    LATE = "late"
    ABSENT = "absent"
    EXCUSED = "excused"
    VACATION = "vacation"
    UNMARKED = "unmarked"


class NormalizedStatus(str, Enum):
    """Status after normalization; excused/vacation collapse to NEUTRAL."""

    ATTENDED = "attended"
    LATE = "late"
    ABSENT = "absent"
    NEUTRAL = "neutral"

    @property
    def is_present(self) -> bool:
        return self in (NormalizedStatus.ATTENDED, NormalizedStatus.LATE)

    @property
    def is_effective(self) -> bool:
        return self is not NormalizedStatus.NEUTRAL


class TrendClassification(str, Enum):
    IMPROVING = "IMPROVING"
    DECLINING = "DECLINING"
    STABLE = "STABLE"
    VOLATILE = "VOLATILE"


class RiskTier(str, Enum):
    """Ordinal risk tiers, most severe first."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    WATCH = "WATCH"

    @property
    def rank(self) -> int:
        return _TIER_RANK[self]


_TIER_RANK = {
    RiskTier.CRITICAL: 0,
    RiskTier.HIGH: 1,
    RiskTier.MEDIUM: 2,
    RiskTier.WATCH: 3,
}


class NoAssessmentReason(str, Enum):
    """Why the engine declined to classify a student."""

    EMPTY_SERIES = "EMPTY_SERIES"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    NOTHING_TO_FLAG = "NOTHING_TO_FLAG"
