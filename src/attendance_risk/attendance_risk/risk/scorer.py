"""Risk scoring and tier classification.

A pure one-shot classifier: the four tiers are ordinal labels, not states,
and nothing carries over between calls.
"""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core import constants as c
from ..core.config import AnalyticsConfig
from ..core.enums import NoAssessmentReason, RiskTier, TrendClassification
from ..metrics.model import CoreMetrics
from ..patterns.model import PatternSet
from ..trend.model import TrendResult, TrendVariant
from .model import AssessmentOutcome, NoAssessment, RiskAssessment


def _clamp(value: float, low: float = 0.0, high: float = c.SCORE_CEILING) -> float:
    return max(low, min(high, value))


def _step_points(value: float, steps: Sequence[tuple[float, float]]) -> float:
    for minimum, points in steps:
        if value >= minimum:
            return points
    return 0.0


def absence_points(metrics: CoreMetrics) -> float:
    rate = metrics.absence_rate
    points = _step_points(rate, c.ABSENCE_SEVERITY_STEPS)
    if not points:
        lowest_rate, lowest_points = c.ABSENCE_SEVERITY_STEPS[-1]
        points = rate / lowest_rate * lowest_points
    return min(points, c.ABSENCE_SEVERITY_CAP)


def recent_points(metrics: CoreMetrics) -> float:
    """Streak-driven points plus the recency-weighted add-on.

    The best-matching rule wins, so adding an absence never lowers it.
    """
    points = max(
        _step_points(metrics.ongoing_absence_streak, c.ONGOING_STREAK_POINTS),
        _step_points(metrics.recent_consecutive_absences, c.RECENT_STREAK_POINTS),
        _step_points(metrics.weekly_absences, c.WEEKLY_ABSENCE_POINTS),
    )
    return points + metrics.recency_weighted_score * c.RECENCY_ADDON_WEIGHT


def trend_points(trend: TrendResult) -> float:
    cls = trend.classification
    if cls is TrendClassification.DECLINING:
        points = c.TREND_POINTS_DECLINING
        if trend.momentum < c.MOMENTUM_ACCELERATION:
            points += c.TREND_POINTS_ACCELERATION
        return min(points, c.TREND_POINTS_CAP)
    if cls is TrendClassification.IMPROVING:
        return _clamp(c.TREND_POINTS_IMPROVING_MAX - trend.slope, high=c.TREND_POINTS_IMPROVING_MAX)
    if cls is TrendClassification.VOLATILE:
        return c.TREND_POINTS_VOLATILE
    # Stable but not improving signals no remediation.
    return c.TREND_POINTS_STABLE


def worst_trend_points(variants: Sequence[TrendVariant]) -> float:
    """Trend points of the most worrying version of the series."""
    return max(trend_points(v.trend) for v in variants)


def trend_engagement(trend: TrendResult) -> float:
    """Trend and momentum share of the engagement score."""
    cls = trend.classification
    if cls is TrendClassification.IMPROVING:
        trend_part = min(c.ENGAGEMENT_TREND_IMPROVING_MAX, c.ENGAGEMENT_TREND_IMPROVING_BASE + trend.slope)
    elif cls is TrendClassification.DECLINING:
        trend_part = -min(c.ENGAGEMENT_TREND_DECLINE_MAX, abs(trend.slope) * c.ENGAGEMENT_TREND_DECLINE_PER_POINT)
    elif cls is TrendClassification.VOLATILE:
        trend_part = c.ENGAGEMENT_TREND_VOLATILE
    else:
        trend_part = c.ENGAGEMENT_TREND_STABLE
    return trend_part + trend.momentum * c.ENGAGEMENT_MOMENTUM_WEIGHT


def pattern_points(pattern_count: int, metrics: CoreMetrics) -> float:
    bonus = c.PATTERN_LATENESS_BONUS if metrics.late_days >= c.LATENESS_MIN_LATE_DAYS else 0.0
    return min(c.PATTERN_POINTS_CAP, pattern_count * c.PATTERN_POINTS_PER_LABEL + bonus)


def composite_score(metrics: CoreMetrics, variants: Sequence[TrendVariant], pattern_count: int) -> float:
    return _clamp(
        absence_points(metrics)
        + recent_points(metrics)
        + worst_trend_points(variants)
        + pattern_points(pattern_count, metrics)
    )


def engagement_score(metrics: CoreMetrics, variants: Sequence[TrendVariant], pattern_count: int) -> float:
    """0-100 health blend; inverse in spirit to the risk score.

    The trend share comes from the least healthy version of the series.
    """
    quality = metrics.quality_score * c.ENGAGEMENT_QUALITY_WEIGHT
    recency = (c.SCORE_CEILING - metrics.recency_weighted_score) * c.ENGAGEMENT_RECENCY_WEIGHT
    trend_part = min(trend_engagement(v.trend) for v in variants)

    penalty = (
        metrics.max_consecutive_absences * c.ENGAGEMENT_STREAK_PENALTY
        + pattern_count * c.ENGAGEMENT_PATTERN_PENALTY
    )
    consistency = max(0.0, c.ENGAGEMENT_CONSISTENCY_MAX - penalty)
    return _clamp(quality + recency + trend_part + consistency)


def classify_tier(
    score: float,
    metrics: CoreMetrics,
    trend: TrendResult,
    patterns: PatternSet,
    engagement: float,
) -> Optional[RiskTier]:
    """First matching rule wins, most severe first."""
    rate = metrics.attendance_rate
    ongoing = metrics.ongoing_absence_streak
    recent = metrics.recent_consecutive_absences
    declining = trend.is_declining

    if (
        score >= c.CRITICAL_SCORE
        or ongoing >= c.CRITICAL_ONGOING_STREAK
        or rate < c.CRITICAL_MAX_RATE
        or (recent >= c.CRITICAL_RECENT_STREAK and rate < c.CRITICAL_RECENT_STREAK_RATE)
    ):
        return RiskTier.CRITICAL
    if (
        score >= c.HIGH_SCORE
        or ongoing >= c.HIGH_ONGOING_STREAK
        or rate < c.HIGH_MAX_RATE
        or (recent >= c.HIGH_DECLINE_RECENT_STREAK and declining and rate < c.HIGH_DECLINE_RATE)
    ):
        return RiskTier.HIGH
    if (
        score >= c.MEDIUM_SCORE
        or ongoing >= c.MEDIUM_ONGOING_STREAK
        or rate < c.MEDIUM_MAX_RATE
        or (len(patterns) >= c.MEDIUM_PATTERN_COUNT and rate < c.MEDIUM_PATTERN_RATE)
    ):
        return RiskTier.MEDIUM
    if (
        score >= c.WATCH_SCORE
        or (metrics.absent_days > 0 and rate < c.WATCH_MAX_RATE)
        or (declining and rate < c.WATCH_MAX_RATE)
        or engagement < c.WATCH_MIN_ENGAGEMENT
    ):
        return RiskTier.WATCH
    return None


class RiskScorer:
    def __init__(self, config: AnalyticsConfig | None = None):
        self._config = config or AnalyticsConfig()

    def guard(self, metrics: CoreMetrics) -> Optional[NoAssessmentReason]:
        """Reason to skip scoring, checked before any points are computed."""
        if metrics.total_days == 0:
            return NoAssessmentReason.EMPTY_SERIES
        if metrics.effective_days < self._config.min_effective_days:
            return NoAssessmentReason.INSUFFICIENT_DATA
        if metrics.absent_days == 0 and metrics.late_days <= 1:
            return NoAssessmentReason.NOTHING_TO_FLAG
        return None

    def is_suppressed(
        self,
        metrics: CoreMetrics,
        trend: TrendResult,
        patterns: PatternSet,
        engagement: float,
    ) -> bool:
        """Health signals agree the student is fine; can only silence an alert."""
        cfg = self._config
        return (
            engagement >= cfg.suppress_min_engagement
            and metrics.attendance_rate >= cfg.suppress_min_attendance_rate
            and not trend.is_declining
            and metrics.ongoing_absence_streak == 0
            and metrics.recent_consecutive_absences <= cfg.suppress_max_recent_streak
            and not patterns
        )

    def score(
        self,
        *,
        student_id: str,
        course_id: str,
        as_of: date,
        metrics: CoreMetrics,
        trend: TrendResult,
        patterns: PatternSet,
        variants: Sequence[TrendVariant] = (),
        pattern_evidence: Optional[int] = None,
    ) -> AssessmentOutcome:
        """Score one pair.

        ``variants`` and ``pattern_evidence`` feed the score components and
        default to the reported trend and labels. The tier rules and
        suppression always see the reported trend and labels.
        """
        reason = self.guard(metrics)
        if reason is not None:
            return NoAssessment(reason=reason, student_id=student_id, course_id=course_id)

        variants = variants or (TrendVariant(trend=trend, attendance_rate=metrics.attendance_rate),)
        evidence = len(patterns) if pattern_evidence is None else pattern_evidence
        risk = composite_score(metrics, variants, evidence)
        engagement = engagement_score(metrics, variants, evidence)
        tier = classify_tier(risk, metrics, trend, patterns, engagement)

        should_alert = tier is not None
        if should_alert and self.is_suppressed(metrics, trend, patterns, engagement):
            should_alert = False

        return RiskAssessment(
            student_id=student_id,
            course_id=course_id,
            as_of=as_of,
            risk_score=round(risk, 1),
            risk_tier=tier,
            should_alert=should_alert,
            engagement_score=round(engagement, 1),
            metrics=metrics,
            trend=trend,
            patterns=patterns,
        )
