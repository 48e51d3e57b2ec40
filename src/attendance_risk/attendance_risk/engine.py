from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

from .common.datetime_utils import today
from .core.config import AnalyticsConfig
from .core.enums import NoAssessmentReason, RiskTier
from .metrics.calculator import StreakRateCalculator
from .patterns.model import PatternContext
from .patterns.scanner import PatternScanner
from .records.grouping import group_by_student_course, iter_pairs
from .records.ingestion import ingest_rows
from .records.model import AttendanceEvent, PairKey
from .records.normalizer import RecordNormalizer
from .risk.model import AssessmentOutcome, NoAssessment, RiskAssessment
from .risk.scorer import RiskScorer
from .trend.analyzer import TrendAnalyzer

logger = logging.getLogger(__name__)


def alert_sort_key(assessment: RiskAssessment) -> tuple[int, float]:
    """Most severe tier first, then lowest engagement."""
    rank = assessment.risk_tier.rank if assessment.risk_tier else len(RiskTier)
    return rank, assessment.engagement_score


@dataclass(frozen=True)
class BatchResult:
    outcomes: tuple[AssessmentOutcome, ...]
    malformed_records: int = 0
    unmarked_records: int = 0

    @property
    def assessments(self) -> list[RiskAssessment]:
        return [o for o in self.outcomes if isinstance(o, RiskAssessment)]

    @property
    def skipped(self) -> list[NoAssessment]:
        return [o for o in self.outcomes if isinstance(o, NoAssessment)]

    @property
    def alerts(self) -> list[RiskAssessment]:
        return sorted((a for a in self.assessments if a.should_alert), key=alert_sort_key)


class AttendanceRiskEngine:
    """Normalize -> metrics -> trend -> patterns -> risk, for one pair at a time.

    Stateless between calls: the same input and ``as_of`` always give the
    same output, so pairs can be assessed in any order or in parallel.
    """

    def __init__(
        self,
        config: AnalyticsConfig | None = None,
        *,
        scanner: PatternScanner | None = None,
    ):
        self.config = config or AnalyticsConfig()
        self._normalizer = RecordNormalizer()
        self._calculator = StreakRateCalculator(self.config)
        self._trend = TrendAnalyzer(self.config)
        self._scanner = scanner or PatternScanner()
        self._scorer = RiskScorer(self.config)

    def assess(
        self,
        events: Sequence[AttendanceEvent],
        *,
        as_of: Optional[date] = None,
        pair: Optional[PairKey] = None,
    ) -> AssessmentOutcome:
        """Assess one student/course pair.

        Raises ContractViolationError when ``events`` span more than one
        pair; every data-quality problem yields a NoAssessment instead.
        """
        as_of = as_of or today()
        if not events and pair is None:
            return NoAssessment(reason=NoAssessmentReason.EMPTY_SERIES)

        normalized = self._normalizer.normalize(events, pair=pair)
        series = normalized.series
        if normalized.is_empty:
            logger.debug("No usable records for %s/%s", series.student_id, series.course_id)
            return NoAssessment(
                reason=NoAssessmentReason.EMPTY_SERIES,
                student_id=series.student_id,
                course_id=series.course_id,
            )

        metrics = self._calculator.calculate(series, as_of=as_of)
        trend = self._trend.analyze(series, attendance_rate=metrics.attendance_rate)
        variants = self._trend.variants(series)
        ctx = PatternContext(series=series, metrics=metrics, trend=trend, config=self.config, variants=variants)
        patterns = self._scanner.scan(ctx)

        outcome = self._scorer.score(
            student_id=series.student_id,
            course_id=series.course_id,
            as_of=as_of,
            metrics=metrics,
            trend=trend,
            patterns=patterns,
            variants=variants,
            pattern_evidence=self._scanner.evidence(ctx),
        )
        if isinstance(outcome, NoAssessment):
            logger.debug("No assessment for %s/%s: %s", series.student_id, series.course_id, outcome.reason.value)
        return outcome

    def assess_events(self, events: Iterable[AttendanceEvent], *, as_of: Optional[date] = None) -> list[AssessmentOutcome]:
        """Group strict events by student and course and assess each pair."""
        as_of = as_of or today()
        groups = group_by_student_course(events)
        return [self.assess(pair_events, as_of=as_of, pair=pair) for pair, pair_events in iter_pairs(groups)]

    def assess_batch(self, rows: Iterable[Mapping[str, Any]], *, as_of: Optional[date] = None) -> BatchResult:
        """Ingest loosely shaped rows and assess every pair they mention."""
        ingested = ingest_rows(rows)
        outcomes = self.assess_events(ingested.events, as_of=as_of)
        result = BatchResult(
            outcomes=tuple(outcomes),
            malformed_records=ingested.malformed,
            unmarked_records=ingested.unmarked,
        )
        logger.info(
            "Assessed %d student/course pairs (%d alerts, %d malformed rows)",
            len(result.outcomes),
            len(result.alerts),
            result.malformed_records,
        )
        return result
