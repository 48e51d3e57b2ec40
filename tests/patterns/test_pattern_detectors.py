from dataclasses import replace

from src.attendance_risk.attendance_risk.core.config import AnalyticsConfig
from src.attendance_risk.attendance_risk.metrics.calculator import StreakRateCalculator
from src.attendance_risk.attendance_risk.patterns.detectors.base import PatternDetector
from src.attendance_risk.attendance_risk.patterns.detectors.day_of_week import DayOfWeekDetector
from src.attendance_risk.attendance_risk.patterns.detectors.decline import SharpDeclineDetector
from src.attendance_risk.attendance_risk.patterns.detectors.gaps import (
    ClusteredAbsenceDetector,
    IntermittentAbsenceDetector,
)
from src.attendance_risk.attendance_risk.patterns.detectors.lateness import ChronicLatenessDetector
from src.attendance_risk.attendance_risk.patterns.detectors.spike import RecentSpikeDetector
from src.attendance_risk.attendance_risk.patterns.detectors.streak import ExtendedStreakDetector
from src.attendance_risk.attendance_risk.patterns.factory import PatternDetectorFactory
from src.attendance_risk.attendance_risk.patterns.model import PatternContext
from src.attendance_risk.attendance_risk.patterns.scanner import PatternScanner
from src.attendance_risk.attendance_risk.records.normalizer import RecordNormalizer
from src.attendance_risk.attendance_risk.trend.analyzer import TrendAnalyzer


def _context(events, as_of, config=None) -> PatternContext:
    config = config or AnalyticsConfig()
    series = RecordNormalizer().normalize(events).series
    metrics = StreakRateCalculator(config).calculate(series, as_of=as_of)
    analyzer = TrendAnalyzer(config)
    trend = analyzer.analyze(series, attendance_rate=metrics.attendance_rate)
    return PatternContext(
        series=series, metrics=metrics, trend=trend, config=config, variants=analyzer.variants(series)
    )


def test_day_of_week_bias(events, as_of):
    # 28 days ending on a Monday; every Monday missed.
    statuses = "".join("A" if (27 - i) % 7 == 0 else "P" for i in range(28))

    labels = DayOfWeekDetector().detect(_context(events(statuses), as_of))

    assert labels == ["High Monday absence rate (100%)"]


def test_day_of_week_needs_enough_history(events, as_of):
    labels = DayOfWeekDetector().detect(_context(events("APAPAPA", step_days=7), as_of))

    assert labels == []


def test_recent_spike(events, as_of):
    assert RecentSpikeDetector().detect(_context(events("PPPPPPPPPPAAAPP"), as_of)) == [
        "Recent absence spike detected"
    ]
    # Only one more absence than the previous five sessions.
    assert RecentSpikeDetector().detect(_context(events("PPPPPAAPPPAAAPP"), as_of)) == []


def test_extended_streak_embeds_length(events, as_of):
    detector = ExtendedStreakDetector()

    assert detector.detect(_context(events("PAAAAP"), as_of)) == ["Extended 4-session absence streak"]
    assert detector.detect(_context(events("PAAAP"), as_of)) == []


def test_extended_streak_threshold_is_configurable(events, as_of):
    ctx = _context(events("PAAAAP"), as_of, AnalyticsConfig(extended_streak_threshold=5))

    assert ExtendedStreakDetector().detect(ctx) == []


def test_frequent_absences_are_both_intermittent_and_clustered(events, as_of):
    ctx = _context(events("APAPAPAPAP"), as_of)

    assert IntermittentAbsenceDetector().detect(ctx) == ["Frequent intermittent absences"]
    assert ClusteredAbsenceDetector().detect(ctx) == ["Clustered absence pattern"]


def test_weekly_absences_are_clustered_but_not_intermittent(events, as_of):
    ctx = _context(events("APAPAPAPAP", step_days=3), as_of)

    assert IntermittentAbsenceDetector().detect(ctx) == []
    assert ClusteredAbsenceDetector().detect(ctx) == ["Clustered absence pattern"]


def test_gap_detectors_need_five_absences(events, as_of):
    ctx = _context(events("PPAPAPAPAP"), as_of)

    assert IntermittentAbsenceDetector().detect(ctx) == []
    assert ClusteredAbsenceDetector().detect(ctx) == []


def test_chronic_lateness(events, as_of):
    assert ChronicLatenessDetector().detect(_context(events("PPPPPPLLLL"), as_of)) == [
        "Chronic lateness (40% of sessions)"
    ]
    assert ChronicLatenessDetector().detect(_context(events("PPPPLLL"), as_of)) == []


def test_sharp_decline_needs_weak_attendance(events, as_of):
    ctx = _context(events("PPPPPAAAAA"), as_of)
    healthy = replace(ctx, metrics=replace(ctx.metrics, attendance_rate=75.0))

    assert SharpDeclineDetector().detect(ctx) == ["Sharp recent decline in attendance"]
    assert SharpDeclineDetector().detect(healthy) == []


def test_scanner_reports_labels_in_detector_order(events, as_of):
    labels = PatternScanner().scan(_context(events("PPPPPAAAAA"), as_of))

    assert labels == (
        "Recent absence spike detected",
        "Extended 5-session absence streak",
        "Frequent intermittent absences",
        "Sharp recent decline in attendance",
        "Clustered absence pattern",
    )


def test_healthy_history_has_no_patterns(events, as_of):
    assert PatternScanner().scan(_context(events("P" * 20), as_of)) == ()


class AlwaysDetector(PatternDetector):
    def detect(self, ctx):
        return ["Custom signal"]


def test_factory_appends_extra_detectors(events, as_of):
    detectors = PatternDetectorFactory(extra=[AlwaysDetector()]).build()

    labels = PatternScanner(detectors).scan(_context(events("P" * 20), as_of))

    assert len(detectors) == 8
    assert labels == ("Custom signal",)


class TestEvidence:
    def test_defaults_to_the_label_count(self, events, as_of):
        ctx = _context(events("PAAAAP"), as_of)

        assert ExtendedStreakDetector().evidence(ctx) == 1
        assert ChronicLatenessDetector().evidence(ctx) == 0

    def test_recent_spike_counts_without_the_comparison(self, events, as_of):
        ctx = _context(events("PPPPPAAPPPAAAPP"), as_of)

        assert RecentSpikeDetector().detect(ctx) == []
        assert RecentSpikeDetector().evidence(ctx) == 1

    def test_dense_run_counts_inside_a_sparse_history(self, events, as_of):
        ctx = _context(events("A" + "P" * 19 + "APAPAPAPA"), as_of)

        assert IntermittentAbsenceDetector().detect(ctx) == []
        assert IntermittentAbsenceDetector().evidence(ctx) == 1
        assert ClusteredAbsenceDetector().evidence(ctx) == 1

    def test_gap_evidence_needs_five_absences(self, events, as_of):
        ctx = _context(events("PPAPAPAPAP"), as_of)

        assert IntermittentAbsenceDetector().evidence(ctx) == 0
        assert ClusteredAbsenceDetector().evidence(ctx) == 0

    def test_sharp_decline_still_needs_weak_attendance(self, events, as_of):
        ctx = _context(events("PPPPPAAAAA"), as_of)
        healthy = replace(ctx, metrics=replace(ctx.metrics, attendance_rate=75.0))

        assert SharpDeclineDetector().evidence(ctx) == 1
        assert SharpDeclineDetector().evidence(healthy) == 0

    def test_scanner_sums_the_evidence(self, events, as_of):
        assert PatternScanner().evidence(_context(events("PPPPPAAAAA"), as_of)) == 5
        assert PatternScanner().evidence(_context(events("P" * 20), as_of)) == 0
