from __future__ import annotations

from dataclasses import dataclass

from ..core.config import AnalyticsConfig
from ..metrics.model import CoreMetrics
from ..records.model import NormalizedSeries
from ..trend.model import TrendResult, TrendVariant


@dataclass(frozen=True)
class PatternContext:
    """Everything a detector may look at; detectors never modify it.

    ``variants`` are the trends of the series with some recent absences
    marked present (see ``TrendAnalyzer.variants``).
    """

    series: NormalizedSeries
    metrics: CoreMetrics
    trend: TrendResult
    config: AnalyticsConfig
    variants: tuple[TrendVariant, ...] = ()

    def trend_variants(self) -> tuple[TrendVariant, ...]:
        return self.variants or (TrendVariant(trend=self.trend, attendance_rate=self.metrics.attendance_rate),)


# Ordered, human-readable labels. Downstream code only counts them.
PatternSet = tuple[str, ...]
