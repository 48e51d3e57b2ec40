from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

import numpy as np

from ..core import constants as c
from ..core.config import AnalyticsConfig
from ..core.enums import TrendClassification
from ..records.model import NormalizedSeries, SeriesEntry
from .model import TrendResult, TrendVariant

# Below this the total sum of squares is treated as zero (constant rate).
_SS_EPSILON = 1e-9
# Fits are rounded to this many decimals before classification so that
# equal rate rows always land in the same class.
_FIT_DECIMALS = 9


def cumulative_rates(series: NormalizedSeries) -> list[float]:
    """Running present-rate after each effective day, oldest first."""
    rates: list[float] = []
    present = 0
    total = 0
    for entry in series.chronological():
        if not entry.status.is_effective:
            continue
        total += 1
        if entry.status.is_present:
            present += 1
        rates.append(present / total * 100)
    return rates


def trend_window(points: int) -> int:
    """Number of most recent rate points the trend is fitted on."""
    return max(c.TREND_WINDOW_MIN, min(c.TREND_WINDOW_MAX, int(points * c.TREND_WINDOW_FRACTION)))


def momentum_windows(days: int) -> tuple[int, int]:
    """``(very_recent, recent)`` effective-entry counts compared by momentum."""
    recent = max(c.MOMENTUM_WINDOW_MIN, min(c.MOMENTUM_WINDOW_MAX, int(days * c.MOMENTUM_WINDOW_FRACTION)))
    return min(c.MOMENTUM_VERY_RECENT_MAX, recent // 2), recent


def fit_many(rates: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Row-wise least squares of ``rates[k, i]`` against i = 1..n.

    Returns ``(slopes, r_squared)``, one value per row, unrounded.
    """
    n = rates.shape[1]
    x = np.arange(1, n + 1, dtype=float)
    dx = x - x.mean()
    dy = rates - rates.mean(axis=1, keepdims=True)
    slopes = (dy * dx).sum(axis=1) / (dx**2).sum()

    ss_res = ((dy - slopes[:, None] * dx) ** 2).sum(axis=1)
    ss_tot = (dy**2).sum(axis=1)
    flat = ss_tot < _SS_EPSILON
    r_squared = np.ones_like(ss_tot)
    r_squared[~flat] = np.clip(1 - ss_res[~flat] / ss_tot[~flat], 0.0, 1.0)
    return np.round(slopes, _FIT_DECIMALS), np.round(r_squared, _FIT_DECIMALS)


def _present_rate(entries: Sequence[SeriesEntry]) -> float:
    if not entries:
        return 0.0
    return sum(1 for e in entries if e.status.is_present) / len(entries)


def _mean_rows(presence: np.ndarray) -> np.ndarray:
    if presence.shape[1] == 0:
        return np.zeros(presence.shape[0])
    return presence.mean(axis=1)


class TrendAnalyzer:
    """Least-squares trend over a rate series, plus momentum."""

    def __init__(self, config: AnalyticsConfig | None = None):
        self._config = config or AnalyticsConfig()

    def fit(self, rates: Sequence[float], *, baseline_rate: Optional[float] = None) -> TrendResult:
        """Fit ``rate = slope * i + intercept`` for i = 1..n (oldest first)."""
        if len(rates) < 2:
            return TrendResult.flat()
        slopes, r_squared = fit_many(np.asarray([rates], dtype=float))
        return self._result(float(slopes[0]), float(r_squared[0]), baseline_rate=baseline_rate)

    def _result(
        self,
        slope: float,
        r_squared: float,
        *,
        baseline_rate: Optional[float],
        momentum: float = 0.0,
    ) -> TrendResult:
        return TrendResult(
            slope=round(slope, 1),
            r_squared=round(r_squared, 2),
            classification=self.classify(slope, r_squared, baseline_rate=baseline_rate),
            momentum=momentum,
        )

    def classify(self, slope: float, r_squared: float, *, baseline_rate: Optional[float] = None) -> TrendClassification:
        cfg = self._config
        if r_squared < cfg.trend_r_squared_floor:
            return TrendClassification.VOLATILE

        improving_at = cfg.trend_slope_threshold
        declining_at = cfg.trend_slope_threshold
        if baseline_rate is not None:
            # A small rise matters from a poor baseline, a small drop from a good one.
            if baseline_rate < c.TREND_LOW_BASELINE_RATE:
                improving_at = cfg.trend_sensitive_slope_threshold
            if baseline_rate > c.TREND_HIGH_BASELINE_RATE:
                declining_at = cfg.trend_sensitive_slope_threshold

        if slope > improving_at:
            return TrendClassification.IMPROVING
        if slope < -declining_at:
            return TrendClassification.DECLINING
        return TrendClassification.STABLE

    def momentum(self, series: NormalizedSeries) -> float:
        if len(series) < self._config.min_days_momentum:
            return 0.0
        very_recent, recent_window = momentum_windows(len(series))

        effective = series.effective_entries
        delta = _present_rate(effective[:very_recent]) - _present_rate(effective[very_recent:recent_window])
        return round(delta, 2)

    def analyze(self, series: NormalizedSeries, *, attendance_rate: Optional[float] = None) -> TrendResult:
        rates = cumulative_rates(series)
        result = self.fit(rates[-trend_window(len(rates)):], baseline_rate=attendance_rate)
        return replace(result, momentum=self.momentum(series))

    def variants(self, series: NormalizedSeries) -> tuple[TrendVariant, ...]:
        """Trends of every version of the series that keeps only some recent absences.

        Absences older than the trend and momentum windows are always marked
        present, and each recent absence is either kept or marked present.
        Adding an absence anywhere can therefore only add versions to the set.
        """
        effective = series.effective_entries
        n = len(effective)
        if n == 0:
            return ()

        use_momentum = len(series) >= self._config.min_days_momentum
        very_recent, recent_window = momentum_windows(len(series))
        window = min(n, trend_window(n))
        span = min(n, max(window, recent_window if use_momentum else 0))

        presence = np.array([1.0 if e.status.is_present else 0.0 for e in effective])
        absent_at = np.flatnonzero(presence[:span] == 0)
        kept = (np.arange(2 ** len(absent_at))[:, None] >> np.arange(len(absent_at))) & 1

        # One row per version, newest first like ``effective``.
        rows = np.ones((len(kept), n))
        rows[:, absent_at] = 1 - kept
        rates_of_rows = rows.sum(axis=1) / n * 100

        if window >= 2:
            oldest_first = rows[:, ::-1]
            running = np.cumsum(oldest_first, axis=1) / np.arange(1, n + 1) * 100
            slopes, r_squared = fit_many(running[:, n - window :])
        else:
            slopes = np.zeros(len(rows))
            r_squared = np.ones(len(rows))

        if use_momentum:
            momenta = np.round(
                _mean_rows(rows[:, :very_recent]) - _mean_rows(rows[:, very_recent:recent_window]), 2
            )
        else:
            momenta = np.zeros(len(rows))

        variants = []
        for slope, r2, momentum, rate in zip(slopes, r_squared, momenta, rates_of_rows):
            rate = float(rate)
            if window >= 2:
                trend = self._result(float(slope), float(r2), baseline_rate=rate, momentum=float(momentum))
            else:
                trend = replace(TrendResult.flat(), momentum=float(momentum))
            variants.append(TrendVariant(trend=trend, attendance_rate=rate))
        return tuple(variants)
