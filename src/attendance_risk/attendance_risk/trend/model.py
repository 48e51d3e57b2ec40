from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import TrendClassification


@dataclass(frozen=True)
class TrendResult:
    """Linear trend of attendance rate over an index.

    ``slope`` is in percentage points per index step (1 decimal),
    ``r_squared`` in [0, 1] (2 decimals). ``momentum`` is the very-recent
    present-rate minus the mid-recent present-rate, as a fraction.
    """

    slope: float
    r_squared: float
    classification: TrendClassification
    momentum: float = 0.0

    @classmethod
    def flat(cls) -> "TrendResult":
        return cls(slope=0.0, r_squared=1.0, classification=TrendClassification.STABLE, momentum=0.0)

    @property
    def is_declining(self) -> bool:
        return self.classification is TrendClassification.DECLINING

    def as_dict(self) -> dict:
        return {
            "slope": self.slope,
            "r_squared": self.r_squared,
            "classification": self.classification.value,
            "momentum": self.momentum,
        }


@dataclass(frozen=True)
class TrendVariant:
    """Trend of a version of the series with some absences marked present.

    ``attendance_rate`` is that version's own rate, used as its baseline.
    """

    trend: TrendResult
    attendance_rate: float
