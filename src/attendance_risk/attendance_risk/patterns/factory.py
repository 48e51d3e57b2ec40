from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from .detectors.base import PatternDetector
from .detectors.day_of_week import DayOfWeekDetector
from .detectors.decline import SharpDeclineDetector
from .detectors.gaps import ClusteredAbsenceDetector, IntermittentAbsenceDetector
from .detectors.lateness import ChronicLatenessDetector
from .detectors.spike import RecentSpikeDetector
from .detectors.streak import ExtendedStreakDetector


def default_detectors() -> list[PatternDetector]:
    """Detectors in the order their labels are reported."""
    return [
        DayOfWeekDetector(),
        RecentSpikeDetector(),
        ExtendedStreakDetector(),
        IntermittentAbsenceDetector(),
        ChronicLatenessDetector(),
        SharpDeclineDetector(),
        ClusteredAbsenceDetector(),
    ]


@dataclass
class PatternDetectorFactory:
    """Factory Pattern: assemble the detector chain for the scanner."""

    extra: Sequence[PatternDetector] = field(default_factory=tuple)

    def build(self) -> list[PatternDetector]:
        return default_detectors() + list(self.extra)

