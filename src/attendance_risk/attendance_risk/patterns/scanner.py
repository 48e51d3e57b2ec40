from __future__ import annotations

from typing import Sequence

from .detectors.base import PatternDetector
from .factory import PatternDetectorFactory
from .model import PatternContext, PatternSet


class PatternScanner:
    """Run every detector over one context and collect the labels."""

    def __init__(self, detectors: Sequence[PatternDetector] | None = None):
        self._detectors = list(detectors) if detectors is not None else PatternDetectorFactory().build()

    def scan(self, ctx: PatternContext) -> PatternSet:
        labels: list[str] = []
        for detector in self._detectors:
            labels.extend(detector.detect(ctx))
        return tuple(labels)

    def evidence(self, ctx: PatternContext) -> int:
        """Pattern count used for scoring."""
        return sum(detector.evidence(ctx) for detector in self._detectors)
