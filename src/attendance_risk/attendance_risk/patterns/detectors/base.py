from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import PatternContext


class PatternDetector(ABC):
    """Strategy Pattern: one statistically guarded behavioural signal."""

    @abstractmethod
    def detect(self, ctx: PatternContext) -> list[str]:
        """Labels for every occurrence found; empty when the guard fails."""
        raise NotImplementedError

    def evidence(self, ctx: PatternContext) -> int:
        """How many labels this detector counts towards the scores.

        Must never drop when an attended day becomes an absence. Detectors
        whose labels can vanish that way override it with a looser test.
        """
        return len(self.detect(ctx))
