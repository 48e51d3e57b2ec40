from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.enums import AttendanceStatus, NormalizedStatus


@dataclass(frozen=True)
class AttendanceEvent:
    """One marked session for a (student, course) pair."""

    student_id: str
    course_id: str
    date: date
    status: AttendanceStatus


@dataclass(frozen=True)
class SeriesEntry:
    date: date
    status: NormalizedStatus


@dataclass(frozen=True)
class NormalizedSeries:
    """Deduplicated entries for one pair, newest first.

    No two entries share a date.
    """

    student_id: str
    course_id: str
    entries: tuple[SeriesEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def effective_entries(self) -> tuple[SeriesEntry, ...]:
        return tuple(e for e in self.entries if e.status.is_effective)

    def chronological(self) -> tuple[SeriesEntry, ...]:
        """Entries oldest first."""
        return tuple(reversed(self.entries))


@dataclass(frozen=True)
class NormalizationResult:
    series: NormalizedSeries
    dropped_unmarked: int = 0
    duplicates_collapsed: int = 0

    @property
    def is_empty(self) -> bool:
        return self.series.is_empty


@dataclass(frozen=True)
class IngestionResult:
    """Strict events plus counts of rows that could not be used."""

    events: tuple[AttendanceEvent, ...]
    malformed: int = 0
    unmarked: int = 0


@dataclass(frozen=True)
class PairKey:
    student_id: str
    course_id: str

    def __str__(self) -> str:
        return f"{self.student_id}/{self.course_id}"
