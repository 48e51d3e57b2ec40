from __future__ import annotations

import logging
from datetime import date
from typing import Sequence

from ..core.enums import AttendanceStatus, NormalizedStatus
from ..core.exceptions import ContractViolationError
from .model import AttendanceEvent, NormalizationResult, NormalizedSeries, PairKey, SeriesEntry

logger = logging.getLogger(__name__)

_NORMALIZED = {
    AttendanceStatus.ATTENDED: NormalizedStatus.ATTENDED,
    AttendanceStatus.LATE: NormalizedStatus.LATE,
    AttendanceStatus.ABSENT: NormalizedStatus.ABSENT,
    AttendanceStatus.EXCUSED: NormalizedStatus.NEUTRAL,
    AttendanceStatus.VACATION: NormalizedStatus.NEUTRAL,
}


def normalize_status(status: AttendanceStatus) -> NormalizedStatus:
    return _NORMALIZED[status]


def pair_of(events: Sequence[AttendanceEvent]) -> PairKey:
    """The single (student, course) pair the events belong to."""
    pairs = {PairKey(e.student_id, e.course_id) for e in events}
    if len(pairs) != 1:
        raise ContractViolationError(
            f"Expected records for exactly one student/course pair, got {len(pairs)}: "
            + ", ".join(sorted(str(p) for p in pairs))
        )
    return next(iter(pairs))


class RecordNormalizer:
    """Deduplicate by date (last write wins) and sort newest first."""

    def normalize(self, events: Sequence[AttendanceEvent], *, pair: PairKey | None = None) -> NormalizationResult:
        if pair is None:
            if not events:
                raise ContractViolationError("Cannot infer the student/course pair of an empty record set")
            pair = pair_of(events)
        elif events and pair_of(events) != pair:
            raise ContractViolationError(f"Records do not belong to {pair}")

        by_date: dict[date, NormalizedStatus] = {}
        unmarked = 0
        duplicates = 0
        for event in events:
            if event.status is AttendanceStatus.UNMARKED:
                unmarked += 1
                continue
            if event.date in by_date:
                duplicates += 1
            by_date[event.date] = normalize_status(event.status)

        entries = tuple(
            SeriesEntry(date=d, status=s) for d, s in sorted(by_date.items(), key=lambda item: item[0], reverse=True)
        )
        series = NormalizedSeries(student_id=pair.student_id, course_id=pair.course_id, entries=entries)
        if duplicates:
            logger.debug("Collapsed %d duplicate dates for %s", duplicates, pair)
        return NormalizationResult(series=series, dropped_unmarked=unmarked, duplicates_collapsed=duplicates)
