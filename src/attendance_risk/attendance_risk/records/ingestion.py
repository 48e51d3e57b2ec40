"""Ingestion boundary.

Rows from the attendance store arrive loosely shaped: ids may be top-level
or nested under ``student``/``session`` relations, and a relation may be a
single mapping or a one-element list. Everything is coerced here into a
strict :class:`AttendanceEvent`; the engine never sees the raw shape.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional

from ..common.datetime_utils import parse_iso_date
from ..core.constants import STATUS_ALIASES
from ..core.enums import AttendanceStatus
from .model import AttendanceEvent, IngestionResult, PairKey

logger = logging.getLogger(__name__)


def _relation(row: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    value = row.get(name)
    if isinstance(value, (list, tuple)):
        value = value[0] if value else None
    return value if isinstance(value, Mapping) else {}


def _identifier(row: Mapping[str, Any], key: str, relation: str) -> Optional[str]:
    value = row.get(key)
    if value in (None, ""):
        value = _relation(row, relation).get(key)
    if value in (None, ""):
        return None
    return str(value)


def coerce_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return parse_iso_date(value)
        except ValueError:
            return None
    return None


def coerce_status(value: Any) -> Optional[AttendanceStatus]:
    if isinstance(value, AttendanceStatus):
        return value
    if not isinstance(value, str):
        return None
    return STATUS_ALIASES.get(value.strip().lower())


def coerce_row(row: Mapping[str, Any]) -> Optional[AttendanceEvent]:
    """Return a strict event, or ``None`` when the row is malformed."""
    student_id = _identifier(row, "student_id", "student")
    course_id = _identifier(row, "course_id", "session")
    work_date = coerce_date(row.get("attendance_date") or row.get("date"))
    status = coerce_status(row.get("status"))

    if not student_id or not course_id or work_date is None or status is None:
        return None
    return AttendanceEvent(student_id=student_id, course_id=course_id, date=work_date, status=status)


def ingest_rows(rows: Iterable[Mapping[str, Any]]) -> IngestionResult:
    """Coerce a batch of raw rows, counting what had to be dropped.

    Input order is preserved; it is the last-write-wins order used by the
    normalizer when a date was marked more than once.
    """
    events: list[AttendanceEvent] = []
    malformed = 0
    unmarked = 0

    for row in rows:
        event = coerce_row(row)
        if event is None:
            malformed += 1
            logger.debug("Dropping malformed attendance row: %r", row)
            continue
        if event.status is AttendanceStatus.UNMARKED:
            unmarked += 1
            continue
        events.append(event)

    if malformed:
        logger.info("Ingested %d attendance rows, dropped %d malformed", len(events), malformed)
    return IngestionResult(events=tuple(events), malformed=malformed, unmarked=unmarked)


PROFILE_FIELDS = ("student_name", "email", "phone", "course_name")


def coerce_profile(row: Mapping[str, Any]) -> dict[str, Optional[str]]:
    """Display fields of a row, top-level or from the nested relations."""
    student = _relation(row, "student")
    course = _relation(_relation(row, "session"), "course")
    return {
        "student_name": row.get("student_name") or student.get("name"),
        "email": row.get("email") or student.get("email"),
        "phone": row.get("phone") or student.get("phone"),
        "course_name": row.get("course_name") or course.get("course_name"),
    }


def collect_profiles(rows: Iterable[Mapping[str, Any]]) -> dict[PairKey, dict[str, Optional[str]]]:
    """Display fields per pair; later non-empty values win."""
    profiles: dict[PairKey, dict[str, Optional[str]]] = {}
    for row in rows:
        student_id = _identifier(row, "student_id", "student")
        course_id = _identifier(row, "course_id", "session")
        if not student_id or not course_id:
            continue
        profile = profiles.setdefault(PairKey(student_id, course_id), dict.fromkeys(PROFILE_FIELDS))
        for key, value in coerce_profile(row).items():
            if value:
                profile[key] = value
    return profiles
