from __future__ import annotations

from datetime import date, timedelta
from typing import Sequence

import pytest

from src.attendance_risk.attendance_risk.core.enums import AttendanceStatus
from src.attendance_risk.attendance_risk.records.model import AttendanceEvent

# A Monday; every scenario is evaluated "as of" this date.
AS_OF = date(2026, 3, 2)

_CODES = {
    "P": AttendanceStatus.ATTENDED,
    "L": AttendanceStatus.LATE,
    "A": AttendanceStatus.ABSENT,
    "E": AttendanceStatus.EXCUSED,
    "V": AttendanceStatus.VACATION,
    "U": AttendanceStatus.UNMARKED,
}


def make_events(
    statuses: Sequence[str],
    *,
    end: date = AS_OF,
    step_days: int = 1,
    student_id: str = "s1",
    course_id: str = "c1",
) -> list[AttendanceEvent]:
    """Events oldest first from a status string like "PPPAA".

    The last status falls on ``end``; earlier ones go back ``step_days`` each.
    """
    n = len(statuses)
    return [
        AttendanceEvent(
            student_id=student_id,
            course_id=course_id,
            date=end - timedelta(days=(n - 1 - i) * step_days),
            status=_CODES[code],
        )
        for i, code in enumerate(statuses)
    ]


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def events():
    return make_events


def make_rows(events: Sequence[AttendanceEvent]) -> list[dict]:
    """Raw store rows, the shape the repositories return."""
    return [
        {
            "student_id": e.student_id,
            "course_id": e.course_id,
            "attendance_date": e.date.isoformat(),
            "status": e.status.value,
        }
        for e in events
    ]


@pytest.fixture
def rows():
    return make_rows
