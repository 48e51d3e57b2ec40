from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Protocol, Sequence


class AttendanceHistoryRepository(Protocol):
    def get_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        course_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> Sequence[Mapping[str, Any]]:
        """Raw attendance rows in write order (oldest write first).

        Each row carries at least ``student_id``, ``course_id``,
        ``attendance_date`` and ``status``. ``student_name``, ``email``,
        ``phone`` and ``course_name`` are passed through to alert payloads
        when present.
        """

        raise NotImplementedError
