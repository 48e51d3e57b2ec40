from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import fetchall, normalize_mysql_date, read_cursor
from .repository import AttendanceHistoryRepository


class MySQLAttendanceHistoryRepository(AttendanceHistoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        course_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> Sequence[Mapping[str, Any]]:
        sql = """
            SELECT a.student_id, s.course_id, a.attendance_date, a.status,
                   st.name AS student_name, st.email, st.phone, c.course_name
            FROM attendance a
            JOIN session s ON s.session_id = a.session_id
            LEFT JOIN student st ON st.student_id = a.student_id
            LEFT JOIN course c ON c.course_id = s.course_id
            WHERE a.attendance_date BETWEEN %s AND %s
        """
        params: list[Any] = [start_date, end_date]

        if course_id:
            sql += " AND s.course_id=%s"
            params.append(course_id)
        if student_id:
            sql += " AND a.student_id=%s"
            params.append(student_id)

        # Write order: later marks of the same date must come last.
        sql += " ORDER BY COALESCE(a.marked_at, a.updated_at, a.created_at), a.attendance_id"

        with read_cursor(self._conn_factory) as cur:
            cur.execute(sql, tuple(params))
            rows = fetchall(cur)

        return [
            {
                "student_id": str(r["student_id"]),
                "course_id": str(r["course_id"]),
                "attendance_date": normalize_mysql_date(r.get("attendance_date")),
                "status": r.get("status"),
                "student_name": r.get("student_name"),
                "email": r.get("email"),
                "phone": r.get("phone"),
                "course_name": r.get("course_name"),
            }
            for r in rows
        ]
