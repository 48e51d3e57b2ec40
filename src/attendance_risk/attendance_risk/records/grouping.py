from __future__ import annotations

from typing import Iterable, Iterator

from .model import AttendanceEvent, PairKey

StudentCourseGroups = dict[str, dict[str, list[AttendanceEvent]]]


def group_by_student_course(events: Iterable[AttendanceEvent]) -> StudentCourseGroups:
    """Two-level grouping: student id -> course id -> events in input order."""
    groups: StudentCourseGroups = {}
    for event in events:
        groups.setdefault(event.student_id, {}).setdefault(event.course_id, []).append(event)
    return groups


def iter_pairs(groups: StudentCourseGroups) -> Iterator[tuple[PairKey, list[AttendanceEvent]]]:
    for student_id, courses in groups.items():
        for course_id, events in courses.items():
            yield PairKey(student_id, course_id), events
