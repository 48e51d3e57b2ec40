from __future__ import annotations

import io
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Mapping, Optional, Sequence

import pandas as pd

from ..common.datetime_utils import today
from ..core.constants import DEFAULT_REPORT_DAYS
from ..core.enums import RiskTier
from ..core.exceptions import ValidationError
from ..engine import AttendanceRiskEngine, BatchResult
from ..records.ingestion import PROFILE_FIELDS, collect_profiles
from ..records.model import PairKey
from ..records.repository import AttendanceHistoryRepository
from ..risk.model import AssessmentOutcome, RiskAssessment

logger = logging.getLogger(__name__)

EXCEL_COLUMNS = {
    "student_id": "Student",
    "student_name": "Student name",
    "email": "Email",
    "course_id": "Course",
    "course_name": "Course name",
    "risk_level": "Risk level",
    "risk_score": "Risk score",
    "engagement_score": "Engagement",
    "attendance_rate": "Attendance %",
    "days_absent": "Days absent",
    "consecutive_absences": "Longest streak",
    "trend": "Trend",
    "last_absence_date": "Last absence",
    "last_attended_date": "Last attended",
    "patterns": "Patterns",
}


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]
    malformed_records: int = 0


def alert_payload(assessment: RiskAssessment, profile: Optional[Mapping[str, Any]] = None) -> dict:
    """Dashboard/notification payload for one alerting student.

    ``profile`` supplies the display fields (name, contacts, course name);
    any that are missing are ``None``.
    """
    m = assessment.metrics
    profile = profile or {}
    return {
        "student_id": assessment.student_id,
        "course_id": assessment.course_id,
        **{key: profile.get(key) for key in PROFILE_FIELDS},
        "risk_level": assessment.risk_tier.value.lower() if assessment.risk_tier else None,
        "risk_score": assessment.risk_score,
        "should_alert": assessment.should_alert,
        "attendance_rate": round(m.attendance_rate, 1),
        "engagement_score": round(assessment.engagement_score),
        "trend": assessment.trend.classification.value.lower(),
        "slope": assessment.trend.slope,
        "r_squared": assessment.trend.r_squared,
        "patterns": list(assessment.patterns),
        "consecutive_absences": m.max_consecutive_absences,
        "recent_consecutive_absences": m.recent_consecutive_absences,
        "absent_dates": [d.isoformat() for d in m.absent_dates],
        "last_absence_date": m.last_absence_date.isoformat() if m.last_absence_date else None,
        "last_attended_date": m.last_attended_date.isoformat() if m.last_attended_date else None,
        "days_absent": m.absent_days,
        "total_days": m.total_days,
        "present_days": m.present_days,
    }


class RiskReportService:
    """Report Assembler: turns engine output into display and alert payloads."""

    def __init__(self, history: AttendanceHistoryRepository, engine: AttendanceRiskEngine):
        self._history = history
        self._engine = engine

    def _resolve_range(self, start: Optional[date], end: Optional[date]) -> tuple[date, date]:
        end = end or today()
        start = start or end - timedelta(days=DEFAULT_REPORT_DAYS)
        if start > end:
            raise ValidationError("Start date must not be after end date")
        return start, end

    def _load(
        self,
        *,
        start: Optional[date],
        end: Optional[date],
        course_id: Optional[str],
        student_id: Optional[str],
    ) -> tuple[Sequence[Mapping[str, Any]], BatchResult]:
        start, end = self._resolve_range(start, end)
        rows = self._history.get_rows(start_date=start, end_date=end, course_id=course_id, student_id=student_id)
        return rows, self._engine.assess_batch(rows, as_of=end)

    def run_batch(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        course_id: Optional[str] = None,
        student_id: Optional[str] = None,
    ) -> BatchResult:
        _, batch = self._load(start=start, end=end, course_id=course_id, student_id=student_id)
        return batch

    def build_risk_report(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        course_id: Optional[str] = None,
    ) -> ReportData:
        rows, batch = self._load(start=start, end=end, course_id=course_id, student_id=None)
        profiles = collect_profiles(rows)
        alerts = batch.alerts

        counts = Counter(a.risk_tier for a in alerts)
        summary = [{"risk_level": tier.value.lower(), "students": counts.get(tier, 0)} for tier in RiskTier]
        summary.append({"risk_level": "not_assessed", "students": len(batch.skipped)})

        return ReportData(
            rows=[alert_payload(a, profiles.get(PairKey(a.student_id, a.course_id))) for a in alerts],
            summary=summary,
            malformed_records=batch.malformed_records,
        )

    def assess_student(
        self,
        *,
        student_id: str,
        course_id: str,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Optional[AssessmentOutcome]:
        """Outcome for one pair, or ``None`` when the store has no rows for it."""
        batch = self.run_batch(start=start, end=end, course_id=course_id, student_id=student_id)
        for outcome in batch.outcomes:
            if outcome.student_id == student_id and outcome.course_id == course_id:
                return outcome
        return None

    def export_excel(self, report: ReportData) -> io.BytesIO:
        rows = [dict(r, patterns="; ".join(r["patterns"])) for r in report.rows]
        df = pd.DataFrame(rows, columns=list(EXCEL_COLUMNS)).rename(columns=EXCEL_COLUMNS)
        summary = pd.DataFrame(report.summary)

        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            df.to_excel(writer, index=False, sheet_name="Alerts")
            summary.to_excel(writer, index=False, sheet_name="Summary")
        output.seek(0)
        logger.debug("Exported %d alert rows to Excel", len(rows))
        return output
