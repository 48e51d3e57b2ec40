from __future__ import annotations

from datetime import date

import pandas as pd
import pytest

from src.attendance_risk.attendance_risk.core.exceptions import ValidationError
from src.attendance_risk.attendance_risk.engine import AttendanceRiskEngine
from src.attendance_risk.attendance_risk.reports.service import EXCEL_COLUMNS, RiskReportService, alert_payload


class FakeHistoryRepo:
    def __init__(self, rows):
        self._rows = rows
        self.last_args = None

    def get_rows(self, *, start_date: date, end_date: date, course_id=None, student_id=None):
        self.last_args = {
            "start_date": start_date,
            "end_date": end_date,
            "course_id": course_id,
            "student_id": student_id,
        }
        return self._rows


@pytest.fixture
def store_rows(events, rows):
    return (
        rows(events("PPPPPAAAAA", student_id="s1"))
        + rows(events("P" * 12, student_id="s3"))
        + [{"student_id": "s4", "attendance_date": "2026-03-01", "status": "absent"}]
    )


def test_alert_payload(events, as_of):
    assessment = AttendanceRiskEngine().assess(events("PPPPPAAAAA"), as_of=as_of)

    payload = alert_payload(assessment)

    assert payload["risk_level"] == "critical"
    assert payload["should_alert"] is True
    assert payload["attendance_rate"] == 50.0
    assert payload["trend"] == "declining"
    assert payload["consecutive_absences"] == 5
    assert payload["days_absent"] == 5
    assert payload["last_absence_date"] == as_of.isoformat()
    assert payload["last_attended_date"] == "2026-02-25"
    assert payload["absent_dates"][0] == as_of.isoformat()
    assert "Extended 5-session absence streak" in payload["patterns"]

def test_alert_payload_carries_contact_details(events, as_of):
    assessment = AttendanceRiskEngine().assess(events("PPPPPAAAAA"), as_of=as_of)

    payload = alert_payload(assessment, {"student_name": "Mai Tran", "email": "mai@example.com"})
    bare = alert_payload(assessment)

    assert payload["student_name"] == "Mai Tran"
    assert payload["email"] == "mai@example.com"
    assert payload["phone"] is None
    assert payload["course_name"] is None
    assert (bare["student_name"], bare["email"], bare["phone"], bare["course_name"]) == (None, None, None, None)


def test_report_rows_name_the_student_and_course(events, rows, as_of):
    store = [
        dict(r, student_name="Mai Tran", email="mai@example.com", phone="0901", course_name="English B1")
        for r in rows(events("PPPPPAAAAA"))
    ]
    svc = RiskReportService(FakeHistoryRepo(store), AttendanceRiskEngine())

    (row,) = svc.build_risk_report(start=date(2026, 1, 1), end=as_of).rows

    assert row["student_name"] == "Mai Tran"
    assert row["email"] == "mai@example.com"
    assert row["phone"] == "0901"
    assert row["course_name"] == "English B1"



def test_risk_report_rows_and_summary(store_rows, as_of):
    repo = FakeHistoryRepo(store_rows)
    svc = RiskReportService(repo, AttendanceRiskEngine())

    report = svc.build_risk_report(start=date(2026, 1, 1), end=as_of)

    assert [r["student_id"] for r in report.rows] == ["s1"]
    assert report.malformed_records == 1
    summary = {s["risk_level"]: s["students"] for s in report.summary}
    assert summary == {"critical": 1, "high": 0, "medium": 0, "watch": 0, "not_assessed": 1}


def test_report_forwards_filters(as_of):
    repo = FakeHistoryRepo([])
    svc = RiskReportService(repo, AttendanceRiskEngine())

    svc.build_risk_report(start=date(2026, 1, 1), end=as_of, course_id="c9")

    assert repo.last_args == {
        "start_date": date(2026, 1, 1),
        "end_date": as_of,
        "course_id": "c9",
        "student_id": None,
    }


def test_report_defaults_to_recent_history(as_of):
    repo = FakeHistoryRepo([])
    svc = RiskReportService(repo, AttendanceRiskEngine())

    svc.build_risk_report(end=as_of)

    assert (as_of - repo.last_args["start_date"]).days == 120


def test_start_after_end_is_rejected(as_of):
    svc = RiskReportService(FakeHistoryRepo([]), AttendanceRiskEngine())

    with pytest.raises(ValidationError):
        svc.build_risk_report(start=as_of, end=date(2026, 1, 1))


def test_assess_student(store_rows, as_of):
    svc = RiskReportService(FakeHistoryRepo(store_rows), AttendanceRiskEngine())

    assert svc.assess_student(student_id="s1", course_id="c1", end=as_of).should_alert is True
    assert svc.assess_student(student_id="s3", course_id="c1", end=as_of).assessed is False
    assert svc.assess_student(student_id="s1", course_id="c2", end=as_of) is None


def test_export_excel(store_rows, as_of):
    svc = RiskReportService(FakeHistoryRepo(store_rows), AttendanceRiskEngine())
    report = svc.build_risk_report(start=date(2026, 1, 1), end=as_of)

    output = svc.export_excel(report)
    alerts = pd.read_excel(output, sheet_name="Alerts")
    output.seek(0)
    summary = pd.read_excel(output, sheet_name="Summary")

    assert list(alerts.columns) == list(EXCEL_COLUMNS.values())
    assert alerts.loc[0, "Student"] == "s1"
    assert alerts.loc[0, "Risk level"] == "critical"
    assert "Extended 5-session absence streak" in alerts.loc[0, "Patterns"]
    assert len(summary) == 5
