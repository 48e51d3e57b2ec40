from __future__ import annotations

import io

import pandas as pd
import pytest

from src.attendance_risk.attendance_risk.container import build_container
from src.attendance_risk.attendance_risk.main import create_app


class StaticHistoryRepo:
    def __init__(self, rows):
        self._rows = rows

    def get_rows(self, *, start_date, end_date, course_id=None, student_id=None):
        return self._rows


class BrokenHistoryRepo:
    def get_rows(self, **kwargs):
        raise RuntimeError("database is down")


def _client(monkeypatch, repo):
    monkeypatch.setenv("APP_ENV", "testing")
    container = build_container(db_config={}, history_repo=repo)
    return create_app(container).test_client()


@pytest.fixture
def client(monkeypatch, events, rows):
    repo = StaticHistoryRepo(rows(events("PPPPPAAAAA")) + rows(events("P" * 12, student_id="s3")))
    return _client(monkeypatch, repo)


def test_alerts_endpoint(client):
    resp = client.get("/api/risk/alerts?start=2026-01-01&end=2026-03-02")

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["success"] is True
    assert [r["student_id"] for r in body["data"]] == ["s1"]
    assert body["data"][0]["risk_level"] == "critical"
    assert body["malformed_records"] == 0


def test_alerts_endpoint_rejects_bad_dates(client):
    assert client.get("/api/risk/alerts?start=yesterday").status_code == 400
    assert client.get("/api/risk/alerts?start=2026-03-02&end=2026-01-01").status_code == 400


def test_student_endpoint(client):
    resp = client.get("/api/risk/students/s1/courses/c1?end=2026-03-02")

    assert resp.status_code == 200
    data = resp.get_json()["data"]
    assert data["assessed"] is True
    assert data["risk_tier"] == "CRITICAL"
    assert data["metrics"]["ongoing_absence_streak"] == 5


def test_student_endpoint_reports_no_assessment(client):
    data = client.get("/api/risk/students/s3/courses/c1?end=2026-03-02").get_json()["data"]

    assert data == {
        "student_id": "s3",
        "course_id": "c1",
        "assessed": False,
        "reason": "NOTHING_TO_FLAG",
        "should_alert": False,
    }


def test_student_endpoint_unknown_pair(client):
    assert client.get("/api/risk/students/s1/courses/c2?end=2026-03-02").status_code == 404


def test_excel_export(client):
    resp = client.get("/reports/risk.xlsx?start=2026-01-01&end=2026-03-02")

    assert resp.status_code == 200
    assert "attendance_risk_report.xlsx" in resp.headers["Content-Disposition"]

    alerts = pd.read_excel(io.BytesIO(resp.data), sheet_name="Alerts")
    assert list(alerts["Student"]) == ["s1"]


def test_repository_failure_is_500(monkeypatch):
    client = _client(monkeypatch, BrokenHistoryRepo())

    resp = client.get("/api/risk/alerts")

    assert resp.status_code == 500
    assert resp.get_json()["success"] is False


def test_export_failure_is_500(monkeypatch):
    client = _client(monkeypatch, BrokenHistoryRepo())

    resp = client.get("/reports/risk.xlsx")

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "message": "Internal error while exporting risk report"}
