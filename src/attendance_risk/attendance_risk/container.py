from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .core.config import AnalyticsConfig
from .database.connection import DBConfig, DatabaseConnection
from .engine import AttendanceRiskEngine
from .records.mysql_history_repository import MySQLAttendanceHistoryRepository
from .records.repository import AttendanceHistoryRepository
from .reports.service import RiskReportService


@dataclass(frozen=True)
class Container:
    history_repo: AttendanceHistoryRepository
    engine: AttendanceRiskEngine
    risk_report_service: RiskReportService


def build_container(
    *,
    db_config: Mapping[str, Any],
    analytics: Optional[Mapping[str, Any]] = None,
    history_repo: Optional[AttendanceHistoryRepository] = None,
) -> Container:
    if history_repo is None:
        conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))
        history_repo = MySQLAttendanceHistoryRepository(conn)

    engine = AttendanceRiskEngine(AnalyticsConfig.from_mapping(analytics))
    risk_report_service = RiskReportService(history_repo, engine)

    return Container(
        history_repo=history_repo,
        engine=engine,
        risk_report_service=risk_report_service,
    )
