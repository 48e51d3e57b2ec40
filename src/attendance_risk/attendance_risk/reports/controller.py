from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from flask import Flask, jsonify, request, send_file

from ..common.datetime_utils import parse_iso_date
from ..core.exceptions import ValidationError
from ..container import Container

logger = logging.getLogger(__name__)


def _date_arg(name: str) -> Optional[date]:
    raw = request.args.get(name, "").strip()
    if not raw:
        return None
    try:
        return parse_iso_date(raw)
    except ValueError as e:
        raise ValidationError(f"{name} must be an ISO date (YYYY-MM-DD)") from e


def register(app: Flask, container: Container) -> None:
    service = container.risk_report_service

    @app.route("/api/risk/alerts", methods=["GET"], endpoint="api_risk_alerts")
    def api_risk_alerts():
        try:
            report = service.build_risk_report(
                start=_date_arg("start"),
                end=_date_arg("end"),
                course_id=request.args.get("course_id") or None,
            )
            return jsonify(
                {
                    "success": True,
                    "data": report.rows,
                    "summary": report.summary,
                    "malformed_records": report.malformed_records,
                }
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Failed to build risk alerts")
            return jsonify({"success": False, "message": "Internal error while building risk alerts"}), 500

    @app.route(
        "/api/risk/students/<student_id>/courses/<course_id>",
        methods=["GET"],
        endpoint="api_risk_student",
    )
    def api_risk_student(student_id: str, course_id: str):
        try:
            outcome = service.assess_student(
                student_id=student_id,
                course_id=course_id,
                start=_date_arg("start"),
                end=_date_arg("end"),
            )
            if outcome is None:
                return jsonify({"success": False, "message": "No attendance records for this student and course"}), 404
            return jsonify({"success": True, "data": outcome.as_dict()})
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Failed to assess %s/%s", student_id, course_id)
            return jsonify({"success": False, "message": "Internal error while assessing student"}), 500

    @app.route("/reports/risk.xlsx", methods=["GET"], endpoint="export_risk_report")
    def export_risk_report():
        try:
            report = service.build_risk_report(
                start=_date_arg("start"),
                end=_date_arg("end"),
                course_id=request.args.get("course_id") or None,
            )
            output = service.export_excel(report)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400
        except Exception:
            logger.exception("Failed to export risk report")
            return jsonify({"success": False, "message": "Internal error while exporting risk report"}), 500

        return send_file(
            output,
            download_name="attendance_risk_report.xlsx",
            as_attachment=True,
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
