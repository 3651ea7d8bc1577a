from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.validators import require_date_range
from ..common.web import csv_response, json_body, role_required, text_field
from ..core.enums import Role
from ..container import Container
from ..reports.service import SELF_EXPORT_FIELDS

SELF_EXPORT_LABELS = ["Date", "Check In", "Check Out", "Break Minutes", "Net Hours", "Status"]


def register(app: Flask, container: Container) -> None:
    @app.route("/api/attendance/action", methods=["POST"], endpoint="attendance_action")
    @role_required(Role.EMPLOYEE)
    def attendance_action():
        data = json_body()
        result = container.attendance_service.perform(g.identity.employee_id, text_field(data, "action"))
        return jsonify({"success": True, **result.to_dict()}), 200

    @app.route("/api/attendance/note", methods=["POST"], endpoint="attendance_note")
    @role_required(Role.EMPLOYEE)
    def attendance_note():
        data = json_body()
        result = container.attendance_service.set_work_note(g.identity.employee_id, text_field(data, "note"))
        return jsonify({"success": True, "work_note": result.record.work_note}), 200

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @role_required(Role.EMPLOYEE)
    def attendance_today():
        status = container.attendance_service.get_today_status(g.identity.employee_id)
        return jsonify(status.to_dict()), 200

    @app.route("/api/attendance/export", methods=["GET"], endpoint="attendance_export")
    @role_required(Role.EMPLOYEE)
    def attendance_export():
        start, end = require_date_range(request.args.get("startDate"), request.args.get("endDate"))
        rows = container.report_service.employee_export(employee_id=g.identity.employee_id, start=start, end=end)
        return csv_response(
            rows,
            fieldnames=SELF_EXPORT_FIELDS,
            labels=SELF_EXPORT_LABELS,
            filename="my-attendance.csv",
        )
