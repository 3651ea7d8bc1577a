from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.clock import parse_iso_date
from ..common.validators import require_date_range
from ..common.web import csv_response, role_required
from ..core.enums import Role, RosterOrder
from ..core.exceptions import ValidationError
from ..container import Container
from .service import EXPORT_FIELDS

EXPORT_LABELS = ["Employee", "Date", "Check In", "Check Out", "Break Minutes", "Net Hours", "Status"]


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @role_required(Role.ADMIN)
    def admin_dashboard():
        summary = container.report_service.dashboard_summary(container.clock.today())
        return jsonify(summary.to_dict()), 200

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="admin_attendance")
    @role_required(Role.ADMIN)
    def admin_attendance():
        """All records, newest first; ``?date=YYYY-MM-DD`` narrows to one day's roster."""

        date_s = request.args.get("date")
        if not date_s:
            return jsonify({"attendance": container.report_service.attendance_overview()}), 200

        try:
            on_date = parse_iso_date(date_s)
            order = RosterOrder(request.args.get("order", RosterOrder.NAME.value))
        except ValueError:
            raise ValidationError("Invalid date or order")
        return jsonify({"attendance": container.report_service.daily_roster(on_date, order=order)}), 200

    @app.route("/api/admin/reports/attendance", methods=["GET"], endpoint="admin_report_csv")
    @role_required(Role.ADMIN)
    def admin_report_csv():
        start, end = require_date_range(request.args.get("startDate"), request.args.get("endDate"))

        employee_id = (request.args.get("employeeId") or "").strip()
        if not employee_id or employee_id == "all":
            employee_id = None

        rows = container.report_service.date_range_export(start=start, end=end, employee_id=employee_id)
        return csv_response(
            rows,
            fieldnames=EXPORT_FIELDS,
            labels=EXPORT_LABELS,
            filename="attendance-report.csv",
        )
