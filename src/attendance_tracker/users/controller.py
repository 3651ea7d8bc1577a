from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.web import json_body, role_required, text_field
from ..core.enums import Role
from ..container import Container
from .identity import store_identity


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        data = json_body()
        identity = container.auth_service.authenticate(text_field(data, "email"), text_field(data, "password"))

        session.clear()
        session.permanent = True
        store_identity(session, identity)
        return jsonify({"success": True, "role": identity.role.value, "name": identity.name}), 200

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return jsonify({"success": True}), 200

    @app.route("/api/admin/employees", methods=["GET"], endpoint="admin_employees")
    @role_required(Role.ADMIN)
    def admin_employees():
        roster = container.report_service.daily_roster(container.clock.today())
        employees = [
            {
                "id": r["employee_id"],
                "name": r["name"],
                "email": r["email"],
                "status": r["status_label"],
                "check_in": r["check_in"],
                "check_out": r["check_out"],
            }
            for r in roster
        ]
        return jsonify({"employees": employees}), 200

    @app.route("/api/admin/employees", methods=["POST"], endpoint="admin_create_employee")
    @role_required(Role.ADMIN)
    def admin_create_employee():
        data = json_body()
        employee_id = container.employee_service.create_employee(
            name=text_field(data, "name"),
            email=text_field(data, "email"),
            password=text_field(data, "password"),
        )
        return jsonify({"success": True, "employee_id": employee_id}), 201
