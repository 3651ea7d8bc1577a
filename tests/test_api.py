import pytest

from attendance_tracker.core.enums import Role
from attendance_tracker.core.exceptions import StoreError


@pytest.fixture
def alex(employees):
    return employees.add("Alex", "alex@example.com", "employee123")


@pytest.fixture
def admin(employees):
    return employees.add("Admin", "admin@example.com", "admin123", Role.ADMIN)


def login(client, email, password):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def act(client, action):
    return client.post("/api/attendance/action", json={"action": action})


def test_login_and_logout(client, alex):
    resp = login(client, "alex@example.com", "employee123")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True, "role": "employee", "name": "Alex"}

    assert client.get("/api/attendance/today").status_code == 200
    client.post("/api/auth/logout")
    assert client.get("/api/attendance/today").status_code == 401


def test_bad_login_is_401(client, alex):
    resp = login(client, "alex@example.com", "nope")

    assert resp.status_code == 401
    assert resp.get_json()["success"] is False


def test_action_requires_identity(client):
    resp = act(client, "check_in")

    assert resp.status_code == 401
    assert resp.get_json()["error"] == "unauthorized"


def test_admin_routes_forbid_employees(client, alex):
    login(client, "alex@example.com", "employee123")

    assert client.get("/api/admin/dashboard").status_code == 403
    assert client.get("/api/admin/employees").status_code == 403


def test_attendance_day_over_http(client, clock, alex):
    login(client, "alex@example.com", "employee123")

    resp = act(client, "check_in")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "WORKING"

    resp = act(client, "check_in")
    assert resp.status_code == 400
    assert resp.get_json() == {"success": False, "error": "already_checked_in", "message": "Already checked in"}

    clock.advance(hours=3)
    act(client, "start_break")
    assert act(client, "check_out").get_json()["error"] == "invalid_check_out"
    clock.advance(minutes=30)
    act(client, "end_break")
    clock.advance(hours=4, minutes=30)
    body = act(client, "check_out").get_json()

    assert body["net_hours"] == 7.5
    assert body["gross_hours"] == 8.0

    today = client.get("/api/attendance/today").get_json()
    assert today["status"] == "COMPLETED"
    assert today["checked_out"] is True


def test_unknown_action_is_400(client, alex):
    login(client, "alex@example.com", "employee123")

    resp = act(client, "teleport")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Invalid action"


def test_note_endpoint(client, alex):
    login(client, "alex@example.com", "employee123")

    resp = client.post("/api/attendance/note", json={"note": "standup"})
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "no_record_for_today"

    act(client, "check_in")
    assert client.post("/api/attendance/note", json={"note": ""}).status_code == 400

    resp = client.post("/api/attendance/note", json={"note": " standup "})
    assert resp.get_json() == {"success": True, "work_note": "standup"}


def test_admin_dashboard_and_roster(client, alex, admin, employees):
    employees.add("Blair", "blair@example.com")
    login(client, "alex@example.com", "employee123")
    act(client, "check_in")
    client.post("/api/auth/logout")

    login(client, "admin@example.com", "admin123")
    stats = client.get("/api/admin/dashboard").get_json()["stats"]
    assert stats == {"total_employees": 3, "present_today": 1, "absent_today": 2}

    listed = client.get("/api/admin/employees").get_json()["employees"]
    assert [(e["name"], e["status"]) for e in listed] == [
        ("Admin", "Absent"),
        ("Alex", "Present"),
        ("Blair", "Absent"),
    ]

    roster = client.get("/api/admin/attendance?date=2026-02-02").get_json()["attendance"]
    assert [r["name"] for r in roster] == ["Admin", "Alex", "Blair"]
    assert client.get("/api/admin/attendance?date=02/02/2026").status_code == 400


def test_admin_creates_employee(client, admin, employees):
    login(client, "admin@example.com", "admin123")

    resp = client.post(
        "/api/admin/employees",
        json={"name": "Casey", "email": "casey@example.com", "password": "casey123"},
    )
    assert resp.status_code == 201
    assert employees.get_by_id(resp.get_json()["employee_id"]).name == "Casey"

    dup = client.post(
        "/api/admin/employees",
        json={"name": "Casey", "email": "casey@example.com", "password": "casey123"},
    )
    assert dup.status_code == 400


def test_admin_csv_report(client, alex, admin):
    login(client, "alex@example.com", "employee123")
    act(client, "check_in")
    client.post("/api/auth/logout")
    login(client, "admin@example.com", "admin123")

    resp = client.get("/api/admin/reports/attendance?employeeId=all&startDate=2026-02-01&endDate=2026-02-28")

    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attendance-report.csv" in resp.headers["Content-Disposition"]
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[0] == '"Employee","Date","Check In","Check Out","Break Minutes","Net Hours","Status"'
    assert lines[1] == '"Alex","2026-02-02","2026-02-02 09:00:00","","0.0","0.0","Present"'
    assert len(lines) == 2


def test_admin_csv_report_needs_range(client, admin):
    login(client, "admin@example.com", "admin123")

    resp = client.get("/api/admin/reports/attendance?startDate=2026-02-01")

    assert resp.status_code == 400
    assert resp.get_json()["message"] == "Missing date range"


def test_employee_self_export(client, alex):
    login(client, "alex@example.com", "employee123")
    act(client, "check_in")

    resp = client.get("/api/attendance/export?startDate=2026-02-02&endDate=2026-02-02")

    assert "my-attendance.csv" in resp.headers["Content-Disposition"]
    lines = resp.data.decode("utf-8-sig").splitlines()
    assert lines[0] == '"Date","Check In","Check Out","Break Minutes","Net Hours","Status"'
    assert len(lines) == 2


def test_store_failure_is_500(client, alex, attendance_repo, monkeypatch):
    login(client, "alex@example.com", "employee123")

    def broken(*args, **kwargs):
        raise StoreError("connection lost")

    monkeypatch.setattr(attendance_repo, "get_for_employee_and_date", broken)
    resp = act(client, "check_in")

    assert resp.status_code == 500
    assert resp.get_json() == {"success": False, "error": "store_failure", "message": "Server error"}


def test_admin_csv_report_for_unknown_employee_is_empty(client, alex, admin):
    login(client, "alex@example.com", "employee123")
    act(client, "check_in")
    client.post("/api/auth/logout")
    login(client, "admin@example.com", "admin123")

    resp = client.get("/api/admin/reports/attendance?employeeId=nobody&startDate=2026-02-01&endDate=2026-02-28")

    assert resp.status_code == 200
    assert len(resp.data.decode("utf-8-sig").splitlines()) == 1


@pytest.mark.parametrize(
    "path,body",
    [
        ("/api/attendance/note", {"note": 5}),
        ("/api/attendance/note", ["standup"]),
        ("/api/attendance/action", {"action": ["check_in"]}),
        ("/api/attendance/action", ["check_in"]),
    ],
)
def test_wrongly_typed_body_is_400(client, alex, path, body):
    login(client, "alex@example.com", "employee123")
    act(client, "check_in")

    resp = client.post(path, json=body)

    assert resp.status_code == 400
    assert resp.get_json()["error"] == "validation_error"


@pytest.mark.parametrize("body", [{"email": 5, "password": "employee123"}, ["alex@example.com"], "alex"])
def test_login_with_wrongly_typed_body_is_400(client, alex, body):
    resp = client.post("/api/auth/login", json=body)

    assert resp.status_code == 400
    assert resp.get_json()["success"] is False


def test_create_employee_with_wrongly_typed_field_is_400(client, admin, employees):
    login(client, "admin@example.com", "admin123")

    resp = client.post("/api/admin/employees", json={"name": "Casey", "email": 7, "password": "casey123"})

    assert resp.status_code == 400
    assert employees.get_by_email("casey@example.com") is None
