from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from attendance_tracker.attendance.model import AttendanceRecord, AttendanceReportRow, RosterRow
from attendance_tracker.common.clock import FixedClock
from attendance_tracker.container import wire
from attendance_tracker.core.enums import Role
from attendance_tracker.core.exceptions import DuplicateRecordError
from attendance_tracker.main import create_app
from attendance_tracker.users.model import Employee


class InMemoryEmployees:
    def __init__(self):
        self.by_id: dict[str, Employee] = {}
        self._next = 0

    def add(self, name: str, email: str, password: str = "secret123", role: Role = Role.EMPLOYEE, *, is_active=True) -> Employee:
        self._next += 1
        emp = Employee(
            employee_id=f"emp-{self._next}",
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            is_active=is_active,
        )
        self.by_id[emp.employee_id] = emp
        return emp

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self.by_id.get(employee_id)

    def get_by_email(self, email: str) -> Optional[Employee]:
        return next((e for e in self.by_id.values() if e.email == email), None)

    def create_employee(self, *, name: str, email: str, password_hash: str, role: Role) -> str:
        if self.get_by_email(email):
            raise DuplicateRecordError(email)
        self._next += 1
        emp = Employee(employee_id=f"emp-{self._next}", name=name, email=email, password_hash=password_hash, role=role)
        self.by_id[emp.employee_id] = emp
        return emp.employee_id

    def list_active(self):
        return sorted((e for e in self.by_id.values() if e.is_active), key=lambda e: e.name)

    def count_active(self) -> int:
        return len(self.list_active())


class InMemoryAttendance:
    """Record Store fake with the same conditional-write contract as MySQL."""

    def __init__(self, employees: InMemoryEmployees):
        self._employees = employees
        self._by_key: dict[tuple[str, date], AttendanceRecord] = {}
        self._id = 0
        self._lock = threading.Lock()
        self.writes = 0

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with self._lock:
            return self._by_key.get((employee_id, work_date))

    def create_record(self, record: AttendanceRecord) -> AttendanceRecord:
        with self._lock:
            key = (record.employee_id, record.work_date)
            if key in self._by_key:
                raise DuplicateRecordError("duplicate (employee_id, work_date)")
            self._id += 1
            saved = replace(record, attendance_id=self._id, version=1)
            self._by_key[key] = saved
            self.writes += 1
            return saved

    def update_record(self, record: AttendanceRecord, *, expected_version: int) -> bool:
        with self._lock:
            key = (record.employee_id, record.work_date)
            stored = self._by_key.get(key)
            if stored is None or stored.version != expected_version:
                return False
            self._by_key[key] = replace(record, version=stored.version + 1)
            self.writes += 1
            return True

    def list_records(self, *, start_date: date, end_date: date, employee_id: Optional[str] = None):
        return [
            r
            for r in self._by_key.values()
            if start_date <= r.work_date <= end_date and (employee_id is None or r.employee_id == employee_id)
        ]

    def _roster_row(self, emp: Employee, rec: Optional[AttendanceRecord]) -> RosterRow:
        return RosterRow(
            employee_id=emp.employee_id,
            employee_name=emp.name,
            email=emp.email,
            work_date=rec.work_date if rec else None,
            check_in_time=rec.check_in_time if rec else None,
            check_out_time=rec.check_out_time if rec else None,
            break_start_time=rec.break_start_time if rec else None,
            break_minutes=rec.break_minutes if rec else None,
            work_note=rec.work_note if rec else None,
        )

    def get_roster_rows(self, work_date: date):
        return [self._roster_row(e, self._by_key.get((e.employee_id, work_date))) for e in self._employees.list_active()]

    def get_overview_rows(self):
        rows = []
        for emp in self._employees.list_active():
            records = [r for (eid, _), r in self._by_key.items() if eid == emp.employee_id]
            if not records:
                rows.append(self._roster_row(emp, None))
            rows.extend(self._roster_row(emp, r) for r in records)
        return rows

    def get_export_rows(self, *, start_date: date, end_date: date, employee_id: Optional[str] = None):
        rows = []
        for r in self.list_records(start_date=start_date, end_date=end_date, employee_id=employee_id):
            emp = self._employees.get_by_id(r.employee_id)
            if emp is None:
                continue
            rows.append(
                AttendanceReportRow(
                    employee_id=emp.employee_id,
                    employee_name=emp.name,
                    work_date=r.work_date,
                    check_in_time=r.check_in_time,
                    check_out_time=r.check_out_time,
                    break_start_time=r.break_start_time,
                    break_minutes=r.break_minutes,
                )
            )
        return rows


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture
def clock(fixed_now) -> FixedClock:
    return FixedClock(fixed_now)


@pytest.fixture
def employees() -> InMemoryEmployees:
    return InMemoryEmployees()


@pytest.fixture
def attendance_repo(employees) -> InMemoryAttendance:
    return InMemoryAttendance(employees)


@pytest.fixture
def container(clock, employees, attendance_repo):
    return wire(clock=clock, employees_repo=employees, attendance_repo=attendance_repo)


@pytest.fixture
def app(container):
    return create_app(container, settings_module="attendance_tracker.settings.testing")


@pytest.fixture
def client(app):
    return app.test_client()
