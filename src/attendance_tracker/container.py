from __future__ import annotations

from dataclasses import dataclass

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.state_machine import TransitionFactory
from .common.clock import Clock, SystemClock
from .core.constants import DEFAULT_TIMEZONE
from .database.connection import DatabaseConnection, DBConfig
from .reports.service import ReportService
from .users.mysql_employee_repository import MySQLEmployeeRepository
from .users.repository import EmployeeRepository
from .users.service import AuthService, EmployeeService


@dataclass(frozen=True)
class Container:
    clock: Clock

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    employee_service: EmployeeService
    attendance_service: AttendanceService
    report_service: ReportService


def wire(*, clock: Clock, employees_repo: EmployeeRepository, attendance_repo: AttendanceRepository) -> Container:
    return Container(
        clock=clock,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(employees_repo),
        employee_service=EmployeeService(employees_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            clock,
            transition_factory=TransitionFactory(),
        ),
        report_service=ReportService(attendance_repo, employees_repo),
    )


def build_container(*, db_config: dict, timezone: str = DEFAULT_TIMEZONE) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return wire(
        clock=SystemClock(timezone),
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
    )
