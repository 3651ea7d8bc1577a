from __future__ import annotations

from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, to_float
from .model import AttendanceRecord, AttendanceReportRow, RosterRow
from .repository import AttendanceRepository

_RECORD_COLUMNS = """
    attendance_id, employee_id, work_date, check_in_time, break_start_time,
    break_minutes, check_out_time, work_note, version
"""


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=str(r["employee_id"]),
        work_date=r["work_date"],
        check_in_time=r["check_in_time"],
        break_start_time=r.get("break_start_time"),
        break_minutes=to_float(r.get("break_minutes")) or 0.0,
        check_out_time=r.get("check_out_time"),
        work_note=r.get("work_note"),
        version=int(r["version"]),
    )


def _to_roster_row(r: dict) -> RosterRow:
    return RosterRow(
        employee_id=str(r["employee_id"]),
        employee_name=r["name"],
        email=r["email"],
        work_date=r.get("work_date"),
        check_in_time=r.get("check_in_time"),
        check_out_time=r.get("check_out_time"),
        break_start_time=r.get("break_start_time"),
        break_minutes=to_float(r.get("break_minutes")),
        work_note=r.get("work_note"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date=%s
                """,
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create_record(self, record: AttendanceRecord) -> AttendanceRecord:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(employee_id, work_date, check_in_time, version)
                VALUES(%s,%s,%s,1)
                """,
                (record.employee_id, record.work_date, record.check_in_time),
            )
            return replace(record, attendance_id=int(cur.lastrowid), version=1)

    def update_record(self, record: AttendanceRecord, *, expected_version: int) -> bool:
        # Compare-and-set on version: the loser of a race updates zero rows.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET break_start_time=%s, break_minutes=%s, check_out_time=%s,
                    gross_hours=%s, net_hours=%s, work_note=%s, version=version + 1
                WHERE attendance_id=%s AND version=%s
                """,
                (
                    record.break_start_time,
                    round(record.break_minutes, 3),
                    record.check_out_time,
                    record.gross_hours,
                    record.net_hours,
                    record.work_note,
                    record.attendance_id,
                    int(expected_version),
                ),
            )
            return cur.rowcount > 0

    def list_records(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE {" AND ".join(clauses)}
                ORDER BY work_date ASC, employee_id ASC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_roster_rows(self, work_date: date) -> Sequence[RosterRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    e.employee_id, e.name, e.email,
                    ar.work_date, ar.check_in_time, ar.check_out_time,
                    ar.break_start_time, ar.break_minutes, ar.work_note
                FROM employees e
                LEFT JOIN attendance_records ar
                    ON ar.employee_id = e.employee_id AND ar.work_date = %s
                WHERE e.is_active = 1
                ORDER BY e.name ASC
                """,
                (work_date,),
            )
            return [_to_roster_row(r) for r in fetchall(cur)]

    def get_overview_rows(self) -> Sequence[RosterRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    e.employee_id, e.name, e.email,
                    ar.work_date, ar.check_in_time, ar.check_out_time,
                    ar.break_start_time, ar.break_minutes, ar.work_note
                FROM employees e
                LEFT JOIN attendance_records ar ON ar.employee_id = e.employee_id
                WHERE e.is_active = 1
                ORDER BY ar.work_date IS NULL, ar.work_date DESC, e.name ASC
                """
            )
            return [_to_roster_row(r) for r in fetchall(cur)]

    def get_export_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        clauses = ["ar.work_date BETWEEN %s AND %s"]
        params: list[object] = [start_date, end_date]
        if employee_id is not None:
            clauses.append("e.employee_id=%s")
            params.append(employee_id)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    e.employee_id, e.name,
                    ar.work_date, ar.check_in_time, ar.check_out_time,
                    ar.break_start_time, ar.break_minutes
                FROM attendance_records ar
                JOIN employees e ON e.employee_id = ar.employee_id
                WHERE {" AND ".join(clauses)}
                ORDER BY ar.work_date ASC, e.name ASC
                """,
                tuple(params),
            )
            return [
                AttendanceReportRow(
                    employee_id=str(r["employee_id"]),
                    employee_name=r["name"],
                    work_date=r["work_date"],
                    check_in_time=r.get("check_in_time"),
                    check_out_time=r.get("check_out_time"),
                    break_start_time=r.get("break_start_time"),
                    break_minutes=to_float(r.get("break_minutes")),
                )
                for r in fetchall(cur)
            ]
