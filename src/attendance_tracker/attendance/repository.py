from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, AttendanceReportRow, RosterRow


class AttendanceRepository(Protocol):
    """Record Store for attendance records.

    Every call is its own transaction. Writes are conditional so two requests
    racing on the same (employee, date) can never both apply.
    """

    def get_for_employee_and_date(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_record(self, record: AttendanceRecord) -> AttendanceRecord:
        """Insert a fresh record; raises DuplicateRecordError if the day already has one."""

        raise NotImplementedError

    def update_record(self, record: AttendanceRecord, *, expected_version: int) -> bool:
        """Write the mutable fields of ``record`` if the stored version still matches.

        Returns False when another write got there first.
        """

        raise NotImplementedError

    def list_records(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_roster_rows(self, work_date: date) -> Sequence[RosterRow]:
        """Every active employee left-joined with their record for ``work_date``."""

        raise NotImplementedError

    def get_overview_rows(self) -> Sequence[RosterRow]:
        """Every active employee left-joined with all of their records."""

        raise NotImplementedError

    def get_export_rows(
        self,
        *,
        start_date: date,
        end_date: date,
        employee_id: Optional[str] = None,
    ) -> Sequence[AttendanceReportRow]:
        raise NotImplementedError
