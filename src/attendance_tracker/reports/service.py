from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

from ..attendance.model import AttendanceRecord, AttendanceReportRow, RosterRow
from ..attendance.repository import AttendanceRepository
from ..core.constants import DISPLAY_DECIMALS
from ..core.enums import RosterOrder
from ..core.exceptions import ValidationError
from ..users.repository import EmployeeRepository

EXPORT_FIELDS = ["employee", "date", "check_in", "check_out", "break_minutes", "net_hours", "status"]
SELF_EXPORT_FIELDS = ["date", "check_in", "check_out", "break_minutes", "net_hours", "status"]


def _fmt_time(value: Optional[datetime]) -> Optional[str]:
    return value.strftime("%Y-%m-%d %H:%M:%S") if value else None


def _number(value: Optional[float]) -> float:
    # Missing numbers export as 0.0 so every numeric column reads the same.
    return round(float(value or 0), DISPLAY_DECIMALS)


def _text(value: Optional[str]) -> str:
    return value or ""


@dataclass(frozen=True)
class DashboardSummary:
    total_employees: int
    present_today: int
    absent_today: int
    today_attendance: list[dict]

    def to_dict(self) -> dict:
        return {
            "stats": {
                "total_employees": self.total_employees,
                "present_today": self.present_today,
                "absent_today": self.absent_today,
            },
            "today_attendance": self.today_attendance,
        }


class ReportService:
    """Read-only projections over stored records.

    Every method is a synchronous pull query; dashboards that want fresh data
    poll on their own schedule.
    """

    def __init__(self, attendance: AttendanceRepository, employees: EmployeeRepository):
        self._attendance = attendance
        self._employees = employees

    def daily_roster(self, on_date: date, *, order: RosterOrder = RosterOrder.NAME) -> list[dict]:
        """All active employees with their record for ``on_date``; no record means ABSENT."""

        rows = self._attendance.get_roster_rows(on_date)
        return [self._roster_dict(r) for r in self._sort_roster(rows, order)]

    def attendance_overview(self) -> list[dict]:
        rows = self._attendance.get_overview_rows()
        return [self._roster_dict(r) for r in self._sort_roster(rows, RosterOrder.DATE_DESC)]

    def dashboard_summary(self, on_date: date) -> DashboardSummary:
        roster = self.daily_roster(on_date)
        total = self._employees.count_active()
        present = sum(1 for r in roster if r["check_in"] is not None)
        return DashboardSummary(
            total_employees=total,
            present_today=present,
            absent_today=total - present,
            today_attendance=roster,
        )

    def date_range_export(
        self,
        *,
        start: date,
        end: date,
        employee_id: Optional[str] = None,
    ) -> list[dict]:
        """Records joined to employees within [start, end], date ascending.

        An unknown ``employee_id`` yields an empty report, not an error.
        """

        self._check_range(start, end)
        rows = self._attendance.get_export_rows(start_date=start, end_date=end, employee_id=employee_id)
        ordered = sorted(rows, key=lambda r: (r.work_date, r.employee_name.casefold()))
        return [self._export_dict(r) for r in ordered]

    def employee_export(self, *, employee_id: str, start: date, end: date) -> list[dict]:
        """The employee's own records within [start, end], date ascending."""

        self._check_range(start, end)
        records = self._attendance.list_records(start_date=start, end_date=end, employee_id=employee_id)
        return [self._self_export_dict(r) for r in sorted(records, key=lambda r: r.work_date)]

    @staticmethod
    def _check_range(start: Optional[date], end: Optional[date]) -> None:
        if start is None or end is None:
            raise ValidationError("Missing date range")
        if start > end:
            raise ValidationError("Start date must not be after end date")

    @staticmethod
    def _sort_roster(rows: Iterable[RosterRow], order: RosterOrder) -> Sequence[RosterRow]:
        by_name = sorted(rows, key=lambda r: r.employee_name.casefold())
        if order == RosterOrder.DATE_DESC:
            # Stable sort: rows without a date go last, name order kept within a date.
            dated = sorted((r for r in by_name if r.work_date), key=lambda r: r.work_date, reverse=True)
            return dated + [r for r in by_name if not r.work_date]
        return by_name

    @staticmethod
    def _roster_dict(r: RosterRow) -> dict:
        return {
            "employee_id": r.employee_id,
            "name": r.employee_name,
            "email": r.email,
            "date": r.work_date.isoformat() if r.work_date else None,
            "check_in": _fmt_time(r.check_in_time),
            "check_out": _fmt_time(r.check_out_time),
            "break_start": _fmt_time(r.break_start_time),
            "break_minutes": _number(r.break_minutes),
            "status": r.status.value,
            "status_label": r.status.label,
            "work_note": r.work_note,
        }

    @staticmethod
    def _export_dict(r: AttendanceReportRow) -> dict:
        return {
            "employee": _text(r.employee_name),
            "date": r.work_date.isoformat(),
            "check_in": _text(_fmt_time(r.check_in_time)),
            "check_out": _text(_fmt_time(r.check_out_time)),
            "break_minutes": _number(r.break_minutes),
            "net_hours": _number(r.net_hours),
            "status": r.status.label,
        }

    @staticmethod
    def _self_export_dict(r: AttendanceRecord) -> dict:
        return {
            "date": r.work_date.isoformat(),
            "check_in": _text(_fmt_time(r.check_in_time)),
            "check_out": _text(_fmt_time(r.check_out_time)),
            "break_minutes": _number(r.break_minutes),
            "net_hours": _number(r.net_hours),
            "status": r.status.label,
        }
