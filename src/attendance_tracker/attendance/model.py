from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.constants import SECONDS_PER_HOUR, SECONDS_PER_MINUTE
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee's attendance for one calendar date.

    Only timestamps, the accumulated break minutes and the note are stored.
    Status and hours are derived so they can never drift from the timestamps.
    """

    attendance_id: int
    employee_id: str
    work_date: date
    check_in_time: datetime
    break_start_time: Optional[datetime] = None
    break_minutes: float = 0.0
    check_out_time: Optional[datetime] = None
    work_note: Optional[str] = None
    version: int = 1

    @property
    def status(self) -> AttendanceStatus:
        return status_from_timestamps(self.check_in_time, self.break_start_time, self.check_out_time)

    @property
    def on_break(self) -> bool:
        return self.break_start_time is not None and self.check_out_time is None

    @property
    def gross_hours(self) -> Optional[float]:
        return gross_hours(self.check_in_time, self.check_out_time)

    @property
    def net_hours(self) -> Optional[float]:
        return net_hours(self.check_in_time, self.check_out_time, self.break_minutes)


def gross_hours(check_in_time: Optional[datetime], check_out_time: Optional[datetime]) -> Optional[float]:
    """Checkout minus check-in in hours, break time included. None until checked out."""
    if check_in_time is None or check_out_time is None:
        return None
    return (check_out_time - check_in_time).total_seconds() / SECONDS_PER_HOUR


def net_hours(
    check_in_time: Optional[datetime],
    check_out_time: Optional[datetime],
    break_minutes: Optional[float],
) -> Optional[float]:
    gross = gross_hours(check_in_time, check_out_time)
    if gross is None:
        return None
    return gross - (break_minutes or 0) * SECONDS_PER_MINUTE / SECONDS_PER_HOUR


def status_from_timestamps(
    check_in_time: Optional[datetime],
    break_start_time: Optional[datetime],
    check_out_time: Optional[datetime],
) -> AttendanceStatus:
    if check_in_time is None:
        return AttendanceStatus.ABSENT
    if check_out_time is not None:
        return AttendanceStatus.COMPLETED
    if break_start_time is not None:
        return AttendanceStatus.ON_BREAK
    return AttendanceStatus.WORKING


def derive_status(record: Optional[AttendanceRecord]) -> AttendanceStatus:
    if record is None:
        return AttendanceStatus.ABSENT
    return record.status


@dataclass(frozen=True)
class RosterRow:
    """Read-model: an active employee joined with their record (if any) for one date."""

    employee_id: str
    employee_name: str
    email: str
    work_date: Optional[date]
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    break_start_time: Optional[datetime]
    break_minutes: Optional[float]
    work_note: Optional[str]

    @property
    def status(self) -> AttendanceStatus:
        return status_from_timestamps(self.check_in_time, self.break_start_time, self.check_out_time)


@dataclass(frozen=True)
class AttendanceReportRow:
    """Read-model for exports: a record inner-joined with its employee."""

    employee_id: str
    employee_name: str
    work_date: date
    check_in_time: Optional[datetime]
    check_out_time: Optional[datetime]
    break_start_time: Optional[datetime]
    break_minutes: Optional[float]

    @property
    def status(self) -> AttendanceStatus:
        return status_from_timestamps(self.check_in_time, self.break_start_time, self.check_out_time)

    @property
    def net_hours(self) -> Optional[float]:
        return net_hours(self.check_in_time, self.check_out_time, self.break_minutes)
