from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles handed to the core by the identity layer."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Daily attendance state. Always derived from the record timestamps."""

    ABSENT = "ABSENT"
    WORKING = "WORKING"
    ON_BREAK = "ON_BREAK"
    COMPLETED = "COMPLETED"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    AttendanceStatus.ABSENT: "Absent",
    AttendanceStatus.WORKING: "Present",
    AttendanceStatus.ON_BREAK: "On break",
    AttendanceStatus.COMPLETED: "Completed",
}


class AttendanceAction(str, Enum):
    CHECK_IN = "check_in"
    START_BREAK = "start_break"
    END_BREAK = "end_break"
    CHECK_OUT = "check_out"


class RosterOrder(str, Enum):
    NAME = "name"
    DATE_DESC = "date_desc"
