"""Daily attendance state machine.

ABSENT -> WORKING -> ON_BREAK -> WORKING -> ... -> COMPLETED

Each transition is a pure function of the current record (``None`` when the
employee has not checked in yet) and the request instant. It either returns the
next record or raises an ``InvalidTransitionError`` without touching anything.
Several breaks per day are allowed, one at a time; break time accumulates and
checkout is refused while a break is open.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..core.constants import SECONDS_PER_MINUTE
from ..core.enums import AttendanceAction, AttendanceStatus
from ..core.exceptions import (
    AlreadyCheckedInError,
    EmptyNoteError,
    InvalidBreakEndError,
    InvalidBreakStartError,
    InvalidCheckOutError,
    NoRecordForTodayError,
    ValidationError,
)
from .model import AttendanceRecord, derive_status


def elapsed_minutes(start: datetime, end: datetime) -> float:
    """Minutes between two instants, never negative."""
    return max((end - start).total_seconds() / SECONDS_PER_MINUTE, 0.0)


class Transition(ABC):
    """One way of moving a record forward."""

    name: str = ""

    @abstractmethod
    def apply(
        self,
        current: Optional[AttendanceRecord],
        *,
        employee_id: str,
        work_date: date,
        now: datetime,
    ) -> AttendanceRecord:
        raise NotImplementedError


class CheckIn(Transition):
    name = AttendanceAction.CHECK_IN.value

    def apply(self, current, *, employee_id, work_date, now):
        if current is not None:
            raise AlreadyCheckedInError()
        return AttendanceRecord(
            attendance_id=0,
            employee_id=employee_id,
            work_date=work_date,
            check_in_time=now,
            version=0,
        )


class StartBreak(Transition):
    name = AttendanceAction.START_BREAK.value

    def apply(self, current, *, employee_id, work_date, now):
        if derive_status(current) != AttendanceStatus.WORKING:
            raise InvalidBreakStartError()
        return replace(current, break_start_time=max(now, current.check_in_time))


class EndBreak(Transition):
    name = AttendanceAction.END_BREAK.value

    def apply(self, current, *, employee_id, work_date, now):
        if derive_status(current) != AttendanceStatus.ON_BREAK:
            raise InvalidBreakEndError()
        return replace(
            current,
            break_start_time=None,
            break_minutes=current.break_minutes + elapsed_minutes(current.break_start_time, now),
        )


class CheckOut(Transition):
    name = AttendanceAction.CHECK_OUT.value

    def apply(self, current, *, employee_id, work_date, now):
        if derive_status(current) != AttendanceStatus.WORKING:
            raise InvalidCheckOutError()
        return replace(current, check_out_time=max(now, current.check_in_time))


@dataclass(frozen=True)
class SetWorkNote(Transition):
    """Overwrite the day's note. Allowed in any state once a record exists."""

    text: str
    name = "set_work_note"

    def apply(self, current, *, employee_id, work_date, now):
        if self.text is not None and not isinstance(self.text, str):
            raise ValidationError("Note must be text")
        note = (self.text or "").strip()
        if not note:
            raise EmptyNoteError()
        if current is None:
            raise NoRecordForTodayError()
        return replace(current, work_note=note)


@dataclass
class TransitionFactory:
    """Factory Pattern: pick the transition for an action name."""

    def for_action(self, action: str) -> Transition:
        try:
            key = AttendanceAction(action)
        except ValueError:
            raise ValidationError("Invalid action")
        return {
            AttendanceAction.CHECK_IN: CheckIn,
            AttendanceAction.START_BREAK: StartBreak,
            AttendanceAction.END_BREAK: EndBreak,
            AttendanceAction.CHECK_OUT: CheckOut,
        }[key]()

    def for_note(self, text: str) -> Transition:
        return SetWorkNote(text=text)
