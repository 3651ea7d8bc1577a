from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Optional

from ..common.clock import Clock
from ..core.constants import DISPLAY_DECIMALS, MAX_WRITE_ATTEMPTS
from ..core.enums import AttendanceAction, AttendanceStatus
from ..core.exceptions import DomainError, DuplicateRecordError, StoreError
from ..core.logging import get_logger
from .model import AttendanceRecord, derive_status
from .repository import AttendanceRepository
from .state_machine import Transition, TransitionFactory

logger = get_logger(__name__)


def rounded(value: Optional[float], digits: int = DISPLAY_DECIMALS) -> Optional[float]:
    return None if value is None else round(value, digits)


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat(sep=" ") if value else None


@dataclass(frozen=True)
class ActionResult:
    """Outcome of an accepted action, with derived values ready for display."""

    action: str
    record: AttendanceRecord

    def to_dict(self) -> dict:
        r = self.record
        return {
            "action": self.action,
            "work_date": r.work_date.isoformat(),
            "status": r.status.value,
            "check_in": _iso(r.check_in_time),
            "break_start": _iso(r.break_start_time),
            "check_out": _iso(r.check_out_time),
            "break_minutes": rounded(r.break_minutes),
            "gross_hours": rounded(r.gross_hours),
            "net_hours": rounded(r.net_hours),
            "work_note": r.work_note,
        }


@dataclass(frozen=True)
class TodayStatus:
    checked_in: bool
    checked_out: bool
    on_break: bool
    break_taken: bool
    status: AttendanceStatus
    record: Optional[AttendanceRecord] = None

    def to_dict(self) -> dict:
        r = self.record
        return {
            "checked_in": self.checked_in,
            "checked_out": self.checked_out,
            "on_break": self.on_break,
            "break_taken": self.break_taken,
            "status": self.status.value,
            "status_label": self.status.label,
            "check_in": _iso(r.check_in_time) if r else None,
            "check_out": _iso(r.check_out_time) if r else None,
            "break_minutes": rounded(r.break_minutes) if r else 0,
            "gross_hours": rounded(r.gross_hours) if r else None,
            "net_hours": rounded(r.net_hours) if r else None,
            "work_note": r.work_note if r else None,
        }


class AttendanceService:
    """Use cases of the daily attendance state machine.

    Every call reads the current record, validates the transition and writes
    it back conditionally. A write that loses a race is retried against fresh
    state, so the second of two simultaneous clicks fails with the proper
    InvalidTransitionError instead of overwriting timestamps.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        clock: Clock,
        *,
        transition_factory: TransitionFactory | None = None,
        max_attempts: int = MAX_WRITE_ATTEMPTS,
    ):
        self._attendance = attendance
        self._clock = clock
        self._factory = transition_factory or TransitionFactory()
        self._max_attempts = int(max_attempts)

    def perform(self, employee_id: str, action: str | AttendanceAction) -> ActionResult:
        return self._commit(employee_id, self._factory.for_action(action))

    def check_in(self, employee_id: str) -> ActionResult:
        return self.perform(employee_id, AttendanceAction.CHECK_IN)

    def start_break(self, employee_id: str) -> ActionResult:
        return self.perform(employee_id, AttendanceAction.START_BREAK)

    def end_break(self, employee_id: str) -> ActionResult:
        return self.perform(employee_id, AttendanceAction.END_BREAK)

    def check_out(self, employee_id: str) -> ActionResult:
        return self.perform(employee_id, AttendanceAction.CHECK_OUT)

    def set_work_note(self, employee_id: str, text: str) -> ActionResult:
        return self._commit(employee_id, self._factory.for_note(text))

    def get_today_record(self, employee_id: str, today: date | None = None) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(employee_id, today or self._clock.today())

    def get_today_status(self, employee_id: str) -> TodayStatus:
        record = self.get_today_record(employee_id)
        if record is None:
            return TodayStatus(
                checked_in=False,
                checked_out=False,
                on_break=False,
                break_taken=False,
                status=AttendanceStatus.ABSENT,
            )
        return TodayStatus(
            checked_in=True,
            checked_out=record.check_out_time is not None,
            on_break=record.on_break,
            break_taken=record.break_minutes > 0 or record.on_break,
            status=record.status,
            record=record,
        )

    def _commit(self, employee_id: str, transition: Transition) -> ActionResult:
        # "Today" is decided once per request, in the deployment zone.
        now = self._clock.now()
        work_date = self._clock.date_of(now)
        log = logger.bind(employee_id=employee_id, work_date=work_date.isoformat(), action=transition.name)

        for attempt in range(1, self._max_attempts + 1):
            current = self._attendance.get_for_employee_and_date(employee_id, work_date)
            try:
                updated = transition.apply(current, employee_id=employee_id, work_date=work_date, now=now)
            except DomainError as e:
                log.info("attendance.rejected", reason=e.code, status=derive_status(current).value)
                raise

            if current is None:
                try:
                    saved = self._attendance.create_record(updated)
                except DuplicateRecordError:
                    log.warning("attendance.write_conflict", attempt=attempt)
                    continue
            else:
                if not self._attendance.update_record(updated, expected_version=current.version):
                    log.warning("attendance.write_conflict", attempt=attempt)
                    continue
                saved = replace(updated, version=current.version + 1)

            log.info("attendance.accepted", status=saved.status.value)
            return ActionResult(action=transition.name, record=saved)

        log.error("attendance.write_conflict_exhausted", attempts=self._max_attempts)
        raise StoreError("Attendance record kept changing, please retry")
