import threading
from datetime import datetime

import pytest

from attendance_tracker.attendance.service import AttendanceService
from attendance_tracker.core.exceptions import AlreadyCheckedInError, InvalidCheckOutError


def racing_repo(attendance_repo, employees, clock):
    """Repository that lets a competing request commit just before our first write."""

    base = type(attendance_repo)

    class Racing(base):
        competitor = None

        def _race(self):
            competitor, self.competitor = self.competitor, None
            if competitor is not None:
                clock.advance(minutes=1)
                competitor()

        def create_record(self, record):
            self._race()
            return super().create_record(record)

        def update_record(self, record, *, expected_version):
            self._race()
            return super().update_record(record, expected_version=expected_version)

    return Racing(employees)


def test_double_check_out_keeps_first_timestamp(attendance_repo, employees, clock):
    repo = racing_repo(attendance_repo, employees, clock)
    service = AttendanceService(repo, clock)
    service.check_in("e1")
    clock.advance(hours=8)

    winner = {}
    repo.competitor = lambda: winner.setdefault("result", service.check_out("e1"))

    with pytest.raises(InvalidCheckOutError):
        service.check_out("e1")

    stored = service.get_today_record("e1")
    assert stored.check_out_time == winner["result"].record.check_out_time
    assert stored.check_out_time == datetime(2026, 2, 2, 17, 1)


def test_double_check_in_creates_single_record(attendance_repo, employees, clock):
    repo = racing_repo(attendance_repo, employees, clock)
    service = AttendanceService(repo, clock)
    repo.competitor = lambda: service.check_in("e1")

    with pytest.raises(AlreadyCheckedInError):
        service.check_in("e1")

    assert len(repo.list_records(start_date=clock.today(), end_date=clock.today())) == 1


def _hammer(service, action, workers=8):
    barrier = threading.Barrier(workers)
    outcomes = []
    lock = threading.Lock()

    def run():
        barrier.wait()
        try:
            service.perform("e1", action)
            outcome = "ok"
        except Exception as e:
            outcome = type(e)
        with lock:
            outcomes.append(outcome)

    threads = [threading.Thread(target=run) for _ in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return outcomes


def test_parallel_check_outs_accept_exactly_one(attendance_repo, clock):
    service = AttendanceService(attendance_repo, clock)
    service.check_in("e1")
    clock.advance(hours=8)

    outcomes = _hammer(service, "check_out")

    assert outcomes.count("ok") == 1
    assert outcomes.count(InvalidCheckOutError) == len(outcomes) - 1


def test_parallel_check_ins_accept_exactly_one(attendance_repo, clock):
    service = AttendanceService(attendance_repo, clock)

    outcomes = _hammer(service, "check_in")

    assert outcomes.count("ok") == 1
    assert outcomes.count(AlreadyCheckedInError) == len(outcomes) - 1
