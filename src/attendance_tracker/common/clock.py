from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Protocol

import pytz

from ..core.constants import DEFAULT_TIMEZONE


class Clock(Protocol):
    def now(self) -> datetime:
        raise NotImplementedError

    def today(self) -> date:
        raise NotImplementedError

    def date_of(self, instant: datetime) -> date:
        raise NotImplementedError


def local_date(instant: datetime, tz_name: str) -> date:
    """Calendar day a naive UTC instant falls on in ``tz_name``."""
    return pytz.utc.localize(instant).astimezone(pytz.timezone(tz_name)).date()


class SystemClock:
    """Wall clock of the deployment.

    Instants are naive UTC datetimes (stored as MySQL DATETIME), so durations
    are plain subtraction even across DST changes. The zone only decides which
    calendar day an instant belongs to.
    """

    def __init__(self, tz_name: str = DEFAULT_TIMEZONE):
        self._tz = pytz.timezone(tz_name)

    @property
    def tz_name(self) -> str:
        return self._tz.zone

    def now(self) -> datetime:
        return datetime.now(pytz.utc).replace(tzinfo=None, microsecond=0)

    def today(self) -> date:
        return self.date_of(self.now())

    def date_of(self, instant: datetime) -> date:
        return local_date(instant, self.tz_name)


@dataclass
class FixedClock:
    """Clock frozen at a given UTC instant; tests and scripts move it by hand."""

    current: datetime
    tz_name: str = DEFAULT_TIMEZONE

    def now(self) -> datetime:
        return self.current

    def today(self) -> date:
        return self.date_of(self.current)

    def date_of(self, instant: datetime) -> date:
        return local_date(instant, self.tz_name)

    def advance(self, **delta) -> datetime:
        self.current = self.current + timedelta(**delta)
        return self.current


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()
