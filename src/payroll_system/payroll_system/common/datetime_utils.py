from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator

from ..core.exceptions import ValidationError

_PERIOD_RE = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp (YYYY-MM-DDTHH:MM[:SS])."""
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid timestamp {value!r}, expected ISO-8601")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


@dataclass(frozen=True, order=True)
class Period:
    """A payroll period: one calendar month."""

    year: int
    month: int

    @classmethod
    def parse(cls, value: str) -> "Period":
        m = _PERIOD_RE.match((value or "").strip())
        if not m:
            raise ValidationError(f"Invalid period {value!r}, expected YYYY-MM")
        year, month = int(m.group(1)), int(m.group(2))
        if not 1 <= month <= 12:
            raise ValidationError(f"Invalid period {value!r}, month must be 01-12")
        return cls(year, month)

    @classmethod
    def of(cls, day: date) -> "Period":
        return cls(day.year, day.month)

    @property
    def start(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def end(self) -> date:
        return date(self.year, self.month, calendar.monthrange(self.year, self.month)[1])

    def days(self) -> Iterator[date]:
        day = self.start
        while day <= self.end:
            yield day
            day += timedelta(days=1)

    def working_days(self) -> int:
        """Days in the month excluding Sundays."""
        return sum(1 for d in self.days() if d.weekday() != calendar.SUNDAY)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


def month_range(day: date) -> tuple[date, date]:
    p = Period.of(day)
    return p.start, p.end


def year_range(day: date) -> tuple[date, date]:
    return date(day.year, 1, 1), date(day.year, 12, 31)
