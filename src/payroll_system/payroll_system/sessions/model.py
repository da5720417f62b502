from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Mapping, Optional

from ..core.enums import DayOfWeek, RealizationSource, RealizationStatus, SessionCategory


@dataclass(frozen=True)
class WorkSession:
    """A scheduled slot: (category, day, number) with a time window and a rate."""

    session_id: int
    category: SessionCategory
    day_of_week: DayOfWeek
    session_number: int
    start_time: time
    end_time: time
    rate: Decimal
    is_active: bool = True


@dataclass(frozen=True)
class SessionRealization:
    realization_id: int
    employee_id: int
    work_date: date
    session_id: int
    status: RealizationStatus
    source: RealizationSource
    approved_by: Optional[int] = None
    note: Optional[str] = None
    # None when the linked work session no longer resolves.
    session: Optional[WorkSession] = None


@dataclass(frozen=True)
class SessionSummary:
    coding_sessions: int
    non_coding_sessions: int
    coding_income: Decimal
    non_coding_income: Decimal

    @property
    def total_income(self) -> Decimal:
        return self.coding_income + self.non_coding_income


REALIZATION_TRANSITIONS: Mapping[RealizationStatus, frozenset[RealizationStatus]] = {
    RealizationStatus.SUBMITTED: frozenset({RealizationStatus.APPROVED, RealizationStatus.REJECTED}),
    RealizationStatus.APPROVED: frozenset(),
    RealizationStatus.REJECTED: frozenset(),
}
