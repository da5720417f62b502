from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class MonthlyRecap:
    """Per-employee, per-month aggregate of attendance, leave and session data."""

    employee_id: int
    period: str
    present_days: int
    personal_leave_days: int
    sick_leave_days: int
    unexcused_absence_days: int
    coding_sessions: int
    non_coding_sessions: int
    coding_income: Decimal
    non_coding_income: Decimal
    total_session_income: Decimal
    # Always zero since the vacation leave type was removed.
    vacation_days: int = 0
    recap_id: Optional[int] = None

    @property
    def leave_days(self) -> int:
        return self.personal_leave_days + self.sick_leave_days + self.vacation_days


@dataclass(frozen=True)
class RecapOutcome:
    """Result of one employee in a batch run."""

    employee_id: int
    recap: Optional[MonthlyRecap] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None
