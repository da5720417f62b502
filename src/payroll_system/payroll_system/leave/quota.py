"""Per-category ceilings on approved personal-leave days.

* fixed-term: at most 2 approved personal-leave days per calendar month
* permanent: at most 12 approved personal-leave days per calendar year
* freelance: no quota
* sick leave is never limited

A day whose cancellation is still pending keeps counting against the quota.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from ..common.datetime_utils import month_range, year_range
from ..core.constants import FIXED_TERM_PERSONAL_LEAVE_PER_MONTH, PERMANENT_PERSONAL_LEAVE_PER_YEAR
from ..core.enums import EmployeeCategory, LeaveType
from ..core.exceptions import NotFoundError, QuotaExceededError
from ..employees.repository import EmployeeRepository
from .model import QUOTA_HOLDING_STATUSES
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaRule:
    limit: int
    window: str
    window_of: Callable[[date], tuple[date, date]]


QUOTA_RULES = {
    EmployeeCategory.FIXED_TERM: QuotaRule(FIXED_TERM_PERSONAL_LEAVE_PER_MONTH, "month", month_range),
    EmployeeCategory.PERMANENT: QuotaRule(PERMANENT_PERSONAL_LEAVE_PER_YEAR, "year", year_range),
}


class LeaveQuotaValidator:
    def __init__(self, employees: EmployeeRepository, leaves: LeaveRepository, *, rules=None):
        self._employees = employees
        self._leaves = leaves
        self._rules = QUOTA_RULES if rules is None else rules

    def check(
        self,
        employee_id: int,
        leave_type: LeaveType,
        leave_date: date,
        exclude_request_id: Optional[int] = None,
    ) -> Optional[QuotaExceededError]:
        """Return the violation, or None when one more approved day still fits."""
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found", resource="employee")

        if leave_type != LeaveType.PERSONAL:
            return None
        rule = self._rules.get(employee.category)
        if rule is None:
            return None

        start, end = rule.window_of(leave_date)
        count = self._leaves.count_held(employee.employee_id, LeaveType.PERSONAL, start, end)

        if exclude_request_id is not None:
            excluded = self._leaves.get_by_id(int(exclude_request_id))
            if (
                excluded
                and excluded.employee_id == employee.employee_id
                and excluded.status in QUOTA_HOLDING_STATUSES
                and excluded.leave_type == LeaveType.PERSONAL
                and start <= excluded.leave_date <= end
            ):
                count -= 1

        if count >= rule.limit:
            return QuotaExceededError(
                f"{employee.category.value} employees may take at most {rule.limit} personal-leave days "
                f"per {rule.window}; {count} already used",
                count=count,
                limit=rule.limit,
                window=rule.window,
            )
        return None

    def validate(
        self,
        employee_id: int,
        leave_type: LeaveType,
        leave_date: date,
        exclude_request_id: Optional[int] = None,
    ) -> None:
        error = self.check(employee_id, leave_type, leave_date, exclude_request_id)
        if error is not None:
            logger.info(
                "leave quota exceeded",
                extra={"employee_id": employee_id, "count": error.count, "limit": error.limit, "window": error.window},
            )
            raise error
