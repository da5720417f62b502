from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import LeaveStatus, LeaveType
from .model import LeaveRequest


class LeaveRepository(Protocol):
    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, leave_date: date) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def find_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def count_held(self, employee_id: int, leave_type: LeaveType, start_date: date, end_date: date) -> int:
        """Requests still holding quota: approved, or approved with a pending cancellation."""

        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: int,
        leave_date: date,
        leave_type: LeaveType,
        note: Optional[str] = None,
    ) -> int:
        """Insert a submitted request; raises ConflictError on a duplicate (employee, date)."""

        raise NotImplementedError

    def update_details(
        self,
        *,
        request_id: int,
        leave_date: date,
        leave_type: LeaveType,
        note: Optional[str],
    ) -> None:
        raise NotImplementedError

    def transition(
        self,
        *,
        request_id: int,
        expected: LeaveStatus,
        status: LeaveStatus,
        approved_by: Optional[int],
    ) -> bool:
        """Compare-and-set the status; False when the row is no longer in ``expected``."""

        raise NotImplementedError
