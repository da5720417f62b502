from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..auth.policy import Actor
from ..common.datetime_utils import Period
from ..common.validators import optional_text
from ..core.enums import LeaveStatus, LeaveType
from ..core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import LEAVE_TRANSITIONS, LeaveRequest
from .quota import LeaveQuotaValidator
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    """Leave request lifecycle.

    submitted -> approved | rejected | cancelled (owner self-cancel)
    approved -> cancellation_requested (owner) -> cancelled | approved
    """

    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository, quota: LeaveQuotaValidator):
        self._leaves = leaves
        self._employees = employees
        self._quota = quota

    def get(self, request_id: int) -> LeaveRequest:
        req = self._leaves.get_by_id(int(request_id))
        if not req:
            raise NotFoundError("Leave request not found", resource="leave_request")
        return req

    def list_for_employee(self, employee_id: int, period: Period) -> Sequence[LeaveRequest]:
        return self._leaves.find_for_employee(int(employee_id), period.start, period.end)

    def _ensure_unique(self, employee_id: int, leave_date: date, *, ignore_id: Optional[int] = None) -> None:
        existing = self._leaves.get_for_employee_and_date(employee_id, leave_date)
        if existing and existing.request_id != ignore_id:
            raise ConflictError("A leave request for this employee on this date already exists")

    def submit(
        self,
        *,
        employee_id: int,
        leave_date: date,
        leave_type: LeaveType,
        note: Optional[str] = None,
    ) -> LeaveRequest:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found", resource="employee")

        self._ensure_unique(int(employee_id), leave_date)
        self._quota.validate(int(employee_id), leave_type, leave_date)

        request_id = self._leaves.create(
            employee_id=int(employee_id),
            leave_date=leave_date,
            leave_type=leave_type,
            note=optional_text(note),
        )
        return self.get(request_id)

    def update(
        self,
        request_id: int,
        *,
        leave_date: Optional[date] = None,
        leave_type: Optional[LeaveType] = None,
        note: Optional[str] = None,
    ) -> LeaveRequest:
        """Edit date/type/note of a request that is not yet decided."""
        req = self.get(request_id)
        if req.status != LeaveStatus.SUBMITTED:
            raise ValidationError("Only submitted leave requests can be edited")

        new_date = leave_date or req.leave_date
        new_type = leave_type or req.leave_type
        self._ensure_unique(req.employee_id, new_date, ignore_id=req.request_id)
        self._quota.validate(req.employee_id, new_type, new_date, exclude_request_id=req.request_id)

        self._leaves.update_details(
            request_id=req.request_id,
            leave_date=new_date,
            leave_type=new_type,
            note=optional_text(note) if note is not None else req.note,
        )
        return self.get(request_id)

    def _move(self, req: LeaveRequest, target: LeaveStatus, approved_by: Optional[int]) -> LeaveRequest:
        if target not in LEAVE_TRANSITIONS[req.status]:
            raise ValidationError(f"Cannot move leave request from {req.status.value} to {target.value}")

        if not self._leaves.transition(
            request_id=req.request_id,
            expected=req.status,
            status=target,
            approved_by=approved_by,
        ):
            raise ConflictError("Leave request was changed by another user, reload and retry")

        logger.info(
            "leave request %s: %s -> %s",
            req.request_id,
            req.status.value,
            target.value,
            extra={"employee_id": req.employee_id},
        )
        return self.get(req.request_id)

    def approve(self, actor: Actor, request_id: int) -> LeaveRequest:
        req = self.get(request_id)
        if req.status != LeaveStatus.SUBMITTED:
            raise ValidationError(f"Cannot approve a {req.status.value} leave request")
        self._quota.validate(req.employee_id, req.leave_type, req.leave_date, exclude_request_id=req.request_id)
        return self._move(req, LeaveStatus.APPROVED, actor.user_id)

    def reject(self, actor: Actor, request_id: int) -> LeaveRequest:
        return self._move(self.get(request_id), LeaveStatus.REJECTED, actor.user_id)

    def cancel(self, actor: Actor, request_id: int) -> LeaveRequest:
        """Owner withdraws a request that has not been decided yet."""
        req = self.get(request_id)
        if not actor.owns(req.employee_id):
            raise AuthorizationError("You can only cancel your own leave requests")
        if req.status != LeaveStatus.SUBMITTED:
            raise ValidationError("Only submitted leave requests can be cancelled directly")
        return self._move(req, LeaveStatus.CANCELLED, None)

    def request_cancellation(self, actor: Actor, request_id: int) -> LeaveRequest:
        req = self.get(request_id)
        if not actor.owns(req.employee_id):
            raise AuthorizationError("You can only request cancellation of your own leave requests")
        if req.status != LeaveStatus.APPROVED:
            raise ValidationError("Only approved leave requests can have their cancellation requested")
        # Original approver is kept until the cancellation is decided.
        return self._move(req, LeaveStatus.CANCELLATION_REQUESTED, req.approved_by)

    def approve_cancellation(self, actor: Actor, request_id: int) -> LeaveRequest:
        req = self.get(request_id)
        if req.status != LeaveStatus.CANCELLATION_REQUESTED:
            raise ValidationError("No cancellation has been requested for this leave")
        return self._move(req, LeaveStatus.CANCELLED, actor.user_id)

    def reject_cancellation(self, actor: Actor, request_id: int) -> LeaveRequest:
        req = self.get(request_id)
        if req.status != LeaveStatus.CANCELLATION_REQUESTED:
            raise ValidationError("No cancellation has been requested for this leave")
        return self._move(req, LeaveStatus.APPROVED, req.approved_by)
