from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Mapping, Optional

from ..core.enums import LeaveStatus, LeaveType


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    leave_date: date
    leave_type: LeaveType
    status: LeaveStatus
    approved_by: Optional[int] = None
    note: Optional[str] = None
    created_at: Optional[datetime] = None


# Allowed lifecycle moves; anything else is rejected.
LEAVE_TRANSITIONS: Mapping[LeaveStatus, frozenset[LeaveStatus]] = {
    LeaveStatus.SUBMITTED: frozenset({LeaveStatus.APPROVED, LeaveStatus.REJECTED, LeaveStatus.CANCELLED}),
    LeaveStatus.APPROVED: frozenset({LeaveStatus.CANCELLATION_REQUESTED}),
    LeaveStatus.CANCELLATION_REQUESTED: frozenset({LeaveStatus.CANCELLED, LeaveStatus.APPROVED}),
    LeaveStatus.REJECTED: frozenset(),
    LeaveStatus.CANCELLED: frozenset(),
}

# A day keeps using personal-leave quota until its cancellation is approved.
QUOTA_HOLDING_STATUSES: frozenset[LeaveStatus] = frozenset(
    {LeaveStatus.APPROVED, LeaveStatus.CANCELLATION_REQUESTED}
)
