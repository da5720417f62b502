from __future__ import annotations

from enum import Enum


class EmployeeCategory(str, Enum):
    """Contract classification driving payroll rules."""

    PERMANENT = "permanent"
    FIXED_TERM = "fixed_term"
    FREELANCE = "freelance"


class ContractSubtype(str, Enum):
    """Only meaningful for fixed-term employees."""

    FULL_TIME = "full_time"
    PART_TIME = "part_time"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AttendanceStatus(str, Enum):
    """Daily attendance status stored on the attendance record."""

    PRESENT = "present"
    LEAVE_SHORT = "leave_short"


class AttendanceLogKind(str, Enum):
    CHECK_IN = "check_in"
    CHECK_OUT = "check_out"


class AttendanceSource(str, Enum):
    MOBILE = "mobile"
    WEB = "web"
    KIOSK = "kiosk"


class LeaveType(str, Enum):
    """Leave types surviving the enum migration (vacation folded into personal leave)."""

    PERSONAL = "personal_leave"
    SICK = "sick_leave"


class LeaveStatus(str, Enum):
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    CANCELLATION_REQUESTED = "cancellation_requested"


class SessionCategory(str, Enum):
    CODING = "coding"
    NON_CODING = "non_coding"


class DayOfWeek(str, Enum):
    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"


class RealizationStatus(str, Enum):
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class RealizationSource(str, Enum):
    """Scheduled load vs. overtime outside the employee's regular schedule."""

    SCHEDULED = "scheduled"
    OVERTIME = "overtime"


class PayrollStatus(str, Enum):
    DRAFT = "draft"
    APPROVED = "approved"
    PAID = "paid"


class ComponentType(str, Enum):
    BASE_PAY = "base_pay"
    SESSION_INCOME = "session_income"
    OVERTIME_INCOME = "overtime_income"
    DEDUCTION = "deduction"
    BONUS = "bonus"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
