from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Mapping, Optional

from ..core.enums import ComponentType, PaymentStatus, PayrollStatus


@dataclass(frozen=True)
class PayrollComponent:
    """One line of a payroll; deductions carry a negative amount."""

    component_type: ComponentType
    label: str
    amount: Decimal
    component_id: Optional[int] = None


@dataclass(frozen=True)
class PayrollDraft:
    """Calculator output, not yet persisted."""

    employee_id: int
    period: str
    leave_days: int
    leave_deduction: Decimal
    total_amount: Decimal
    components: tuple[PayrollComponent, ...]


@dataclass(frozen=True)
class Payroll:
    payroll_id: int
    employee_id: int
    period: str
    leave_days: int
    leave_deduction: Decimal
    total_amount: Decimal
    status: PayrollStatus
    created_by: Optional[int] = None
    components: tuple[PayrollComponent, ...] = ()


@dataclass(frozen=True)
class PayrollPayment:
    payment_id: int
    payroll_id: int
    transfer_date: date
    status: PaymentStatus
    transfer_proof: Optional[str] = None
    approved_by: Optional[int] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class PayrollOutcome:
    employee_id: int
    payroll: Optional[Payroll] = None
    error: Optional[str] = None
    # Approved or paid payroll that was left as it is.
    locked: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None


# Forward-only: draft -> approved -> paid.
PAYROLL_TRANSITIONS: Mapping[PayrollStatus, frozenset[PayrollStatus]] = {
    PayrollStatus.DRAFT: frozenset({PayrollStatus.APPROVED}),
    PayrollStatus.APPROVED: frozenset({PayrollStatus.PAID}),
    PayrollStatus.PAID: frozenset(),
}

# A failed transfer may be retried; a succeeded one is final.
PAYMENT_TRANSITIONS: Mapping[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({PaymentStatus.SUCCEEDED, PaymentStatus.FAILED}),
    PaymentStatus.FAILED: frozenset({PaymentStatus.PENDING}),
    PaymentStatus.SUCCEEDED: frozenset(),
}
