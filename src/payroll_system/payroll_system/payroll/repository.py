from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..core.enums import PaymentStatus, PayrollStatus
from .model import Payroll, PayrollDraft, PayrollPayment


class PayrollRepository(Protocol):
    def get_by_id(self, payroll_id: int) -> Optional[Payroll]:
        """Payroll with its components."""

        raise NotImplementedError

    def get_for_employee_and_period(self, employee_id: int, period: str) -> Optional[Payroll]:
        raise NotImplementedError

    def list_by_period(self, period: str) -> Sequence[Payroll]:
        raise NotImplementedError

    def list_by_employee(self, employee_id: int) -> Sequence[Payroll]:
        raise NotImplementedError

    def upsert(self, draft: PayrollDraft, *, created_by: Optional[int]) -> int:
        """Insert as draft, or overwrite the figures of the (employee, period) row; returns its id.

        Status and creator of an existing row are kept.
        """

        raise NotImplementedError

    def replace_components(self, payroll_id: int, draft: PayrollDraft) -> None:
        raise NotImplementedError

    def update_status(self, *, payroll_id: int, expected: PayrollStatus, status: PayrollStatus) -> bool:
        raise NotImplementedError


class PaymentRepository(Protocol):
    def get_payment(self, payment_id: int) -> Optional[PayrollPayment]:
        raise NotImplementedError

    def list_payments(self, payroll_id: int) -> Sequence[PayrollPayment]:
        raise NotImplementedError

    def create_payment(
        self,
        *,
        payroll_id: int,
        transfer_date: date,
        transfer_proof: Optional[str],
        note: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_payment_status(
        self,
        *,
        payment_id: int,
        expected: PaymentStatus,
        status: PaymentStatus,
        approved_by: Optional[int],
    ) -> bool:
        raise NotImplementedError
