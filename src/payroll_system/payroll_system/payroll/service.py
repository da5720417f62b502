from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..auth.policy import Actor
from ..common.datetime_utils import Period
from ..common.validators import optional_text
from ..core.enums import PaymentStatus, PayrollStatus
from ..core.exceptions import ConflictError, NotFoundError, PayrollLockedError, ValidationError
from ..employees.repository import EmployeeRepository
from ..recap.builder import TransactionFactory
from ..recap.repository import RecapRepository
from ..sessions.aggregator import SessionRealizationAggregator
from .factory import PayrollCalculatorFactory
from .model import PAYMENT_TRANSITIONS, PAYROLL_TRANSITIONS, Payroll, PayrollOutcome, PayrollPayment
from .repository import PaymentRepository, PayrollRepository

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        payrolls: PayrollRepository,
        payments: PaymentRepository,
        recaps: RecapRepository,
        employees: EmployeeRepository,
        sessions: SessionRealizationAggregator,
        tx: TransactionFactory,
        *,
        factory: Optional[PayrollCalculatorFactory] = None,
    ):
        self._payrolls = payrolls
        self._payments = payments
        self._recaps = recaps
        self._employees = employees
        self._sessions = sessions
        self._tx = tx
        self._factory = factory or PayrollCalculatorFactory()

    def get(self, payroll_id: int) -> Payroll:
        payroll = self._payrolls.get_by_id(int(payroll_id))
        if not payroll:
            raise NotFoundError("Payroll not found", resource="payroll")
        return payroll

    def list_by_period(self, period: str) -> Sequence[Payroll]:
        return self._payrolls.list_by_period(str(Period.parse(period)))

    def list_by_employee(self, employee_id: int) -> Sequence[Payroll]:
        return self._payrolls.list_by_employee(int(employee_id))

    def generate_from_recap(self, actor: Actor, recap_id: int) -> Payroll:
        """Compute the payroll for a recap and store it with its components.

        The payroll row and its components are written in one transaction;
        regenerating overwrites figures and components in place. Only draft
        payrolls can be regenerated.
        """
        recap = self._recaps.get_by_id(int(recap_id))
        if not recap:
            raise NotFoundError("Recap not found", resource="recap")
        employee = self._employees.get_by_id(recap.employee_id)
        if not employee:
            raise NotFoundError("Employee not found for this recap", resource="employee")

        with self._tx.transaction():
            existing = self._payrolls.get_for_employee_and_period(employee.employee_id, recap.period)
            if existing and existing.status != PayrollStatus.DRAFT:
                raise PayrollLockedError(
                    f"Payroll for {recap.period} is already {existing.status.value}; only draft payroll is regenerated",
                    status=existing.status.value,
                )

            overtime = self._sessions.overtime_income(employee.employee_id, Period.parse(recap.period))
            draft = self._factory.for_employee(employee).calculate(employee, recap, overtime_income=overtime)

            payroll_id = self._payrolls.upsert(draft, created_by=actor.user_id)
            self._payrolls.replace_components(payroll_id, draft)

        logger.info(
            "payroll %s generated for %s: total=%s",
            payroll_id,
            recap.period,
            draft.total_amount,
            extra={"employee_id": employee.employee_id},
        )
        return self.get(payroll_id)

    def generate_for_period(self, actor: Actor, period: str) -> list[PayrollOutcome]:
        """Generate payroll from every recap of the period, one transaction per employee.

        Approved or paid payroll is not regenerated; its outcome is a failure
        marked ``locked``.
        """
        p = Period.parse(period)
        outcomes = []
        for recap in self._recaps.list_by_period(str(p)):
            try:
                outcomes.append(
                    PayrollOutcome(employee_id=recap.employee_id, payroll=self.generate_from_recap(actor, recap.recap_id))
                )
            except PayrollLockedError as exc:
                logger.info("payroll %s left as %s", p, exc.status, extra={"employee_id": recap.employee_id})
                outcomes.append(PayrollOutcome(employee_id=recap.employee_id, error=str(exc), locked=True))
            except Exception as exc:
                logger.exception("payroll generation failed", extra={"employee_id": recap.employee_id, "period": str(p)})
                outcomes.append(PayrollOutcome(employee_id=recap.employee_id, error=str(exc) or exc.__class__.__name__))

        failed = sum(1 for o in outcomes if not o.ok)
        logger.info("payroll %s generated: %d ok, %d failed", p, len(outcomes) - failed, failed)
        return outcomes

    def update_status(self, actor: Actor, payroll_id: int, status: PayrollStatus) -> Payroll:
        payroll = self.get(payroll_id)
        if status not in PAYROLL_TRANSITIONS[payroll.status]:
            raise ValidationError(f"Cannot move payroll from {payroll.status.value} to {status.value}")

        if not self._payrolls.update_status(payroll_id=payroll.payroll_id, expected=payroll.status, status=status):
            raise ConflictError("Payroll was changed by another user, reload and retry")

        logger.info(
            "payroll %s: %s -> %s by user %s",
            payroll.payroll_id,
            payroll.status.value,
            status.value,
            actor.user_id,
        )
        return self.get(payroll.payroll_id)

    def list_payments(self, payroll_id: int) -> Sequence[PayrollPayment]:
        return self._payments.list_payments(self.get(payroll_id).payroll_id)

    def record_payment(
        self,
        actor: Actor,
        payroll_id: int,
        *,
        transfer_date: date,
        transfer_proof: Optional[str] = None,
        note: Optional[str] = None,
    ) -> PayrollPayment:
        payroll = self.get(payroll_id)
        if payroll.status == PayrollStatus.DRAFT:
            raise ValidationError("Payroll must be approved before recording a payment")

        payment_id = self._payments.create_payment(
            payroll_id=payroll.payroll_id,
            transfer_date=transfer_date,
            transfer_proof=optional_text(transfer_proof),
            note=optional_text(note),
        )
        logger.info("payment %s recorded for payroll %s by user %s", payment_id, payroll.payroll_id, actor.user_id)
        return self._payments.get_payment(payment_id)

    def update_payment_status(self, actor: Actor, payment_id: int, status: PaymentStatus) -> PayrollPayment:
        payment = self._payments.get_payment(int(payment_id))
        if not payment:
            raise NotFoundError("Payment not found", resource="payment")
        if status not in PAYMENT_TRANSITIONS[payment.status]:
            raise ValidationError(f"Cannot move payment from {payment.status.value} to {status.value}")

        approved_by = actor.user_id if status == PaymentStatus.SUCCEEDED else None
        if not self._payments.update_payment_status(
            payment_id=payment.payment_id,
            expected=payment.status,
            status=status,
            approved_by=approved_by,
        ):
            raise ConflictError("Payment was changed by another user, reload and retry")
        return self._payments.get_payment(payment.payment_id)
