from __future__ import annotations

from decimal import Decimal

from ...core.constants import FULL_TIME_LEAVE_DEDUCTION_PER_DAY, PART_TIME_LEAVE_DEDUCTION_PER_DAY
from ...core.enums import ComponentType, ContractSubtype
from ...employees.model import Employee
from ...recap.model import MonthlyRecap
from ..model import PayrollComponent, PayrollDraft
from .base import PayrollCalculator


class SalariedPayrollCalculator(PayrollCalculator):
    """Permanent and fixed-term: base pay + overtime - leave deduction, never below 0.

    Scheduled sessions are covered by base pay; only overtime sessions are paid on top.
    """

    def deduction_per_day(self, employee: Employee) -> Decimal:
        if employee.contract_subtype == ContractSubtype.PART_TIME:
            return PART_TIME_LEAVE_DEDUCTION_PER_DAY
        return FULL_TIME_LEAVE_DEDUCTION_PER_DAY

    def calculate(self, employee: Employee, recap: MonthlyRecap, *, overtime_income: Decimal) -> PayrollDraft:
        components = []
        total = Decimal("0")

        base_pay = employee.base_pay or Decimal("0")
        if base_pay > 0:
            components.append(PayrollComponent(ComponentType.BASE_PAY, "Base pay", base_pay))
            total += base_pay

        if overtime_income > 0:
            components.append(PayrollComponent(ComponentType.OVERTIME_INCOME, "Overtime sessions", overtime_income))
            total += overtime_income

        leave_days = recap.leave_days
        deduction = Decimal("0")
        if leave_days > 0:
            deduction = leave_days * self.deduction_per_day(employee)
            components.append(
                PayrollComponent(ComponentType.DEDUCTION, f"Leave deduction ({leave_days} days)", -deduction)
            )
            total -= deduction

        return PayrollDraft(
            employee_id=employee.employee_id,
            period=recap.period,
            leave_days=leave_days,
            leave_deduction=deduction,
            total_amount=max(Decimal("0"), total),
            components=tuple(components),
        )
