from __future__ import annotations

from decimal import Decimal

from ...core.enums import ComponentType
from ...employees.model import Employee
from ...recap.model import MonthlyRecap
from ..model import PayrollComponent, PayrollDraft
from .base import PayrollCalculator


class FreelancePayrollCalculator(PayrollCalculator):
    """Freelancers are paid their session income only; leave is reported but not deducted."""

    def calculate(self, employee: Employee, recap: MonthlyRecap, *, overtime_income: Decimal) -> PayrollDraft:
        total = max(Decimal("0"), recap.total_session_income)
        return PayrollDraft(
            employee_id=employee.employee_id,
            period=recap.period,
            leave_days=recap.leave_days,
            leave_deduction=Decimal("0"),
            total_amount=total,
            components=(PayrollComponent(ComponentType.SESSION_INCOME, "Session income", total),),
        )
