from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...employees.model import Employee
from ...recap.model import MonthlyRecap
from ..model import PayrollDraft


class PayrollCalculator(ABC):
    """Strategy Pattern: one payroll rule per employee category."""

    @abstractmethod
    def calculate(self, employee: Employee, recap: MonthlyRecap, *, overtime_income: Decimal) -> PayrollDraft:
        raise NotImplementedError
