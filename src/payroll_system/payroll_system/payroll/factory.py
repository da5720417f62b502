from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import EmployeeCategory
from ..employees.model import Employee
from .calculator.base import PayrollCalculator
from .calculator.freelance_calculator import FreelancePayrollCalculator
from .calculator.salaried_calculator import SalariedPayrollCalculator


@dataclass
class PayrollCalculatorFactory:
    """Factory Pattern: choose the payroll rule from the employee category."""

    def for_employee(self, employee: Employee) -> PayrollCalculator:
        if employee.category == EmployeeCategory.FREELANCE:
            return FreelancePayrollCalculator()
        return SalariedPayrollCalculator()
