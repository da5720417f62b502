from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from ..core.enums import ContractSubtype, EmployeeCategory, EmployeeStatus


@dataclass(frozen=True)
class Employee:
    """Contract terms read from the employee directory (read-only to payroll)."""

    employee_id: int
    full_name: str
    category: EmployeeCategory
    contract_subtype: Optional[ContractSubtype] = None
    base_pay: Optional[Decimal] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE
