from __future__ import annotations

from decimal import Decimal

import pytest

from src.payroll_system.payroll_system.auth.policy import Actor, Role
from src.payroll_system.payroll_system.core.enums import ContractSubtype, EmployeeCategory
from src.payroll_system.payroll_system.employees.model import Employee

from tests.fakes import InMemoryAttendance, InMemoryEmployees, InMemoryLeaves, InMemorySessions


@pytest.fixture
def fixed_term():
    return Employee(
        employee_id=1,
        full_name="Fixed Term",
        category=EmployeeCategory.FIXED_TERM,
        contract_subtype=ContractSubtype.FULL_TIME,
        base_pay=Decimal("3000000"),
    )


@pytest.fixture
def permanent():
    return Employee(
        employee_id=2,
        full_name="Permanent",
        category=EmployeeCategory.PERMANENT,
        base_pay=Decimal("5000000"),
    )


@pytest.fixture
def freelancer():
    return Employee(employee_id=3, full_name="Freelancer", category=EmployeeCategory.FREELANCE)


@pytest.fixture
def employees(fixed_term, permanent, freelancer):
    return InMemoryEmployees(fixed_term, permanent, freelancer)


@pytest.fixture
def attendance():
    return InMemoryAttendance()


@pytest.fixture
def leaves():
    return InMemoryLeaves()


@pytest.fixture
def sessions():
    return InMemorySessions()


@pytest.fixture
def admin():
    return Actor.resolve(user_id=100, role=Role.ADMIN)


@pytest.fixture
def owner():
    return Actor.resolve(user_id=101, role=Role.OWNER)
