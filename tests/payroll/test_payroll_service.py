from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from src.payroll_system.payroll_system.attendance.aggregator import AttendanceAggregator
from src.payroll_system.payroll_system.common.datetime_utils import Period
from src.payroll_system.payroll_system.core.enums import (
    ComponentType,
    ContractSubtype,
    EmployeeCategory,
    LeaveType,
    PaymentStatus,
    PayrollStatus,
    RealizationSource,
    SessionCategory,
)
from src.payroll_system.payroll_system.core.exceptions import NotFoundError, PayrollLockedError, ValidationError
from src.payroll_system.payroll_system.employees.model import Employee
from src.payroll_system.payroll_system.payroll.service import PayrollService
from src.payroll_system.payroll_system.recap.builder import MonthlyRecapBuilder
from src.payroll_system.payroll_system.sessions.aggregator import SessionRealizationAggregator

from tests.fakes import (
    FakeTransactions,
    InMemoryEmployees,
    InMemoryPayrolls,
    InMemoryRecaps,
    InMemorySessions,
    make_session,
)

PART_TIMER = Employee(
    employee_id=1,
    full_name="Part Timer",
    category=EmployeeCategory.FIXED_TERM,
    contract_subtype=ContractSubtype.PART_TIME,
    base_pay=Decimal("0"),
)
FREELANCER = Employee(employee_id=3, full_name="Freelancer", category=EmployeeCategory.FREELANCE)
JANUARY = Period(2025, 1)


class Env:
    def __init__(self, attendance, leaves):
        self.employees = InMemoryEmployees(PART_TIMER, FREELANCER)
        self.sessions = InMemorySessions(
            make_session(1, SessionCategory.CODING, "150000"),
            make_session(2, SessionCategory.NON_CODING, "50000"),
            make_session(3, SessionCategory.CODING, "200000"),
        )
        self.attendance = attendance
        self.leaves = leaves
        self.recaps = InMemoryRecaps()
        self.payrolls = InMemoryPayrolls()
        self.tx = FakeTransactions()
        aggregator = SessionRealizationAggregator(self.sessions)
        self.builder = MonthlyRecapBuilder(
            AttendanceAggregator(attendance, leaves), aggregator, self.recaps, self.tx
        )
        self.service = PayrollService(
            self.payrolls, self.payrolls, self.recaps, self.employees, aggregator, self.tx
        )


@pytest.fixture
def env(attendance, leaves):
    return Env(attendance, leaves)


def test_part_time_scenario_end_to_end(env, admin):
    env.leaves.add(1, date(2025, 1, 6), LeaveType.PERSONAL)
    env.leaves.add(1, date(2025, 1, 7), LeaveType.PERSONAL)
    env.sessions.add(1, date(2025, 1, 8), 3, source=RealizationSource.OVERTIME)
    recap = env.builder.build(1, JANUARY)

    payroll = env.service.generate_from_recap(admin, recap.recap_id)

    assert payroll.status == PayrollStatus.DRAFT
    assert payroll.created_by == admin.user_id
    assert payroll.leave_days == 2
    assert payroll.leave_deduction == Decimal("100000")
    assert payroll.total_amount == Decimal("100000")
    assert {c.component_type: c.amount for c in payroll.components} == {
        ComponentType.OVERTIME_INCOME: Decimal("200000"),
        ComponentType.DEDUCTION: Decimal("-100000"),
    }


def test_freelance_scenario_end_to_end(env, admin):
    env.sessions.add(3, date(2025, 1, 6), 1)
    env.sessions.add(3, date(2025, 1, 7), 2)
    recap = env.builder.build(3, JANUARY)
    assert recap.coding_income == Decimal("150000")
    assert recap.non_coding_income == Decimal("50000")

    payroll = env.service.generate_from_recap(admin, recap.recap_id)

    assert payroll.total_amount == Decimal("200000")
    assert [(c.component_type, c.amount) for c in payroll.components] == [
        (ComponentType.SESSION_INCOME, Decimal("200000"))
    ]


def test_regeneration_overwrites_in_place(env, admin, owner):
    env.leaves.add(1, date(2025, 1, 6), LeaveType.SICK)
    recap = env.builder.build(1, JANUARY)
    first = env.service.generate_from_recap(admin, recap.recap_id)

    env.sessions.add(1, date(2025, 1, 8), 3, source=RealizationSource.OVERTIME)
    second = env.service.generate_from_recap(owner, recap.recap_id)

    assert second.payroll_id == first.payroll_id
    assert len(env.payrolls.rows) == 1
    assert second.created_by == admin.user_id
    assert [c.component_type for c in second.components] == [ComponentType.OVERTIME_INCOME, ComponentType.DEDUCTION]
    assert second.total_amount == Decimal("150000")


def test_regeneration_is_idempotent(env, admin):
    env.leaves.add(1, date(2025, 1, 6), LeaveType.SICK)
    recap = env.builder.build(1, JANUARY)

    first = env.service.generate_from_recap(admin, recap.recap_id)
    second = env.service.generate_from_recap(admin, recap.recap_id)

    assert first == second


def test_overtime_reflects_latest_realizations_not_recap(env, admin):
    recap = env.builder.build(1, JANUARY)
    env.sessions.add(1, date(2025, 1, 8), 3, source=RealizationSource.OVERTIME)

    payroll = env.service.generate_from_recap(admin, recap.recap_id)

    assert payroll.total_amount == Decimal("200000")


def test_approved_payroll_cannot_be_regenerated(env, admin):
    recap = env.builder.build(1, JANUARY)
    payroll = env.service.generate_from_recap(admin, recap.recap_id)
    env.service.update_status(admin, payroll.payroll_id, PayrollStatus.APPROVED)

    with pytest.raises(PayrollLockedError) as exc:
        env.service.generate_from_recap(admin, recap.recap_id)
    assert exc.value.status == "approved"
    assert "only draft payroll is regenerated" in str(exc.value)


def test_status_is_forward_only(env, admin):
    recap = env.builder.build(1, JANUARY)
    payroll = env.service.generate_from_recap(admin, recap.recap_id)

    with pytest.raises(ValidationError):
        env.service.update_status(admin, payroll.payroll_id, PayrollStatus.PAID)

    env.service.update_status(admin, payroll.payroll_id, PayrollStatus.APPROVED)
    paid = env.service.update_status(admin, payroll.payroll_id, PayrollStatus.PAID)
    assert paid.status == PayrollStatus.PAID

    for back in (PayrollStatus.DRAFT, PayrollStatus.APPROVED):
        with pytest.raises(ValidationError):
            env.service.update_status(admin, payroll.payroll_id, back)


def test_missing_references(env, admin):
    with pytest.raises(NotFoundError):
        env.service.generate_from_recap(admin, 404)

    orphan = env.recaps.add(replace(env.builder.compute(1, JANUARY), employee_id=77))
    with pytest.raises(NotFoundError):
        env.service.generate_from_recap(admin, orphan.recap_id)


def test_generate_for_period_isolates_failures(env, admin):
    env.builder.build(1, JANUARY)
    env.builder.build(3, JANUARY)
    env.recaps.add(replace(env.builder.compute(1, JANUARY), employee_id=77))

    outcomes = env.service.generate_for_period(admin, "2025-01")

    by_id = {o.employee_id: o for o in outcomes}
    assert by_id[1].ok and by_id[3].ok
    assert not by_id[77].ok
    assert len(env.payrolls.list_by_period("2025-01")) == 2


def test_payments(env, admin):
    recap = env.builder.build(1, JANUARY)
    payroll = env.service.generate_from_recap(admin, recap.recap_id)

    with pytest.raises(ValidationError):
        env.service.record_payment(admin, payroll.payroll_id, transfer_date=date(2025, 2, 1))

    env.service.update_status(admin, payroll.payroll_id, PayrollStatus.APPROVED)
    payment = env.service.record_payment(
        admin, payroll.payroll_id, transfer_date=date(2025, 2, 1), transfer_proof="trx-001"
    )
    assert payment.status == PaymentStatus.PENDING
    assert payment.approved_by is None

    failed = env.service.update_payment_status(admin, payment.payment_id, PaymentStatus.FAILED)
    assert failed.approved_by is None
    env.service.update_payment_status(admin, payment.payment_id, PaymentStatus.PENDING)
    done = env.service.update_payment_status(admin, payment.payment_id, PaymentStatus.SUCCEEDED)
    assert done.approved_by == admin.user_id

    with pytest.raises(ValidationError):
        env.service.update_payment_status(admin, payment.payment_id, PaymentStatus.FAILED)
    assert [p.payment_id for p in env.service.list_payments(payroll.payroll_id)] == [payment.payment_id]


def test_generate_for_period_marks_approved_payroll_as_locked(env, admin):
    env.builder.build(1, JANUARY)
    env.builder.build(3, JANUARY)
    first = {o.employee_id: o.payroll for o in env.service.generate_for_period(admin, "2025-01")}
    env.service.update_status(admin, first[1].payroll_id, PayrollStatus.APPROVED)

    outcomes = {o.employee_id: o for o in env.service.generate_for_period(admin, "2025-01")}

    assert outcomes[1].locked and not outcomes[1].ok
    assert outcomes[3].ok and not outcomes[3].locked
    assert env.payrolls.get_by_id(first[1].payroll_id).status == PayrollStatus.APPROVED
