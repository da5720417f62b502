from datetime import date

import pytest

from src.payroll_system.payroll_system.core.enums import LeaveStatus, LeaveType
from src.payroll_system.payroll_system.core.exceptions import NotFoundError, QuotaExceededError
from src.payroll_system.payroll_system.leave.quota import LeaveQuotaValidator


@pytest.fixture
def quota(employees, leaves):
    return LeaveQuotaValidator(employees, leaves)


def test_fixed_term_second_day_accepted_third_rejected(quota, leaves):
    leaves.add(1, date(2025, 3, 3))
    assert quota.check(1, LeaveType.PERSONAL, date(2025, 3, 10)) is None

    leaves.add(1, date(2025, 3, 10))
    error = quota.check(1, LeaveType.PERSONAL, date(2025, 3, 17))
    assert isinstance(error, QuotaExceededError)
    assert (error.count, error.limit, error.window) == (2, 2, "month")


def test_fixed_term_window_is_the_calendar_month(quota, leaves):
    leaves.add(1, date(2025, 2, 27))
    leaves.add(1, date(2025, 2, 28))
    assert quota.check(1, LeaveType.PERSONAL, date(2025, 3, 3)) is None


def test_permanent_twelfth_accepted_thirteenth_rejected(quota, leaves):
    for month in range(1, 12):
        leaves.add(2, date(2025, month, 5))
    assert quota.check(2, LeaveType.PERSONAL, date(2025, 12, 1)) is None

    leaves.add(2, date(2025, 12, 1))
    error = quota.check(2, LeaveType.PERSONAL, date(2025, 12, 15))
    assert (error.count, error.limit, error.window) == (12, 12, "year")

    assert quota.check(2, LeaveType.PERSONAL, date(2026, 1, 5)) is None


def test_sick_leave_and_freelancers_are_unlimited(quota, leaves):
    for day in (3, 4, 5):
        leaves.add(1, date(2025, 3, day))
        leaves.add(3, date(2025, 3, day))
    assert quota.check(1, LeaveType.SICK, date(2025, 3, 10)) is None
    assert quota.check(3, LeaveType.PERSONAL, date(2025, 3, 10)) is None


def test_only_approved_requests_count(quota, leaves):
    leaves.add(1, date(2025, 3, 3), status=LeaveStatus.SUBMITTED)
    leaves.add(1, date(2025, 3, 4), status=LeaveStatus.REJECTED)
    leaves.add(1, date(2025, 3, 5), status=LeaveStatus.CANCELLED)
    leaves.add(1, date(2025, 3, 6))
    assert quota.check(1, LeaveType.PERSONAL, date(2025, 3, 10)) is None


def test_excluded_approved_request_is_not_counted(quota, leaves):
    leaves.add(1, date(2025, 3, 3))
    moved = leaves.add(1, date(2025, 3, 4))

    assert quota.check(1, LeaveType.PERSONAL, date(2025, 3, 20)) is not None
    assert quota.check(1, LeaveType.PERSONAL, date(2025, 3, 20), exclude_request_id=moved.request_id) is None


def test_exclusion_ignored_outside_window_or_when_not_approved(quota, leaves):
    leaves.add(1, date(2025, 3, 3))
    leaves.add(1, date(2025, 3, 4))
    other_month = leaves.add(1, date(2025, 4, 1))
    pending = leaves.add(1, date(2025, 3, 5), status=LeaveStatus.SUBMITTED)

    assert quota.check(1, LeaveType.PERSONAL, date(2025, 3, 20), exclude_request_id=other_month.request_id) is not None
    assert quota.check(1, LeaveType.PERSONAL, date(2025, 3, 20), exclude_request_id=pending.request_id) is not None


def test_validate_raises(quota, leaves):
    leaves.add(1, date(2025, 3, 3))
    leaves.add(1, date(2025, 3, 4))
    with pytest.raises(QuotaExceededError):
        quota.validate(1, LeaveType.PERSONAL, date(2025, 3, 20))


def test_unknown_employee(quota):
    with pytest.raises(NotFoundError):
        quota.check(999, LeaveType.PERSONAL, date(2025, 3, 3))


def test_pending_cancellation_still_holds_quota(quota, leaves):
    leaves.add(1, date(2025, 3, 3))
    pending = leaves.add(1, date(2025, 3, 4), status=LeaveStatus.CANCELLATION_REQUESTED)

    error = quota.check(1, LeaveType.PERSONAL, date(2025, 3, 20))
    assert error is not None
    assert error.count == 2
    assert quota.check(1, LeaveType.PERSONAL, date(2025, 3, 20), exclude_request_id=pending.request_id) is None
