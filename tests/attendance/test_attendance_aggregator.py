from datetime import date

from src.payroll_system.payroll_system.attendance.aggregator import AttendanceAggregator
from src.payroll_system.payroll_system.common.datetime_utils import Period
from src.payroll_system.payroll_system.core.enums import AttendanceStatus, LeaveStatus, LeaveType

JAN = Period(2025, 1)  # 31 days, 4 Sundays


def test_counts_each_day_type(attendance, leaves):
    for day in (2, 3, 4, 6, 7):
        attendance.add(1, date(2025, 1, day))
    attendance.add(1, date(2025, 1, 8), AttendanceStatus.LEAVE_SHORT)
    leaves.add(1, date(2025, 1, 9), LeaveType.PERSONAL)
    leaves.add(1, date(2025, 1, 10), LeaveType.SICK)
    leaves.add(1, date(2025, 1, 11), LeaveType.SICK)

    s = AttendanceAggregator(attendance, leaves).summarize(1, JAN)

    assert s.working_days == 27
    assert s.present == 5
    assert s.personal_leave == 2
    assert s.sick_leave == 2
    assert s.vacation == 0
    assert s.unexcused_absence == 27 - 9


def test_only_approved_leave_counts(attendance, leaves):
    leaves.add(1, date(2025, 1, 2), status=LeaveStatus.SUBMITTED)
    leaves.add(1, date(2025, 1, 3), status=LeaveStatus.REJECTED)
    leaves.add(1, date(2025, 1, 4), status=LeaveStatus.CANCELLED)
    leaves.add(1, date(2025, 1, 6), status=LeaveStatus.CANCELLATION_REQUESTED)
    leaves.add(1, date(2025, 1, 7), status=LeaveStatus.APPROVED)

    s = AttendanceAggregator(attendance, leaves).summarize(1, JAN)

    assert s.personal_leave == 1


def test_ignores_other_employees_and_periods(attendance, leaves):
    attendance.add(2, date(2025, 1, 2))
    attendance.add(1, date(2024, 12, 31))
    attendance.add(1, date(2025, 2, 1))
    leaves.add(1, date(2025, 2, 3))

    s = AttendanceAggregator(attendance, leaves).summarize(1, JAN)

    assert (s.present, s.personal_leave, s.sick_leave) == (0, 0, 0)
    assert s.unexcused_absence == 27


def test_day_types_add_up_to_working_days(attendance, leaves):
    feb = Period(2025, 2)
    working = [d for d in feb.days() if d.weekday() != 6]
    for d in working[:10]:
        attendance.add(1, d)
    for d in working[10:12]:
        leaves.add(1, d, LeaveType.PERSONAL)
    for d in working[12:15]:
        leaves.add(1, d, LeaveType.SICK)
    attendance.add(1, working[15], AttendanceStatus.LEAVE_SHORT)

    s = AttendanceAggregator(attendance, leaves).summarize(1, feb)

    assert s.working_days == 24
    assert s.present + s.personal_leave + s.sick_leave + s.unexcused_absence == s.working_days


def test_unexcused_never_negative(attendance, leaves):
    # Every calendar day recorded, Sundays included.
    for d in Period(2025, 2).days():
        attendance.add(1, d)

    s = AttendanceAggregator(attendance, leaves).summarize(1, Period(2025, 2))

    assert s.present == 28
    assert s.unexcused_absence == 0


def test_sunday_records_and_overlapping_leave_are_counted_as_recorded(attendance, leaves):
    attendance.add(1, date(2025, 1, 5))  # Sunday
    attendance.add(1, date(2025, 1, 6))
    leaves.add(1, date(2025, 1, 6), LeaveType.SICK)

    s = AttendanceAggregator(attendance, leaves).summarize(1, JAN)

    # Only one working day is covered, yet three counts are recorded.
    assert (s.present, s.sick_leave) == (2, 1)
    assert s.unexcused_absence == 27 - 3


def test_counts_can_exceed_working_days(attendance, leaves):
    feb = Period(2025, 2)
    for d in feb.days():
        attendance.add(1, d)
    leaves.add(1, date(2025, 2, 3), LeaveType.PERSONAL)

    s = AttendanceAggregator(attendance, leaves).summarize(1, feb)

    assert s.working_days == 24
    assert s.present + s.personal_leave + s.sick_leave + s.unexcused_absence == 29
