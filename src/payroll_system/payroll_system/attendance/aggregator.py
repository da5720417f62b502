from __future__ import annotations

from ..common.datetime_utils import Period
from ..core.enums import AttendanceStatus, LeaveStatus, LeaveType
from ..leave.repository import LeaveRepository
from .model import AttendanceSummary
from .repository import AttendanceRepository


class AttendanceAggregator:
    """Reduces one employee's attendance and approved leave for a period into day-type counts."""

    def __init__(self, attendance: AttendanceRepository, leaves: LeaveRepository):
        self._attendance = attendance
        self._leaves = leaves

    def summarize(self, employee_id: int, period: Period) -> AttendanceSummary:
        records = self._attendance.find_for_employee(employee_id, period.start, period.end)
        leaves = [
            lv
            for lv in self._leaves.find_for_employee(employee_id, period.start, period.end)
            if lv.status == LeaveStatus.APPROVED
        ]

        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        personal = sum(1 for r in records if r.status == AttendanceStatus.LEAVE_SHORT)
        personal += sum(1 for lv in leaves if lv.leave_type == LeaveType.PERSONAL)
        sick = sum(1 for lv in leaves if lv.leave_type == LeaveType.SICK)
        # The vacation leave type was folded into personal leave; nothing can be
        # filed under it anymore, so the count stays zero.
        vacation = 0

        # Counts are per record, not per distinct working day: a present record
        # on a Sunday, or an approved leave on a day that also has attendance,
        # is counted as it is. Unexcused absence then shrinks by those extra
        # counts, and the four counts can add up to more than working_days
        # once it is clamped at zero.
        working_days = period.working_days()
        unexcused = max(0, working_days - (present + personal + sick + vacation))

        return AttendanceSummary(
            present=present,
            personal_leave=personal,
            sick_leave=sick,
            unexcused_absence=unexcused,
            working_days=working_days,
            vacation=vacation,
        )
