from __future__ import annotations

from typing import ContextManager, Protocol

from ..attendance.aggregator import AttendanceAggregator
from ..common.datetime_utils import Period
from ..core.exceptions import NotFoundError
from ..sessions.aggregator import SessionRealizationAggregator
from .model import MonthlyRecap
from .repository import RecapRepository


class TransactionFactory(Protocol):
    def transaction(self) -> ContextManager[object]:
        raise NotImplementedError


class MonthlyRecapBuilder:
    """Builds and stores the recap of one employee for one period.

    Reads and the upsert share one transaction, so an interrupted build
    leaves the previous recap untouched.
    """

    def __init__(
        self,
        attendance: AttendanceAggregator,
        sessions: SessionRealizationAggregator,
        recaps: RecapRepository,
        tx: TransactionFactory,
    ):
        self._attendance = attendance
        self._sessions = sessions
        self._recaps = recaps
        self._tx = tx

    def compute(self, employee_id: int, period: Period) -> MonthlyRecap:
        days = self._attendance.summarize(employee_id, period)
        sessions = self._sessions.summarize(employee_id, period)

        return MonthlyRecap(
            employee_id=int(employee_id),
            period=str(period),
            present_days=days.present,
            personal_leave_days=days.personal_leave,
            sick_leave_days=days.sick_leave,
            vacation_days=days.vacation,
            unexcused_absence_days=days.unexcused_absence,
            coding_sessions=sessions.coding_sessions,
            non_coding_sessions=sessions.non_coding_sessions,
            coding_income=sessions.coding_income,
            non_coding_income=sessions.non_coding_income,
            total_session_income=sessions.total_income,
        )

    def build(self, employee_id: int, period: Period) -> MonthlyRecap:
        with self._tx.transaction():
            recap_id = self._recaps.upsert(self.compute(employee_id, period))
            stored = self._recaps.get_by_id(recap_id)
        if not stored:
            raise NotFoundError("Recap vanished right after it was written", resource="recap")
        return stored
