from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import MonthlyRecap
from .repository import RecapRepository

_COLUMNS = (
    "recap_id, employee_id, period, present_days, personal_leave_days, sick_leave_days, vacation_days, "
    "unexcused_absence_days, coding_sessions, non_coding_sessions, coding_income, non_coding_income, "
    "total_session_income"
)


def _to_recap(r: dict) -> MonthlyRecap:
    return MonthlyRecap(
        recap_id=int(r["recap_id"]),
        employee_id=int(r["employee_id"]),
        period=str(r["period"]),
        present_days=int(r["present_days"]),
        personal_leave_days=int(r["personal_leave_days"]),
        sick_leave_days=int(r["sick_leave_days"]),
        vacation_days=int(r["vacation_days"]),
        unexcused_absence_days=int(r["unexcused_absence_days"]),
        coding_sessions=int(r["coding_sessions"]),
        non_coding_sessions=int(r["non_coding_sessions"]),
        coding_income=as_decimal(r["coding_income"]),
        non_coding_income=as_decimal(r["non_coding_income"]),
        total_session_income=as_decimal(r["total_session_income"]),
    )


class MySQLRecapRepository(RecapRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, recap_id: int) -> Optional[MonthlyRecap]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM monthly_recaps WHERE recap_id=%s", (int(recap_id),))
            r = fetchone(cur)
            return _to_recap(r) if r else None

    def get_for_employee_and_period(self, employee_id: int, period: str) -> Optional[MonthlyRecap]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM monthly_recaps WHERE employee_id=%s AND period=%s",
                (int(employee_id), period),
            )
            r = fetchone(cur)
            return _to_recap(r) if r else None

    def list_by_period(self, period: str) -> Sequence[MonthlyRecap]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM monthly_recaps WHERE period=%s ORDER BY employee_id", (period,))
            return [_to_recap(r) for r in fetchall(cur)]

    def upsert(self, recap: MonthlyRecap) -> int:
        # LAST_INSERT_ID(recap_id) makes lastrowid report the existing row on update.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO monthly_recaps(
                    employee_id, period, present_days, personal_leave_days, sick_leave_days, vacation_days,
                    unexcused_absence_days, coding_sessions, non_coding_sessions, coding_income,
                    non_coding_income, total_session_income
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    recap_id=LAST_INSERT_ID(recap_id),
                    present_days=VALUES(present_days),
                    personal_leave_days=VALUES(personal_leave_days),
                    sick_leave_days=VALUES(sick_leave_days),
                    vacation_days=VALUES(vacation_days),
                    unexcused_absence_days=VALUES(unexcused_absence_days),
                    coding_sessions=VALUES(coding_sessions),
                    non_coding_sessions=VALUES(non_coding_sessions),
                    coding_income=VALUES(coding_income),
                    non_coding_income=VALUES(non_coding_income),
                    total_session_income=VALUES(total_session_income)
                """,
                (
                    int(recap.employee_id),
                    recap.period,
                    recap.present_days,
                    recap.personal_leave_days,
                    recap.sick_leave_days,
                    recap.vacation_days,
                    recap.unexcused_absence_days,
                    recap.coding_sessions,
                    recap.non_coding_sessions,
                    recap.coding_income,
                    recap.non_coding_income,
                    recap.total_session_income,
                ),
            )
            return int(cur.lastrowid)
