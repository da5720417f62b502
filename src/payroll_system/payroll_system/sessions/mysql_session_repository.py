from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import DayOfWeek, RealizationSource, RealizationStatus, SessionCategory
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, translate_duplicate
from .model import SessionRealization, WorkSession
from .repository import RealizationRepository, WorkSessionRepository

_SESSION_COLUMNS = "session_id, category, day_of_week, session_number, start_time, end_time, rate, is_active"

_REALIZATION_SELECT = """
    SELECT r.realization_id, r.employee_id, r.work_date, r.session_id, r.status, r.source,
           r.approved_by, r.note,
           s.session_id AS s_session_id, s.category, s.day_of_week, s.session_number,
           s.start_time, s.end_time, s.rate, s.is_active
    FROM session_realizations r
    LEFT JOIN work_sessions s ON s.session_id = r.session_id
"""


def _to_session(r: dict) -> WorkSession:
    return WorkSession(
        session_id=int(r["session_id"]),
        category=SessionCategory(r["category"]),
        day_of_week=DayOfWeek(r["day_of_week"]),
        session_number=int(r["session_number"]),
        start_time=normalize_mysql_time(r["start_time"]),
        end_time=normalize_mysql_time(r["end_time"]),
        rate=Decimal(str(r["rate"])),
        is_active=bool(r["is_active"]),
    )


def _to_realization(r: dict) -> SessionRealization:
    session = None
    if r.get("s_session_id") is not None:
        session = _to_session({**r, "session_id": r["s_session_id"]})

    return SessionRealization(
        realization_id=int(r["realization_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        session_id=int(r["session_id"]),
        status=RealizationStatus(r["status"]),
        source=RealizationSource(r["source"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        note=r.get("note"),
        session=session,
    )


class MySQLSessionRepository(WorkSessionRepository, RealizationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_session(self, session_id: int) -> Optional[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_SESSION_COLUMNS} FROM work_sessions WHERE session_id=%s", (int(session_id),))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_sessions(self, *, active_only: bool = True) -> Sequence[WorkSession]:
        sql = f"SELECT {_SESSION_COLUMNS} FROM work_sessions"
        if active_only:
            sql += " WHERE is_active=1"
        sql += " ORDER BY category, FIELD(day_of_week,'monday','tuesday','wednesday','thursday','friday','saturday'), session_number"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql)
            return [_to_session(r) for r in fetchall(cur)]

    def get_by_id(self, realization_id: int) -> Optional[SessionRealization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_REALIZATION_SELECT + " WHERE r.realization_id=%s", (int(realization_id),))
            r = fetchone(cur)
            return _to_realization(r) if r else None

    def find_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[SessionRealization]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _REALIZATION_SELECT
                + """
                WHERE r.employee_id=%s AND r.work_date BETWEEN %s AND %s
                ORDER BY r.work_date, r.realization_id
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_realization(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        session_id: int,
        status: RealizationStatus,
        source: RealizationSource,
        approved_by: Optional[int] = None,
        note: Optional[str] = None,
    ) -> int:
        # The (work_date, session_id) unique key is the only guard between concurrent claims.
        with translate_duplicate("This session has already been claimed for that date"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO session_realizations(employee_id, work_date, session_id, status, source, approved_by, note)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(employee_id), work_date, int(session_id), status.value, source.value, approved_by, note),
                )
                return int(cur.lastrowid)

    def transition(
        self,
        *,
        realization_id: int,
        expected: RealizationStatus,
        status: RealizationStatus,
        approved_by: Optional[int],
        note: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE session_realizations
                SET status=%s, approved_by=%s, note=COALESCE(%s, note)
                WHERE realization_id=%s AND status=%s
                """,
                (status.value, approved_by, note, int(realization_id), expected.value),
            )
            return cur.rowcount == 1
