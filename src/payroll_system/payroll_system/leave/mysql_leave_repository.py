from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import LeaveStatus, LeaveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, translate_duplicate
from .model import LeaveRequest
from .repository import LeaveRepository

_COLUMNS = "request_id, employee_id, leave_date, leave_type, status, approved_by, note, created_at"
_DUPLICATE = "A leave request for this employee on this date already exists"


def _to_request(r: dict) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        leave_date=r["leave_date"],
        leave_type=LeaveType(r["leave_type"]),
        status=LeaveStatus(r["status"]),
        approved_by=int(r["approved_by"]) if r.get("approved_by") is not None else None,
        note=r.get("note"),
        created_at=r.get("created_at"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM leave_requests WHERE request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, leave_date: date) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM leave_requests WHERE employee_id=%s AND leave_date=%s",
                (int(employee_id), leave_date),
            )
            r = fetchone(cur)
            return _to_request(r) if r else None

    def find_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM leave_requests
                WHERE employee_id=%s AND leave_date BETWEEN %s AND %s
                ORDER BY leave_date
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def count_held(self, employee_id: int, leave_type: LeaveType, start_date: date, end_date: date) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM leave_requests
                WHERE employee_id=%s AND leave_type=%s AND status IN (%s, %s)
                  AND leave_date BETWEEN %s AND %s
                """,
                (
                    int(employee_id),
                    leave_type.value,
                    LeaveStatus.APPROVED.value,
                    LeaveStatus.CANCELLATION_REQUESTED.value,
                    start_date,
                    end_date,
                ),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def create(
        self,
        *,
        employee_id: int,
        leave_date: date,
        leave_type: LeaveType,
        note: Optional[str] = None,
    ) -> int:
        with translate_duplicate(_DUPLICATE):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO leave_requests(employee_id, leave_date, leave_type, status, approved_by, note)
                    VALUES(%s,%s,%s,%s,NULL,%s)
                    """,
                    (int(employee_id), leave_date, leave_type.value, LeaveStatus.SUBMITTED.value, note),
                )
                return int(cur.lastrowid)

    def update_details(
        self,
        *,
        request_id: int,
        leave_date: date,
        leave_type: LeaveType,
        note: Optional[str],
    ) -> None:
        with translate_duplicate(_DUPLICATE):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "UPDATE leave_requests SET leave_date=%s, leave_type=%s, note=%s WHERE request_id=%s",
                    (leave_date, leave_type.value, note, int(request_id)),
                )

    def transition(
        self,
        *,
        request_id: int,
        expected: LeaveStatus,
        status: LeaveStatus,
        approved_by: Optional[int],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE leave_requests
                SET status=%s, approved_by=%s
                WHERE request_id=%s AND status=%s
                """,
                (status.value, approved_by, int(request_id), expected.value),
            )
            return cur.rowcount == 1
