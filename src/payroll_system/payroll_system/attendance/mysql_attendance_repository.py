from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Sequence

from ..core.enums import AttendanceLogKind, AttendanceSource, AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, normalize_mysql_time, translate_duplicate
from .model import AttendanceLog, AttendanceRecord
from .repository import AttendanceLogRepository, AttendanceRepository

_RECORD_COLUMNS = "attendance_id, employee_id, work_date, status, check_in, check_out, source, note"
_LOG_COLUMNS = (
    "log_id, attendance_id, kind, logged_at, latitude, longitude, accuracy, source, "
    "reference_latitude, reference_longitude, radius_min, radius_max, distance_m, gps_valid"
)


def _to_record(r: dict) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(r["status"]),
        check_in=normalize_mysql_time(r.get("check_in")),
        check_out=normalize_mysql_time(r.get("check_out")),
        source=AttendanceSource(r["source"]) if r.get("source") else None,
        note=r.get("note"),
    )


def _to_log(r: dict) -> AttendanceLog:
    return AttendanceLog(
        log_id=int(r["log_id"]),
        attendance_id=int(r["attendance_id"]),
        kind=AttendanceLogKind(r["kind"]),
        logged_at=r["logged_at"],
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        accuracy=int(r["accuracy"]) if r.get("accuracy") is not None else None,
        source=AttendanceSource(r["source"]),
        reference_latitude=float(r["reference_latitude"]),
        reference_longitude=float(r["reference_longitude"]),
        radius_min=int(r["radius_min"]),
        radius_max=int(r["radius_max"]),
        distance_m=float(r["distance_m"]),
        gps_valid=bool(r["gps_valid"]),
    )


class MySQLAttendanceRepository(AttendanceRepository, AttendanceLogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_RECORD_COLUMNS}
                FROM attendance_records
                WHERE employee_id=%s AND work_date BETWEEN %s AND %s
                ORDER BY work_date
                """,
                (int(employee_id), start_date, end_date),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (int(attendance_id),))
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_RECORD_COLUMNS} FROM attendance_records WHERE employee_id=%s AND work_date=%s",
                (int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        check_in: Optional[time] = None,
        check_out: Optional[time] = None,
        source: Optional[AttendanceSource] = None,
        note: Optional[str] = None,
    ) -> int:
        with translate_duplicate("Attendance already recorded for this employee on this date"):
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO attendance_records(employee_id, work_date, status, check_in, check_out, source, note)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (
                        int(employee_id),
                        work_date,
                        status.value,
                        check_in,
                        check_out,
                        source.value if source else None,
                        note,
                    ),
                )
                return int(cur.lastrowid)

    def update_checkout(self, *, attendance_id: int, check_out: time, source: Optional[AttendanceSource] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET check_out=%s, source=COALESCE(%s, source)
                WHERE attendance_id=%s AND check_out IS NULL
                """,
                (check_out, source.value if source else None, int(attendance_id)),
            )
            return cur.rowcount == 1

    # -------- GPS logs --------
    def get_log(self, log_id: int) -> Optional[AttendanceLog]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_LOG_COLUMNS} FROM attendance_logs WHERE log_id=%s", (int(log_id),))
            r = fetchone(cur)
            return _to_log(r) if r else None

    def create_log(
        self,
        *,
        attendance_id: int,
        kind: AttendanceLogKind,
        logged_at: datetime,
        latitude: float,
        longitude: float,
        accuracy: Optional[int],
        source: AttendanceSource,
        reference_latitude: float,
        reference_longitude: float,
        radius_min: int,
        radius_max: int,
        distance_m: float,
        gps_valid: bool,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_logs(
                    attendance_id, kind, logged_at, latitude, longitude, accuracy, source,
                    reference_latitude, reference_longitude, radius_min, radius_max, distance_m, gps_valid
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(attendance_id),
                    kind.value,
                    logged_at,
                    latitude,
                    longitude,
                    accuracy,
                    source.value,
                    reference_latitude,
                    reference_longitude,
                    int(radius_min),
                    int(radius_max),
                    distance_m,
                    1 if gps_valid else 0,
                ),
            )
            return int(cur.lastrowid)

    def update_log(self, log: AttendanceLog) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_logs
                SET kind=%s, logged_at=%s, latitude=%s, longitude=%s, accuracy=%s, source=%s,
                    reference_latitude=%s, reference_longitude=%s, radius_min=%s, radius_max=%s,
                    distance_m=%s, gps_valid=%s
                WHERE log_id=%s
                """,
                (
                    log.kind.value,
                    log.logged_at,
                    log.latitude,
                    log.longitude,
                    log.accuracy,
                    log.source.value,
                    log.reference_latitude,
                    log.reference_longitude,
                    log.radius_min,
                    log.radius_max,
                    log.distance_m,
                    1 if log.gps_valid else 0,
                    log.log_id,
                ),
            )
