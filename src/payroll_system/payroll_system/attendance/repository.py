from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceLogKind, AttendanceSource, AttendanceStatus
from .model import AttendanceLog, AttendanceRecord


class AttendanceRepository(Protocol):
    def find_for_employee(self, employee_id: int, start_date: date, end_date: date) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def get_by_id(self, attendance_id: int) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def get_for_employee_and_date(self, employee_id: int, work_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert one record; raises ConflictError on a duplicate (employee, date)."""

        raise NotImplementedError

    def update_checkout(self, *, attendance_id: int, check_out: time, source: Optional[AttendanceSource] = None) -> bool:
        raise NotImplementedError


class AttendanceLogRepository(Protocol):
    def get_log(self, log_id: int) -> Optional[AttendanceLog]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_log(self, log: AttendanceLog) -> None:
        raise NotImplementedError
