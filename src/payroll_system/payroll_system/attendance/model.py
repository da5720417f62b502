from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.enums import AttendanceLogKind, AttendanceSource, AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """One employee's attendance for one calendar day."""

    attendance_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    check_in: Optional[time] = None
    check_out: Optional[time] = None
    source: Optional[AttendanceSource] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class AttendanceLog:
    """A GPS-stamped check-in/check-out event with its geofence verdict."""

    log_id: int
    attendance_id: int
    kind: AttendanceLogKind
    logged_at: datetime
    latitude: float
    longitude: float
    accuracy: Optional[int]
    source: AttendanceSource
    reference_latitude: float
    reference_longitude: float
    radius_min: int
    radius_max: int
    distance_m: float
    gps_valid: bool


@dataclass(frozen=True)
class AttendanceSummary:
    """Day-type counts for one employee and one period."""

    present: int
    personal_leave: int
    sick_leave: int
    unexcused_absence: int
    working_days: int
    vacation: int = 0
