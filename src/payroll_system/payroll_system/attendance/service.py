from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time
from typing import Optional, Sequence

from ..common.datetime_utils import Period, now_local
from ..core.enums import AttendanceLogKind, AttendanceSource, AttendanceStatus
from ..core.exceptions import ConflictError, GeofenceViolationError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .geofence import Coordinate, GeofenceValidator
from .model import AttendanceLog, AttendanceRecord
from .repository import AttendanceLogRepository, AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        logs: AttendanceLogRepository,
        employees: EmployeeRepository,
        *,
        geofence: Optional[GeofenceValidator] = None,
        enforce_geofence: bool = True,
    ):
        self._attendance = attendance
        self._logs = logs
        self._employees = employees
        self._geofence = geofence or GeofenceValidator()
        self._enforce_geofence = bool(enforce_geofence)

    def _require_employee(self, employee_id: int) -> None:
        if not self._employees.get_by_id(int(employee_id)):
            raise NotFoundError("Employee not found", resource="employee")

    def get(self, attendance_id: int) -> AttendanceRecord:
        record = self._attendance.get_by_id(int(attendance_id))
        if not record:
            raise NotFoundError("Attendance record not found", resource="attendance")
        return record

    def list_for_employee(self, employee_id: int, period: Period) -> Sequence[AttendanceRecord]:
        return self._attendance.find_for_employee(int(employee_id), period.start, period.end)

    def record(
        self,
        *,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        check_in: Optional[time] = None,
        check_out: Optional[time] = None,
        source: Optional[AttendanceSource] = None,
        note: Optional[str] = None,
    ) -> AttendanceRecord:
        """Manual entry of a day's attendance (present or leave-short)."""
        self._require_employee(employee_id)
        if check_in and check_out and check_out <= check_in:
            raise ValidationError("Check-out must be later than check-in")
        if self._attendance.get_for_employee_and_date(int(employee_id), work_date):
            raise ConflictError("Attendance already recorded for this employee on this date")

        attendance_id = self._attendance.create(
            employee_id=int(employee_id),
            work_date=work_date,
            status=status,
            check_in=check_in,
            check_out=check_out,
            source=source,
            note=note,
        )
        return self._attendance.get_by_id(attendance_id)

    def check_in(
        self,
        *,
        employee_id: int,
        now: Optional[datetime] = None,
        source: Optional[AttendanceSource] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        self._require_employee(employee_id)

        if self._attendance.get_for_employee_and_date(int(employee_id), now.date()):
            raise ConflictError("Already checked in today, check out first")

        attendance_id = self._attendance.create(
            employee_id=int(employee_id),
            work_date=now.date(),
            status=AttendanceStatus.PRESENT,
            check_in=now.time().replace(microsecond=0),
            source=source,
        )
        return self._attendance.get_by_id(attendance_id)

    def check_out(
        self,
        *,
        employee_id: int,
        now: Optional[datetime] = None,
        source: Optional[AttendanceSource] = None,
    ) -> AttendanceRecord:
        now = now or now_local()

        record = self._attendance.get_for_employee_and_date(int(employee_id), now.date())
        if not record:
            raise ValidationError("Not checked in today, check in first")
        if record.check_in is None:
            raise ValidationError("Attendance record has no check-in time")
        if record.check_out is not None:
            raise ValidationError("Already checked out today")

        check_out = now.time().replace(microsecond=0)
        if check_out <= record.check_in:
            raise ValidationError("Check-out must be later than check-in")

        if not self._attendance.update_checkout(attendance_id=record.attendance_id, check_out=check_out, source=source):
            raise ConflictError("Attendance record was checked out concurrently")
        return self._attendance.get_by_id(record.attendance_id)

    def _evaluate(self, latitude: float, longitude: float, reference: Coordinate, radius_min: int, radius_max: int):
        result = self._geofence.check(Coordinate(latitude, longitude), reference, radius_min, radius_max)
        if not result.valid and self._enforce_geofence:
            logger.info(
                "geofence rejected log",
                extra={"distance_m": result.distance, "radius_min": radius_min, "radius_max": radius_max},
            )
            raise GeofenceViolationError(
                f"Location is {result.distance:.1f} m from the reference, allowed {radius_min}-{radius_max} m",
                distance=result.distance,
            )
        return result

    def create_log(
        self,
        *,
        attendance_id: int,
        kind: AttendanceLogKind,
        logged_at: datetime,
        latitude: float,
        longitude: float,
        source: AttendanceSource,
        accuracy: Optional[int] = None,
        reference_latitude: Optional[float] = None,
        reference_longitude: Optional[float] = None,
        radius_min: Optional[int] = None,
        radius_max: Optional[int] = None,
    ) -> AttendanceLog:
        self.get(attendance_id)

        defaults = self._geofence
        reference = Coordinate(
            defaults.reference.latitude if reference_latitude is None else reference_latitude,
            defaults.reference.longitude if reference_longitude is None else reference_longitude,
        )
        lo = defaults.radius_min if radius_min is None else int(radius_min)
        hi = defaults.radius_max if radius_max is None else int(radius_max)

        result = self._evaluate(latitude, longitude, reference, lo, hi)

        log_id = self._logs.create_log(
            attendance_id=int(attendance_id),
            kind=kind,
            logged_at=logged_at,
            latitude=float(latitude),
            longitude=float(longitude),
            accuracy=accuracy,
            source=source,
            reference_latitude=reference.latitude,
            reference_longitude=reference.longitude,
            radius_min=lo,
            radius_max=hi,
            distance_m=result.distance,
            gps_valid=result.valid,
        )
        return self._logs.get_log(log_id)

    def update_log(self, log_id: int, **changes) -> AttendanceLog:
        """Apply field changes and re-evaluate the geofence against the merged values."""
        current = self._logs.get_log(int(log_id))
        if not current:
            raise NotFoundError("Attendance log not found", resource="attendance_log")

        allowed = {
            "kind",
            "logged_at",
            "latitude",
            "longitude",
            "accuracy",
            "source",
            "reference_latitude",
            "reference_longitude",
            "radius_min",
            "radius_max",
        }
        unknown = set(changes) - allowed
        if unknown:
            raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

        merged = replace(current, **{k: v for k, v in changes.items() if v is not None})
        reference = Coordinate(merged.reference_latitude, merged.reference_longitude)
        result = self._evaluate(merged.latitude, merged.longitude, reference, merged.radius_min, merged.radius_max)

        updated = replace(merged, distance_m=result.distance, gps_valid=result.valid)
        self._logs.update_log(updated)
        return updated
