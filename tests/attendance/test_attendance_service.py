import math
from datetime import date, datetime, time

import pytest

from src.payroll_system.payroll_system.attendance.geofence import Coordinate, GeofenceValidator
from src.payroll_system.payroll_system.attendance.service import AttendanceService
from src.payroll_system.payroll_system.core.constants import EARTH_RADIUS_METERS
from src.payroll_system.payroll_system.core.enums import AttendanceLogKind, AttendanceSource, AttendanceStatus
from src.payroll_system.payroll_system.core.exceptions import (
    ConflictError,
    GeofenceViolationError,
    NotFoundError,
    ValidationError,
)

REF = Coordinate(-8.5, 115.1)


def lat_north(meters: float) -> float:
    return REF.latitude + math.degrees(meters / EARTH_RADIUS_METERS)


@pytest.fixture
def service(attendance, employees):
    return AttendanceService(attendance, attendance, employees, geofence=GeofenceValidator(reference=REF))


def test_check_in_then_check_out(service):
    rec = service.check_in(employee_id=1, now=datetime(2025, 1, 6, 8, 0, 12, 500), source=AttendanceSource.MOBILE)
    assert rec.status == AttendanceStatus.PRESENT
    assert rec.check_in == time(8, 0, 12)

    rec = service.check_out(employee_id=1, now=datetime(2025, 1, 6, 17, 0))
    assert rec.check_out == time(17, 0)


def test_second_check_in_same_day_conflicts(service):
    service.check_in(employee_id=1, now=datetime(2025, 1, 6, 8, 0))
    with pytest.raises(ConflictError):
        service.check_in(employee_id=1, now=datetime(2025, 1, 6, 9, 0))


def test_check_out_rules(service):
    with pytest.raises(ValidationError):
        service.check_out(employee_id=1, now=datetime(2025, 1, 6, 17, 0))

    service.check_in(employee_id=1, now=datetime(2025, 1, 6, 8, 0))
    with pytest.raises(ValidationError):
        service.check_out(employee_id=1, now=datetime(2025, 1, 6, 7, 59))

    service.check_out(employee_id=1, now=datetime(2025, 1, 6, 17, 0))
    with pytest.raises(ValidationError):
        service.check_out(employee_id=1, now=datetime(2025, 1, 6, 18, 0))


def test_unknown_employee_cannot_check_in(service):
    with pytest.raises(NotFoundError):
        service.check_in(employee_id=999, now=datetime(2025, 1, 6, 8, 0))


def test_manual_record_duplicate_day_conflicts(service):
    service.record(employee_id=1, work_date=date(2025, 1, 6), status=AttendanceStatus.LEAVE_SHORT)
    with pytest.raises(ConflictError):
        service.record(employee_id=1, work_date=date(2025, 1, 6), status=AttendanceStatus.PRESENT)


def test_manual_record_rejects_inverted_times(service):
    with pytest.raises(ValidationError):
        service.record(
            employee_id=1,
            work_date=date(2025, 1, 6),
            status=AttendanceStatus.PRESENT,
            check_in=time(17, 0),
            check_out=time(8, 0),
        )


def _log(service, attendance_id, meters, **kwargs):
    return service.create_log(
        attendance_id=attendance_id,
        kind=AttendanceLogKind.CHECK_IN,
        logged_at=datetime(2025, 1, 6, 8, 0),
        latitude=lat_north(meters),
        longitude=REF.longitude,
        source=AttendanceSource.MOBILE,
        **kwargs,
    )


def test_log_inside_band_is_stored_with_verdict(service):
    rec = service.check_in(employee_id=1, now=datetime(2025, 1, 6, 8, 0))
    log = _log(service, rec.attendance_id, 30)

    assert log.gps_valid is True
    assert log.distance_m == pytest.approx(30, abs=0.001)
    assert (log.reference_latitude, log.reference_longitude) == (REF.latitude, REF.longitude)
    assert (log.radius_min, log.radius_max) == (20, 50)


def test_log_outside_band_is_rejected_when_enforced(service):
    rec = service.check_in(employee_id=1, now=datetime(2025, 1, 6, 8, 0))
    with pytest.raises(GeofenceViolationError) as exc:
        _log(service, rec.attendance_id, 80)
    assert exc.value.distance == pytest.approx(80, abs=0.001)


def test_log_outside_band_is_flagged_when_not_enforced(attendance, employees):
    service = AttendanceService(
        attendance, attendance, employees, geofence=GeofenceValidator(reference=REF), enforce_geofence=False
    )
    rec = service.check_in(employee_id=1, now=datetime(2025, 1, 6, 8, 0))
    assert _log(service, rec.attendance_id, 80).gps_valid is False


def test_log_for_missing_attendance(service):
    with pytest.raises(NotFoundError):
        _log(service, 42, 30)


def test_update_re_evaluates_on_location_change(attendance, employees):
    service = AttendanceService(
        attendance, attendance, employees, geofence=GeofenceValidator(reference=REF), enforce_geofence=False
    )
    rec = service.check_in(employee_id=1, now=datetime(2025, 1, 6, 8, 0))
    log = _log(service, rec.attendance_id, 30)

    moved = service.update_log(log.log_id, latitude=lat_north(70))
    assert moved.gps_valid is False
    assert attendance.get_log(log.log_id).gps_valid is False


def test_update_re_evaluates_on_radius_change(attendance, employees):
    service = AttendanceService(
        attendance, attendance, employees, geofence=GeofenceValidator(reference=REF), enforce_geofence=False
    )
    rec = service.check_in(employee_id=1, now=datetime(2025, 1, 6, 8, 0))
    log = _log(service, rec.attendance_id, 70)
    assert log.gps_valid is False

    widened = service.update_log(log.log_id, radius_max=100)
    assert widened.gps_valid is True
    assert widened.radius_max == 100


def test_update_rejects_unknown_fields(service):
    rec = service.check_in(employee_id=1, now=datetime(2025, 1, 6, 8, 0))
    log = _log(service, rec.attendance_id, 30)
    with pytest.raises(ValidationError):
        service.update_log(log.log_id, gps_valid=True)


def test_update_into_violation_is_rejected_when_enforced(service):
    rec = service.check_in(employee_id=1, now=datetime(2025, 1, 6, 8, 0))
    log = _log(service, rec.attendance_id, 30)
    with pytest.raises(GeofenceViolationError):
        service.update_log(log.log_id, radius_min=40)
