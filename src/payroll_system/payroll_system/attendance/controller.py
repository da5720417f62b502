from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.policy import Capability
from ..common.datetime_utils import Period, now_local, parse_iso_date, parse_iso_datetime
from ..common.validators import require_positive_id
from ..common.web import employee_scope, json_body, parse_enum, requires, to_json
from ..container import Container
from ..core.enums import AttendanceLogKind, AttendanceSource, AttendanceStatus
from ..core.exceptions import AuthorizationError, ValidationError
from .geofence import Coordinate


def _float(body: dict, key: str, *, required: bool = True):
    value = body.get(key)
    if value is None or value == "":
        if required:
            raise ValidationError(f"{key} is required")
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be a number")


def _int(body: dict, key: str):
    value = body.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{key} must be an integer")


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    @requires(Capability.RECORD_ATTENDANCE, Capability.MANAGE_ATTENDANCE)
    def attendance_list():
        employee_id = employee_scope(g.actor, request.args.get("employee_id"), Capability.MANAGE_ATTENDANCE)
        period = Period.parse(request.args.get("period", ""))
        return jsonify(to_json(list(service.list_for_employee(employee_id, period))))

    @app.route("/api/attendance", methods=["POST"], endpoint="attendance_record")
    @requires(Capability.MANAGE_ATTENDANCE)
    def attendance_record():
        body = json_body()
        record = service.record(
            employee_id=require_positive_id(body.get("employee_id"), "employee_id"),
            work_date=parse_iso_date(body.get("work_date")),
            status=parse_enum(AttendanceStatus, body.get("status"), "status"),
            note=body.get("note"),
            source=parse_enum(AttendanceSource, body["source"], "source") if body.get("source") else None,
        )
        return jsonify(to_json(record)), 201

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @requires(Capability.RECORD_ATTENDANCE)
    def attendance_check_in():
        body = json_body()
        if g.actor.employee_id is None:
            raise AuthorizationError("No employee profile linked to this account")
        record = service.check_in(
            employee_id=g.actor.employee_id,
            source=parse_enum(AttendanceSource, body.get("source", "web"), "source"),
        )
        return jsonify(to_json(record)), 201

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @requires(Capability.RECORD_ATTENDANCE)
    def attendance_check_out():
        body = json_body()
        if g.actor.employee_id is None:
            raise AuthorizationError("No employee profile linked to this account")
        record = service.check_out(
            employee_id=g.actor.employee_id,
            source=parse_enum(AttendanceSource, body.get("source", "web"), "source"),
        )
        return jsonify(to_json(record))

    @app.route("/api/attendance/<int:attendance_id>/logs", methods=["POST"], endpoint="attendance_log_create")
    @requires(Capability.RECORD_ATTENDANCE, Capability.MANAGE_ATTENDANCE)
    def attendance_log_create(attendance_id: int):
        body = json_body()
        record = service.get(attendance_id)
        if not g.actor.can(Capability.MANAGE_ATTENDANCE) and not g.actor.owns(record.employee_id):
            raise AuthorizationError("You can only log your own attendance")
        logged_at = body.get("logged_at")
        log = service.create_log(
            attendance_id=attendance_id,
            kind=parse_enum(AttendanceLogKind, body.get("kind"), "kind"),
            logged_at=parse_iso_datetime(logged_at) if logged_at else now_local(),
            latitude=_float(body, "latitude"),
            longitude=_float(body, "longitude"),
            accuracy=_int(body, "accuracy"),
            source=parse_enum(AttendanceSource, body.get("source", "mobile"), "source"),
            reference_latitude=_float(body, "reference_latitude", required=False),
            reference_longitude=_float(body, "reference_longitude", required=False),
            radius_min=_int(body, "radius_min"),
            radius_max=_int(body, "radius_max"),
        )
        return jsonify(to_json(log)), 201

    @app.route("/api/attendance/logs/<int:log_id>", methods=["PATCH"], endpoint="attendance_log_update")
    @requires(Capability.MANAGE_ATTENDANCE)
    def attendance_log_update(log_id: int):
        body = json_body()
        changes = {}
        for key in ("latitude", "longitude", "reference_latitude", "reference_longitude"):
            if key in body:
                changes[key] = _float(body, key)
        for key in ("accuracy", "radius_min", "radius_max"):
            if key in body:
                changes[key] = _int(body, key)
        if "kind" in body:
            changes["kind"] = parse_enum(AttendanceLogKind, body["kind"], "kind")
        if "source" in body:
            changes["source"] = parse_enum(AttendanceSource, body["source"], "source")
        if body.get("logged_at"):
            changes["logged_at"] = parse_iso_datetime(body["logged_at"])
        return jsonify(to_json(service.update_log(log_id, **changes)))

    @app.route("/api/geofence/check", methods=["POST"], endpoint="geofence_check")
    @requires(Capability.RECORD_ATTENDANCE, Capability.MANAGE_ATTENDANCE)
    def geofence_check():
        body = json_body()
        reference = None
        if body.get("reference_latitude") is not None and body.get("reference_longitude") is not None:
            reference = Coordinate(_float(body, "reference_latitude"), _float(body, "reference_longitude"))
        result = container.geofence.check(
            Coordinate(_float(body, "latitude"), _float(body, "longitude")),
            reference,
            _int(body, "radius_min"),
            _int(body, "radius_max"),
        )
        return jsonify(to_json(result))
