from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..auth.policy import Capability
from ..common.datetime_utils import Period, parse_iso_date
from ..common.validators import require_positive_id
from ..common.web import employee_scope, json_body, parse_enum, requires, to_json
from ..container import Container
from ..core.enums import LeaveType
from ..core.exceptions import AuthorizationError


def register(app: Flask, container: Container) -> None:
    service = container.leave_service

    @app.route("/api/leaves", methods=["GET"], endpoint="leave_list")
    @requires(Capability.REQUEST_LEAVE, Capability.MANAGE_LEAVE)
    def leave_list():
        employee_id = employee_scope(g.actor, request.args.get("employee_id"), Capability.MANAGE_LEAVE)
        period = Period.parse(request.args.get("period", ""))
        return jsonify(to_json(list(service.list_for_employee(employee_id, period))))

    @app.route("/api/leaves", methods=["POST"], endpoint="leave_submit")
    @requires(Capability.REQUEST_LEAVE, Capability.MANAGE_LEAVE)
    def leave_submit():
        body = json_body()
        req = service.submit(
            employee_id=employee_scope(g.actor, body.get("employee_id"), Capability.MANAGE_LEAVE),
            leave_date=parse_iso_date(body.get("leave_date")),
            leave_type=parse_enum(LeaveType, body.get("leave_type"), "leave_type"),
            note=body.get("note"),
        )
        return jsonify(to_json(req)), 201

    @app.route("/api/leaves/quota", methods=["GET"], endpoint="leave_quota")
    @requires(Capability.REQUEST_LEAVE, Capability.MANAGE_LEAVE)
    def leave_quota():
        exclude_id = request.args.get("exclude_id")
        error = container.leave_quota.check(
            employee_scope(g.actor, request.args.get("employee_id"), Capability.MANAGE_LEAVE),
            parse_enum(LeaveType, request.args.get("leave_type"), "leave_type"),
            parse_iso_date(request.args.get("date")),
            exclude_request_id=require_positive_id(exclude_id, "exclude_id") if exclude_id else None,
        )
        if error is None:
            return jsonify({"ok": True})
        return jsonify({"ok": False, "error": str(error), "count": error.count, "limit": error.limit, "window": error.window})

    @app.route("/api/leaves/<int:request_id>", methods=["GET"], endpoint="leave_get")
    @requires(Capability.REQUEST_LEAVE, Capability.MANAGE_LEAVE)
    def leave_get(request_id: int):
        req = service.get(request_id)
        employee_scope(g.actor, req.employee_id, Capability.MANAGE_LEAVE)
        return jsonify(to_json(req))

    @app.route("/api/leaves/<int:request_id>", methods=["PATCH"], endpoint="leave_update")
    @requires(Capability.REQUEST_LEAVE, Capability.MANAGE_LEAVE)
    def leave_update(request_id: int):
        body = json_body()
        req = service.get(request_id)
        if not g.actor.can(Capability.MANAGE_LEAVE) and not g.actor.owns(req.employee_id):
            raise AuthorizationError("You can only edit your own leave requests")
        updated = service.update(
            request_id,
            leave_date=parse_iso_date(body["leave_date"]) if body.get("leave_date") else None,
            leave_type=parse_enum(LeaveType, body["leave_type"], "leave_type") if body.get("leave_type") else None,
            note=body.get("note"),
        )
        return jsonify(to_json(updated))

    @app.route("/api/leaves/<int:request_id>/approve", methods=["POST"], endpoint="leave_approve")
    @requires(Capability.MANAGE_LEAVE)
    def leave_approve(request_id: int):
        return jsonify(to_json(service.approve(g.actor, request_id)))

    @app.route("/api/leaves/<int:request_id>/reject", methods=["POST"], endpoint="leave_reject")
    @requires(Capability.MANAGE_LEAVE)
    def leave_reject(request_id: int):
        return jsonify(to_json(service.reject(g.actor, request_id)))

    @app.route("/api/leaves/<int:request_id>/cancel", methods=["POST"], endpoint="leave_cancel")
    @requires(Capability.REQUEST_LEAVE)
    def leave_cancel(request_id: int):
        return jsonify(to_json(service.cancel(g.actor, request_id)))

    @app.route("/api/leaves/<int:request_id>/request-cancellation", methods=["POST"], endpoint="leave_request_cancellation")
    @requires(Capability.REQUEST_LEAVE)
    def leave_request_cancellation(request_id: int):
        return jsonify(to_json(service.request_cancellation(g.actor, request_id)))

    @app.route("/api/leaves/<int:request_id>/approve-cancellation", methods=["POST"], endpoint="leave_approve_cancellation")
    @requires(Capability.MANAGE_LEAVE)
    def leave_approve_cancellation(request_id: int):
        return jsonify(to_json(service.approve_cancellation(g.actor, request_id)))

    @app.route("/api/leaves/<int:request_id>/reject-cancellation", methods=["POST"], endpoint="leave_reject_cancellation")
    @requires(Capability.MANAGE_LEAVE)
    def leave_reject_cancellation(request_id: int):
        return jsonify(to_json(service.reject_cancellation(g.actor, request_id)))
